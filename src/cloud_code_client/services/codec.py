"""
Encoding of call parameters into the JSON wire format and decoding of server
responses back into Python values.

Built-in value types travel inside a ``{"__type": ...}`` envelope. References
to persisted entities are only accepted when explicitly allowed; call and job
parameters never allow them.
"""
import base64
import binascii
import logging
import math
from datetime import datetime, timezone
from typing import Any, Mapping

from pydantic import ValidationError

from cloud_code_client.constants.api_constants import ValueTypes
from cloud_code_client.exceptions.exceptions import (
    EntityReferenceNotAllowedException,
    InvalidResponseException,
    UnsupportedValueException,
)
from cloud_code_client.models.values import EntityReference, GeoPoint

logger = logging.getLogger(__name__)

_POINTER_KEYS = {ValueTypes.TYPE_KEY, "className", "objectId"}


def encode(value: Any, allow_entity_references: bool = False) -> Any:
    """Encode a value for transmission.

    Raises:
        EntityReferenceNotAllowedException: An entity reference was found
            anywhere inside the value and references are not allowed.
        UnsupportedValueException: The value (or a nested value) has no
            wire representation.
    """
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, float) and not math.isfinite(value):
        # NaN and infinities have no JSON form
        raise UnsupportedValueException(f"non-finite float {value}")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, EntityReference):
        if not allow_entity_references:
            raise EntityReferenceNotAllowedException()
        return {
            ValueTypes.TYPE_KEY: ValueTypes.POINTER,
            "className": value.class_name,
            "objectId": value.object_id,
        }
    if isinstance(value, GeoPoint):
        return {
            ValueTypes.TYPE_KEY: ValueTypes.GEO_POINT,
            "latitude": value.latitude,
            "longitude": value.longitude,
        }
    if isinstance(value, datetime):
        return {ValueTypes.TYPE_KEY: ValueTypes.DATE, "iso": _format_date(value)}
    if isinstance(value, (bytes, bytearray)):
        return {
            ValueTypes.TYPE_KEY: ValueTypes.BYTES,
            "base64": base64.b64encode(bytes(value)).decode("ascii"),
        }
    if isinstance(value, (list, tuple)):
        return [encode(item, allow_entity_references) for item in value]
    if isinstance(value, Mapping):
        encoded = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise UnsupportedValueException(f"{type(key).__name__} key")
            encoded[key] = encode(item, allow_entity_references)
        return encoded
    raise UnsupportedValueException(type(value).__name__)


def encode_params(params: Any) -> dict:
    """Encode a call's parameter payload; entity references are rejected."""
    if params is None:
        return {}
    if not isinstance(params, Mapping):
        raise UnsupportedValueException(type(params).__name__)
    return encode(params, allow_entity_references=False)


def decode(value: Any) -> Any:
    """Decode a JSON value received from the server."""
    if isinstance(value, list):
        return [decode(item) for item in value]
    if not isinstance(value, dict):
        return value

    value_type = value.get(ValueTypes.TYPE_KEY)
    try:
        return _decode_envelope(value_type, value)
    except (ValidationError, binascii.Error) as e:
        raise InvalidResponseException(f"Invalid {value_type} value: {e}") from e


def _decode_envelope(value_type: Any, value: dict) -> Any:
    if value_type == ValueTypes.DATE:
        return _parse_date(value.get("iso"))
    if value_type == ValueTypes.GEO_POINT:
        return GeoPoint(value.get("latitude", 0.0), value.get("longitude", 0.0))
    if value_type == ValueTypes.BYTES:
        return base64.b64decode(value.get("base64", ""), validate=True)
    if value_type == ValueTypes.POINTER:
        return EntityReference(class_name=value.get("className", ""), object_id=value.get("objectId"))
    if value_type == ValueTypes.OBJECT:
        attributes = {k: decode(v) for k, v in value.items() if k not in _POINTER_KEYS}
        return EntityReference(
            class_name=value.get("className", ""),
            object_id=value.get("objectId"),
            attributes=attributes,
        )
    if value_type is not None:
        logger.debug(f"Leaving value with unknown __type '{value_type}' undecoded")

    return {key: decode(item) for key, item in value.items()}


def _format_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def _parse_date(iso: Any) -> datetime:
    if not isinstance(iso, str):
        raise InvalidResponseException(f"Invalid Date value: {iso!r}")
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00"))
    except ValueError as e:
        raise InvalidResponseException(f"Invalid Date value: {iso!r}") from e
