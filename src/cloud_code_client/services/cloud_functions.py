import logging
from typing import Any, Awaitable, Mapping, Optional

from cloud_code_client.constants.api_constants import ApiConstants
from cloud_code_client.exceptions.exceptions import InvalidParameterException, MasterKeyRequiredException
from cloud_code_client.services.codec import decode, encode_params
from cloud_code_client.services.http_client import HttpClientService


def validate_name(parameter_name: str, name: Any) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidParameterException(parameter_name, "must be a non-empty string")
    return name


class CloudFunctionService:
    """Invokes named cloud functions on the server."""

    def __init__(self, http_client_service: HttpClientService):
        self.logger = logging.getLogger(__name__)
        self.http_client_service = http_client_service

    def run(
        self,
        name: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        use_master_key: bool = False,
        session_token: Optional[str] = None
    ) -> Awaitable[Any]:
        """
        Call a cloud function and return an awaitable for its result.

        Arguments are validated and encoded before this method returns, so an
        invalid call raises here rather than when the result is awaited.

        Args:
            name: Name of the cloud function.
            params: Parameters passed to the function. Plain JSON values,
                datetimes, bytes and GeoPoints are allowed.
            use_master_key: Send the master key with the request.
            session_token: Run the function on behalf of this session.

        Returns:
            An awaitable resolving to the decoded return value, or None when
            the function returned nothing.

        Raises:
            InvalidParameterException: The name is empty or not a string.
            EntityReferenceNotAllowedException: params contain an entity reference.
            UnsupportedValueException: params contain a value with no wire form.
            MasterKeyRequiredException: use_master_key without a configured key.
        """
        validate_name("name", name)
        payload = encode_params(params)
        if use_master_key and not self.http_client_service.config_service.get_master_key():
            raise MasterKeyRequiredException(f"Cloud function '{name}'")
        return self._run(name, payload, use_master_key, session_token)

    async def _run(self, name: str, payload: dict, use_master_key: bool, session_token: Optional[str]) -> Any:
        path = ApiConstants.FUNCTIONS_PATH.format(name=name)
        self.logger.debug(f"Running cloud function '{name}'")
        response = await self.http_client_service.post(
            path,
            payload,
            use_master_key=use_master_key,
            session_token=session_token
        )
        body = decode(HttpClientService.decode_json(response))
        if isinstance(body, dict) and "result" in body:
            return body["result"]
        return None
