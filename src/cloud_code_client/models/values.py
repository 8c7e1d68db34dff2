from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeoPoint(BaseModel):
    """
    A geographic coordinate pair.

    Attributes:
        latitude: Degrees north, between -90 and 90
        longitude: Degrees east, between -180 and 180
    """
    latitude: float = Field(0.0, description="Degrees north")
    longitude: float = Field(0.0, description="Degrees east")

    model_config = ConfigDict(frozen=True)

    def __init__(self, latitude: float = 0.0, longitude: float = 0.0, **data: Any):
        super().__init__(latitude=latitude, longitude=longitude, **data)

    @field_validator("latitude")
    @classmethod
    def _check_latitude(cls, value: float) -> float:
        if not -90.0 <= value <= 90.0:
            raise ValueError(f"GeoPoint latitude {value} out of bounds [-90, 90]")
        return value

    @field_validator("longitude")
    @classmethod
    def _check_longitude(cls, value: float) -> float:
        if not -180.0 <= value <= 180.0:
            raise ValueError(f"GeoPoint longitude {value} out of bounds [-180, 180]")
        return value


class EntityReference(BaseModel):
    """
    A reference to an object persisted on the server.

    Such values are never accepted as function or job parameters. They are
    produced when decoding server responses that contain pointers or objects.
    """
    class_name: str = Field(..., description="The server-side class of the object", alias="className")
    object_id: Optional[str] = Field(None, description="The object id; None for unsaved objects", alias="objectId")
    attributes: Dict[str, Any] = Field(default_factory=dict, description="Fields included with a full object")

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "className": "TestClass",
                "objectId": "a1B2c3D4e5"
            }
        }
    )
