from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from vmdash.models.vm import VMStatus

# Python field names; checked for presence (non-empty) by the service and by
# the store client when it creates records offline
REQUIRED_CREATE_FIELDS: tuple[str, ...] = ("name", "region", "status", "ip_address")
REQUIRED_UPDATE_FIELDS: tuple[str, ...] = ("status",)

# Field names are camelCased at the HTTP boundary (ipAddress, createdAt, ...)
_camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VMCreate(BaseModel):
    """Create payload.

    Every field is optional at the type level; required-field presence is
    checked by VMService so a missing field yields a 400 rather than a 422.
    """

    model_config = _camel_config

    name: str | None = None
    region: str | None = None
    status: VMStatus | None = None
    cpu: int | None = None
    memory: int | None = None
    storage: int | None = None
    ip_address: str | None = None


class VMUpdate(BaseModel):
    model_config = _camel_config

    status: VMStatus | None = None
    cpu: int | None = None
    memory: int | None = None
    storage: int | None = None


class VMResponse(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True, frozen=True
    )

    id: str
    name: str
    region: str
    status: VMStatus
    cpu: int = 0
    memory: int = 0
    storage: int = 0
    ip_address: str
    # Demo records carry no timestamps
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeleteResponse(BaseModel):
    message: str = Field(default="VM deleted successfully")


def missing_fields(payload: VMCreate | VMUpdate, required: tuple[str, ...]) -> list[str]:
    """Return the wire (camelCase) names of required fields that are absent or empty."""
    return [to_camel(field) for field in required if not getattr(payload, field)]
