import uuid
from datetime import datetime, timezone
from typing import Annotated
from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel


def _not_nil(value: uuid.UUID) -> uuid.UUID:
    if value.int == 0:
        raise ValueError("UserID cannot be empty GUID.")
    return value


def _naive_utc(value: datetime) -> datetime:
    # Stored columns are naive UTC, offsets are converted not dropped
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


NonNilUUID = Annotated[uuid.UUID, AfterValidator(_not_nil)]
UtcDateTime = Annotated[datetime, AfterValidator(_naive_utc)]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; accepts either on input."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
