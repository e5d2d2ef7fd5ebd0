import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field
from app.models.enums import EventType
from app.schemas.base import CamelModel, NonNilUUID, UtcDateTime
from app.schemas.pagination import Link


class EventCreate(CamelModel):
    user_id: NonNilUUID
    type: EventType = EventType.START_FOCUS_SESSION
    start_date: Optional[UtcDateTime] = None


class EventUpdate(CamelModel):
    id: uuid.UUID
    user_id: NonNilUUID
    type: EventType
    start_date: UtcDateTime
    end_date: Optional[UtcDateTime] = None
    duration: int = Field(default=0, ge=0)


class EventOut(CamelModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: EventType
    start_date: datetime
    end_date: Optional[datetime] = None
    duration: int
    links: List[Link] = []
