import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field
from app.schemas.base import CamelModel, NonNilUUID, UtcDateTime
from app.schemas.pagination import Link


class MeetingBase(CamelModel):
    user_id: NonNilUUID
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)


class MeetingCreate(MeetingBase):
    start_date: Optional[UtcDateTime] = None


class MeetingUpdate(MeetingBase):
    id: uuid.UUID
    start_date: UtcDateTime
    end_date: Optional[UtcDateTime] = None
    minutes_duration: Optional[int] = Field(default=None, ge=0)


class MeetingOut(MeetingBase):
    id: uuid.UUID
    user_id: uuid.UUID
    start_date: datetime
    end_date: Optional[datetime] = None
    minutes_duration: Optional[int] = None
    links: List[Link] = []
