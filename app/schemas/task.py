import uuid
from datetime import datetime
from typing import List, Optional
from pydantic import Field
from app.models.enums import Priority, TaskSituation
from app.schemas.base import CamelModel, NonNilUUID, UtcDateTime
from app.schemas.pagination import Link


class TaskBase(CamelModel):
    user_id: NonNilUUID
    title: str = Field(min_length=1, max_length=255)
    priority: Priority
    estimate_minutes: int = Field(ge=0)
    description: str = Field(min_length=1)


class TaskCreate(TaskBase):
    situation: TaskSituation = TaskSituation.OPEN


class TaskUpdate(TaskBase):
    """Full replacement of a stored task."""

    id: uuid.UUID
    situation: TaskSituation
    created_at: UtcDateTime
    final_date: Optional[UtcDateTime] = None
    spent_minutes: int = Field(default=0, ge=0)


class TaskOut(TaskBase):
    id: uuid.UUID
    user_id: uuid.UUID
    situation: TaskSituation
    created_at: datetime
    final_date: Optional[datetime] = None
    spent_minutes: int
    links: List[Link] = []
