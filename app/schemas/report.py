import uuid
from datetime import date
from typing import Optional
from app.schemas.base import CamelModel


class Report(CamelModel):
    user_id: uuid.UUID
    start_date: date
    end_date: date
    completed_tasks: int = 0
    in_progress_tasks: int = 0
    finished_meetings: int = 0
    focus_minutes: int = 0
    completion_percentage: float = 0
    # Reserved, never computed
    burnout_risk: Optional[float] = None
    productivity_trend: Optional[str] = None
    focus_trend: Optional[str] = None
    insights: Optional[str] = None
