import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Enum, Integer, Uuid
from app.database import Base
from app.models.enums import EventType


class Event(Base):
    """A focus session. Ending it flips the type to END_FOCUS_SESSION."""

    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    type = Column(Enum(EventType), default=EventType.START_FOCUS_SESSION, nullable=False)
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    end_date = Column(DateTime, nullable=True)
    duration = Column(Integer, default=0, nullable=False)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
