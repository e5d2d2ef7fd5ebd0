import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Enum, Integer, String, Text, Uuid
from app.database import Base
from app.models.enums import Priority, TaskSituation


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    priority = Column(Enum(Priority), nullable=False)
    estimate_minutes = Column(Integer, nullable=False)
    description = Column(Text, nullable=False)
    situation = Column(Enum(TaskSituation), default=TaskSituation.OPEN, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    final_date = Column(DateTime, nullable=True)
    spent_minutes = Column(Integer, default=0, nullable=False)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
