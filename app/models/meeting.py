import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
from app.database import Base


class Meeting(Base):
    __tablename__ = "meetings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    start_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    end_date = Column(DateTime, nullable=True)
    minutes_duration = Column(Integer, nullable=True)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
