import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String, Text, Uuid
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    version_id = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}
