import uuid
from typing import List
from pydantic import BaseModel, EmailStr, Field
from app.schemas.base import CamelModel
from app.schemas.pagination import Link


class UserBase(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr


class UserCreate(UserBase):
    password: str = Field(min_length=1)


class UserUpdate(UserBase):
    id: uuid.UUID
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    links: List[Link] = []


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
