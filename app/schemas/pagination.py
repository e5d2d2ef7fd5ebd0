from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel
from app.schemas.base import CamelModel

T = TypeVar("T")


class Link(BaseModel):
    rel: str
    href: Optional[str] = None
    method: str


class PagedResult(CamelModel, Generic[T]):
    items: List[T] = []
    current_page: int
    page_size: int
    total_items: int
    links: List[Link] = []


class ItemEnvelope(CamelModel, Generic[T]):
    """Same metadata as PagedResult but carrying a single item."""

    item: T
    current_page: int
    page_size: int
    total_items: int
    links: List[Link] = []


class ErrorResponse(BaseModel):
    error: str
    id: str
