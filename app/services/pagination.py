from dataclasses import dataclass
from typing import Optional, Type
from pydantic import BaseModel
from sqlalchemy.orm import Query
from app.core.config import DEFAULT_PAGE_SIZE
from app.schemas.pagination import PagedResult


@dataclass(frozen=True)
class PageParams:
    page_number: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError(f"page_number must be >= 1, got {self.page_number}")
        if self.page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {self.page_size}")

    @property
    def offset(self) -> int:
        return (self.page_number - 1) * self.page_size


def paginate(query: Query, params: PageParams, schema: Optional[Type[BaseModel]] = None) -> PagedResult:
    """
    Slice ``query`` into one page.

    Runs a count over the unpaged query plus one ranged fetch. The query must
    already carry a stable ORDER BY. Rows are converted with ``schema`` when
    one is given.
    """
    total_items = query.order_by(None).count()
    rows = query.offset(params.offset).limit(params.page_size).all()
    if schema is not None:
        rows = [schema.model_validate(row) for row in rows]
        result_type = PagedResult[schema]
    else:
        result_type = PagedResult
    return result_type(
        items=rows,
        current_page=params.page_number,
        page_size=params.page_size,
        total_items=total_items,
    )
