from fastapi import Query
from app.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.services.pagination import PageParams


def get_page_params(
    pageNumber: int = Query(1, ge=1, description="Page number (default: 1)"),
    pageSize: int = Query(
        DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE,
        description=f"Page size (default: {DEFAULT_PAGE_SIZE}, max: {MAX_PAGE_SIZE})",
    ),
) -> PageParams:
    return PageParams(page_number=pageNumber, page_size=pageSize)
