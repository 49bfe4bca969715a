"""Pagination math shared by both search modes."""

import math
from typing import Sequence, TypeVar

from src.schemas.search import PaginationMeta

T = TypeVar("T")


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def build_pagination(total: int, page: int, page_size: int) -> PaginationMeta:
    total_pages = math.ceil(total / page_size) if total > 0 else 0
    return PaginationMeta(
        total=total,
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )


def slice_page(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """In-memory page for distance mode, where ordering happens after the fetch."""
    start = page_offset(page, page_size)
    return list(items[start:start + page_size])
