# backend/directory/services/search/pagination.py
"""Page slicing over an already sorted result list."""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class PageSlice(Generic[T]):
    items: List[T]
    page: int
    limit: int
    total: int
    total_pages: int


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValueError("limit must be positive")
    return math.ceil(total / limit)


def paginate(items: Sequence[T], page: int, limit: int) -> PageSlice[T]:
    """
    Slice ``items[(page-1)*limit : page*limit]``.

    ``total`` counts the full pre-slice sequence; pages past the end are empty.
    """
    if page < 1:
        raise ValueError("page must be >= 1")
    start = (page - 1) * limit
    return PageSlice(
        items=list(items[start : start + limit]),
        page=page,
        limit=limit,
        total=len(items),
        total_pages=total_pages(len(items), limit),
    )


def sql_page(items: Sequence[T], page: int, limit: int, total: int) -> PageSlice[T]:
    """Wrap a page already sliced by the database, with ``total`` counted separately."""
    return PageSlice(
        items=list(items),
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages(total, limit),
    )
