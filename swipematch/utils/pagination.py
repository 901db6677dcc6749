"""
Offset pagination helpers shared by the swipe-history and match-list
endpoints.
"""

from fastapi import Query
from pydantic import BaseModel, Field
import math


def calculate_offset(page: int, page_size: int) -> int:
    """
    Calculate database offset from a 1-indexed page number.

    Example:
        >>> calculate_offset(1, 20)
        0
        >>> calculate_offset(3, 10)
        20
    """
    if page < 1:
        raise ValueError("Page must be >= 1")
    if page_size < 1:
        raise ValueError("Page size must be >= 1")

    return (page - 1) * page_size


def calculate_total_pages(total: int, page_size: int) -> int:
    """
    Example:
        >>> calculate_total_pages(95, 20)
        5
        >>> calculate_total_pages(0, 20)
        0
    """
    if total < 0:
        raise ValueError("Total must be >= 0")
    if page_size < 1:
        raise ValueError("Page size must be >= 1")

    return math.ceil(total / page_size) if total else 0


class PaginationParams(BaseModel):
    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page (max 100)")

    @classmethod
    def as_query(
        cls,
        page: int = Query(1, ge=1),
        page_size: int = Query(20, ge=1, le=100),
    ) -> "PaginationParams":
        """FastAPI dependency reading ``page``/``page_size`` from the query string."""
        return cls(page=page, page_size=page_size)

    def get_offset(self) -> int:
        return calculate_offset(self.page, self.page_size)


class PaginationMeta(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    has_next: bool
    has_previous: bool

    @classmethod
    def from_params(cls, params: PaginationParams, total: int) -> "PaginationMeta":
        total_pages = calculate_total_pages(total, params.page_size)
        return cls(
            page=params.page,
            page_size=params.page_size,
            total=total,
            total_pages=total_pages,
            has_next=params.page < total_pages,
            has_previous=params.page > 1,
        )
