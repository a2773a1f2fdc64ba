"""Shared Schemas — money type, pagination metadata and response envelopes.

Invariants:
    - Amount fields are Decimal in Python and plain JSON numbers on the wire
    - Every paginated listing reports page, limit, total and totalPages
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field, PlainSerializer

T = TypeVar("T")

Amount = Annotated[
    Decimal, PlainSerializer(float, return_type=float, when_used="json"),
]


class PaginationMeta(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class Page(BaseModel, Generic[T]):
    """Paginated listing: `data` rows plus pagination metadata."""
    data: list[T]
    pagination: PaginationMeta


class Envelope(BaseModel, Generic[T]):
    """Success envelope shared by all JSON endpoints."""
    data: T | None = None
    message: str | None = None


class PageQuery(BaseModel):
    """page/limit query parameters with the listing defaults."""
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=100)
