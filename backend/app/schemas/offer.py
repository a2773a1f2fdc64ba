"""Offer Schemas — Pydantic models with field-level validation for offer endpoints.

Invariants:
    - Amounts arrive and leave in major units (PLN); services convert to minor units
    - minimum_investment <= target_amount, reported on the minimum_investment field
    - end_at must lie in the future when an offer is created
    - images: ordered URL list, position = display order; None on update means
      "leave existing images untouched", [] means "remove all"

Design Decisions:
    - Cross-field rule as field_validator reading info.data: the error lands on
      the offending field instead of the model root
    - Naive datetimes are read as UTC; aware ones are converted to UTC
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.core import messages
from app.core.domain_types import OfferSortField, OfferStatus
from app.schemas.common import Amount, PageQuery

MAX_TARGET_AMOUNT = Decimal("1000000000")
MAX_MINIMUM_INVESTMENT = Decimal("100000000")
MAX_IMAGES = 10

ImageUrl = Annotated[str, Field(min_length=1, max_length=2000)]


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OfferWrite(BaseModel):
    """Fields shared by create and full-replace update."""
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    target_amount: Decimal = Field(gt=0, le=MAX_TARGET_AMOUNT)
    minimum_investment: Decimal = Field(gt=0, le=MAX_MINIMUM_INVESTMENT)
    end_at: datetime

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("minimum_investment")
    @classmethod
    def minimum_not_above_target(cls, v: Decimal, info: ValidationInfo) -> Decimal:
        target = info.data.get("target_amount")
        if target is not None and v > target:
            raise ValueError(messages.OFFER_MINIMUM_ABOVE_TARGET)
        return v

    @field_validator("end_at")
    @classmethod
    def normalize_end_at(cls, v: datetime) -> datetime:
        return _utc(v)


class OfferCreate(OfferWrite):
    """Offer creation — status is never accepted from the client (always draft)."""
    images: list[ImageUrl] = Field(default_factory=list, max_length=MAX_IMAGES)

    @field_validator("end_at")
    @classmethod
    def end_at_in_future(cls, v: datetime) -> datetime:
        if _utc(v) <= datetime.now(timezone.utc):
            raise ValueError(messages.OFFER_END_IN_PAST)
        return v


class OfferUpdate(OfferWrite):
    """Full replace of scalar fields; images optional."""
    images: list[ImageUrl] | None = Field(None, max_length=MAX_IMAGES)


class OfferStatusUpdate(BaseModel):
    status: OfferStatus


class OfferQueryParams(PageQuery):
    sort: OfferSortField = OfferSortField.CREATED_AT


class OfferResponse(BaseModel):
    """Offer as returned by the API — amounts in major units, images in display order."""
    id: UUID
    name: str
    description: str | None = None
    target_amount: Amount
    minimum_investment: Amount
    end_at: datetime
    status: str
    created_at: datetime
    updated_at: datetime
    images: list[str] = Field(default_factory=list)
