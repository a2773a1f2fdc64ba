"""Investment Schemas — request validation and response shapes for investment endpoints.

Invariants:
    - InvestmentCreate.amount: > 0 and <= 100 000 000 PLN (major units)
    - InvestmentStatusUpdate: status in {accepted, rejected, closed}; reason required
      (non-blank) when status == rejected
    - InvestmentCancel.reason: 10-500 chars after stripping
    - Query filters: status exact match, offer_id (admin view), filter non-empty text

Design Decisions:
    - reason uses validate_default=True so an omitted reason still reaches the
      rejection check
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from app.core import messages
from app.core.domain_types import AdminInvestmentStatus, InvestmentStatus
from app.schemas.common import Amount, PageQuery
from app.schemas.offer import OfferResponse

MAX_INVESTMENT_AMOUNT = Decimal("100000000")


class InvestmentCreate(BaseModel):
    offer_id: UUID
    amount: Decimal = Field(gt=0, le=MAX_INVESTMENT_AMOUNT)


class InvestmentStatusUpdate(BaseModel):
    """Admin status change."""
    status: AdminInvestmentStatus
    reason: str | None = Field(None, max_length=500, validate_default=True)

    @field_validator("reason")
    @classmethod
    def reason_required_for_rejection(
        cls, v: str | None, info: ValidationInfo,
    ) -> str | None:
        v = v.strip() if v else v
        if info.data.get("status") == AdminInvestmentStatus.REJECTED and not v:
            raise ValueError(messages.INVESTMENT_REASON_REQUIRED)
        return v or None


class InvestmentCancel(BaseModel):
    """Owner cancellation — free-text justification."""
    reason: str = Field(min_length=10, max_length=500)

    @field_validator("reason", mode="before")
    @classmethod
    def strip_reason(cls, v):
        return v.strip() if isinstance(v, str) else v


class InvestmentQueryParams(PageQuery):
    status: InvestmentStatus | None = None
    offer_id: UUID | None = None
    filter: str | None = Field(None, min_length=1, max_length=100)


# --- Responses ----------------------------------------------------------------

class InvestmentResponse(BaseModel):
    """Investment row — amount in major units."""
    id: UUID
    user_id: UUID
    offer_id: UUID
    amount: Amount
    status: str
    reason: str | None = None
    completed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None


class InvestmentWithOfferName(InvestmentResponse):
    offer_name: str | None = None


class OfferSummary(BaseModel):
    id: UUID
    name: str


class UserSummary(BaseModel):
    id: UUID
    email: str
    role: str
    first_name: str | None = None
    last_name: str | None = None


class InvestmentWithRelations(InvestmentResponse):
    """Admin listing row — joined with offer name and owner identity."""
    offer: OfferSummary
    user: UserSummary


class InvestmentDetails(InvestmentResponse):
    """Single investment with its full offer and owner."""
    offer: OfferResponse
    user: UserSummary
    status_label: str
