"""Investment Rule Enforcement — eligibility, minimum amount and status transitions.

Invariants:
    - All functions are PURE: no IO, no async, no DB; `now` is always passed in
    - Creation checks run in a fixed order and the first failure wins:
      offer active -> offer not expired -> amount >= minimum
    - The minimum is inclusive: amount == minimum passes
    - Transition table: pending -> {accepted, rejected}; accepted -> {completed, cancelled};
      rejected, cancelled and completed are terminal
    - Admin "closed" is stored as "completed"

Design Decisions:
    - Raise typed MarketplaceError subclasses: the API layer maps error kind to status,
      never message text (ADR: replaces substring classification)
    - Naive datetimes are read as UTC: SQLite hands back naive values for
      timezone-aware columns
"""

from datetime import datetime, timezone
from decimal import Decimal

from app.core import messages
from app.core.currency import format_currency, to_major_units
from app.core.domain_types import AdminInvestmentStatus, InvestmentStatus, OfferStatus
from app.core.errors import (
    BusinessRuleError, ErrorContext, ForbiddenError, InvalidStatusTransitionError,
)
from app.core.repository_protocols import InvestmentLike, OfferLike, UserLike
from app.core.roles import can_cancel_investment

ALLOWED_TRANSITIONS: dict[InvestmentStatus, tuple[InvestmentStatus, ...]] = {
    InvestmentStatus.PENDING: (InvestmentStatus.ACCEPTED, InvestmentStatus.REJECTED),
    InvestmentStatus.ACCEPTED: (InvestmentStatus.COMPLETED, InvestmentStatus.CANCELLED),
    InvestmentStatus.REJECTED: (),
    InvestmentStatus.CANCELLED: (),
    InvestmentStatus.COMPLETED: (),
}

_ADMIN_STATUS_MAPPING: dict[AdminInvestmentStatus, InvestmentStatus] = {
    AdminInvestmentStatus.ACCEPTED: InvestmentStatus.ACCEPTED,
    AdminInvestmentStatus.REJECTED: InvestmentStatus.REJECTED,
    AdminInvestmentStatus.CLOSED: InvestmentStatus.COMPLETED,
}


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ─── Creation ────────────────────────────────────────────────────

def check_offer_active(offer: OfferLike, context: ErrorContext | None = None) -> None:
    if offer.status != OfferStatus.ACTIVE:
        raise BusinessRuleError(messages.OFFER_NOT_AVAILABLE, "offer_not_active", context)


def check_offer_not_expired(
    offer: OfferLike, now: datetime, context: ErrorContext | None = None,
) -> None:
    if as_utc(offer.end_at) <= as_utc(now):
        raise BusinessRuleError(messages.OFFER_EXPIRED, "offer_expired", context)


def check_minimum_amount(
    amount: Decimal, minimum_minor_units: int, context: ErrorContext | None = None,
) -> None:
    """Compare in major units, before any conversion of the requested amount."""
    minimum = to_major_units(minimum_minor_units)
    if amount < minimum:
        raise BusinessRuleError(
            messages.INVESTMENT_MINIMUM_AMOUNT.format(
                minimum=format_currency(minimum),
            ),
            "below_minimum_investment",
            context,
        )


def validate_new_investment(
    offer: OfferLike, amount: Decimal, now: datetime,
    context: ErrorContext | None = None,
) -> None:
    """Chain all creation checks. Raises on the first violation."""
    check_offer_active(offer, context)
    check_offer_not_expired(offer, now, context)
    check_minimum_amount(amount, offer.minimum_investment, context)


# ─── Transitions ─────────────────────────────────────────────────

def map_admin_status(status: AdminInvestmentStatus | str) -> InvestmentStatus:
    return _ADMIN_STATUS_MAPPING[AdminInvestmentStatus(status)]


def allowed_status_transitions(current: InvestmentStatus | str) -> tuple[InvestmentStatus, ...]:
    try:
        return ALLOWED_TRANSITIONS[InvestmentStatus(current)]
    except ValueError:
        return ()


def check_status_transition(
    current: InvestmentStatus | str, requested: AdminInvestmentStatus | str,
    context: ErrorContext | None = None,
) -> InvestmentStatus:
    """Validate an admin transition and return the status to store."""
    target = map_admin_status(requested)
    if target not in allowed_status_transitions(current):
        raise InvalidStatusTransitionError(
            messages.INVESTMENT_INVALID_TRANSITION.format(
                current=_value(current), requested=_value(requested),
            ),
            current=_value(current),
            requested=_value(requested),
            context=context,
        )
    return target


def check_cancellable(investment: InvestmentLike, user: UserLike) -> None:
    """Only the owner may cancel, and only while the investment is pending.

    can_cancel_investment decides; the raised error tells a stranger (403)
    apart from an owner who is too late (400).
    """
    if can_cancel_investment(user, investment.user_id, investment.status):
        return
    context = ErrorContext(user_id=user.id, investment_id=investment.id)
    if investment.user_id != user.id:
        raise ForbiddenError(messages.INVESTMENT_CANCEL_NOT_OWNER, context)
    raise InvalidStatusTransitionError(
        messages.INVESTMENT_CANCEL_WRONG_STATUS.format(
            status=_value(investment.status),
        ),
        current=_value(investment.status),
        requested=InvestmentStatus.CANCELLED.value,
        context=context,
    )


def _value(status) -> str:
    return status.value if hasattr(status, "value") else str(status)
