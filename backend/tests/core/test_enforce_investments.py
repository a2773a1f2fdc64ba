"""Investment Rules — creation checks and the admin transition table.

Tests:
    - Creation checks: inactive and expired offers fail, minimum is inclusive
    - Check order: status, then expiry, then minimum
    - Transition table edges and the closed -> completed mapping
    - Cancellation requires owner and pending status
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from app.core.domain_types import InvestmentStatus
from app.core.enforce_investments import (
    allowed_status_transitions, as_utc, check_cancellable, check_minimum_amount,
    check_status_transition, map_admin_status, validate_new_investment,
)
from app.core.errors import (
    BusinessRuleError, ErrorContext, ForbiddenError, InvalidStatusTransitionError,
)

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


@dataclass
class _Offer:
    id: UUID
    status: str
    end_at: datetime
    minimum_investment: int


@dataclass
class _Investment:
    id: UUID
    user_id: UUID
    status: str


@dataclass
class _User:
    id: UUID
    role: str = "signer"


def _offer(status="active", end_at=None, minimum=100000) -> _Offer:
    return _Offer(uuid4(), status, end_at or NOW + timedelta(days=1), minimum)


# ─── Creation ────────────────────────────────────────────────────

def test_active_unexpired_offer_at_minimum_passes():
    validate_new_investment(_offer(), Decimal("1000"), NOW)


def test_amount_below_minimum_fails_with_formatted_minimum():
    with pytest.raises(BusinessRuleError) as exc:
        validate_new_investment(_offer(), Decimal("999"), NOW)
    assert exc.value.rule == "below_minimum_investment"
    assert "1 000,00 zł" in exc.value.message


def test_one_grosz_below_minimum_fails():
    with pytest.raises(BusinessRuleError):
        check_minimum_amount(Decimal("999.99"), 100000)


@pytest.mark.parametrize("status", ["draft", "closed"])
def test_inactive_offer_fails_even_if_not_expired(status):
    with pytest.raises(BusinessRuleError) as exc:
        validate_new_investment(_offer(status=status), Decimal("5000"), NOW)
    assert exc.value.rule == "offer_not_active"


def test_expired_active_offer_fails():
    offer = _offer(end_at=NOW - timedelta(minutes=1))
    with pytest.raises(BusinessRuleError) as exc:
        validate_new_investment(offer, Decimal("5000"), NOW)
    assert exc.value.rule == "offer_expired"


def test_offer_ending_exactly_now_is_expired():
    with pytest.raises(BusinessRuleError):
        validate_new_investment(_offer(end_at=NOW), Decimal("5000"), NOW)


def test_status_is_checked_before_minimum():
    with pytest.raises(BusinessRuleError) as exc:
        validate_new_investment(_offer(status="draft"), Decimal("1"), NOW)
    assert exc.value.rule == "offer_not_active"


def test_naive_end_at_is_read_as_utc():
    naive = (NOW + timedelta(hours=1)).replace(tzinfo=None)
    validate_new_investment(_offer(end_at=naive), Decimal("1000"), NOW)
    assert as_utc(naive) == NOW + timedelta(hours=1)


# ─── Transitions ─────────────────────────────────────────────────

def test_transition_table():
    assert set(allowed_status_transitions("pending")) == {
        InvestmentStatus.ACCEPTED, InvestmentStatus.REJECTED,
    }
    assert set(allowed_status_transitions("accepted")) == {
        InvestmentStatus.COMPLETED, InvestmentStatus.CANCELLED,
    }
    for terminal in ("rejected", "cancelled", "completed"):
        assert allowed_status_transitions(terminal) == ()
    assert allowed_status_transitions("bogus") == ()


def test_closed_maps_to_completed():
    assert map_admin_status("closed") is InvestmentStatus.COMPLETED
    assert check_status_transition("accepted", "closed") is InvestmentStatus.COMPLETED


def test_pending_can_be_accepted_or_rejected():
    assert check_status_transition("pending", "accepted") is InvestmentStatus.ACCEPTED
    assert check_status_transition("pending", "rejected") is InvestmentStatus.REJECTED


@pytest.mark.parametrize("current,requested", [
    ("pending", "closed"),
    ("accepted", "rejected"),
    ("rejected", "accepted"),
    ("completed", "closed"),
    ("cancelled", "accepted"),
])
def test_illegal_transitions_raise(current, requested):
    with pytest.raises(InvalidStatusTransitionError) as exc:
        check_status_transition(current, requested)
    assert exc.value.current == current
    assert exc.value.requested == requested
    assert exc.value.http_status == 400


# ─── Cancellation ────────────────────────────────────────────────

def test_owner_can_cancel_pending():
    owner = _User(uuid4())
    check_cancellable(_Investment(uuid4(), owner.id, "pending"), owner)


def test_non_owner_cannot_cancel():
    stranger = _User(uuid4())
    investment = _Investment(uuid4(), uuid4(), "pending")
    with pytest.raises(ForbiddenError) as exc:
        check_cancellable(investment, stranger)
    assert exc.value.context.user_id == stranger.id
    assert exc.value.context.investment_id == investment.id


def test_admin_cannot_cancel_someone_elses_investment():
    with pytest.raises(ForbiddenError):
        check_cancellable(
            _Investment(uuid4(), uuid4(), "pending"), _User(uuid4(), "admin"),
        )


@pytest.mark.parametrize("status", ["accepted", "rejected", "cancelled", "completed"])
def test_owner_cannot_cancel_non_pending(status):
    owner = _User(uuid4())
    with pytest.raises(InvalidStatusTransitionError):
        check_cancellable(_Investment(uuid4(), owner.id, status), owner)


def test_creation_error_carries_context():
    context = ErrorContext(user_id=uuid4(), offer_id=uuid4())
    with pytest.raises(BusinessRuleError) as exc:
        validate_new_investment(_offer(status="draft"), Decimal("5000"), NOW, context)
    assert exc.value.context is context
