"""Offer Schemas — field limits, cross-field minimum rule, image list semantics."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from app.core.domain_types import OfferSortField
from app.schemas.offer import OfferCreate, OfferQueryParams, OfferUpdate


def _payload(**overrides) -> dict:
    data = {
        "name": "  Farma wiatrowa  ",
        "target_amount": "5000",
        "minimum_investment": "1000",
        "end_at": (datetime.now(timezone.utc) + timedelta(days=7)).isoformat(),
    }
    data.update(overrides)
    return data


def test_valid_offer_is_normalized():
    offer = OfferCreate(**_payload())
    assert offer.name == "Farma wiatrowa"
    assert offer.target_amount == Decimal("5000")
    assert offer.images == []
    assert offer.end_at.tzinfo is not None


def test_minimum_above_target_fails_on_minimum_field():
    with pytest.raises(ValidationError) as exc:
        OfferCreate(**_payload(minimum_investment="6000"))
    errors = exc.value.errors()
    assert errors[0]["loc"] == ("minimum_investment",)


def test_minimum_equal_to_target_is_allowed():
    OfferCreate(**_payload(minimum_investment="5000"))


@pytest.mark.parametrize("field,value", [
    ("target_amount", "0"),
    ("target_amount", "1000000001"),
    ("minimum_investment", "-1"),
    ("name", "   "),
    ("name", "x" * 256),
])
def test_field_limits(field, value):
    with pytest.raises(ValidationError):
        OfferCreate(**_payload(**{field: value}))


def test_end_at_in_past_is_rejected_on_create():
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    with pytest.raises(ValidationError):
        OfferCreate(**_payload(end_at=past))


def test_naive_end_at_is_read_as_utc():
    naive = (datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(days=2)).replace(microsecond=0)
    offer = OfferCreate(**_payload(end_at=naive.isoformat()))
    assert offer.end_at.tzinfo == timezone.utc


def test_update_distinguishes_omitted_and_empty_images():
    omitted = OfferUpdate(**_payload())
    emptied = OfferUpdate(**_payload(images=[]))
    assert omitted.images is None
    assert emptied.images == []


def test_too_many_images_rejected():
    with pytest.raises(ValidationError):
        OfferCreate(**_payload(images=[f"https://cdn/{i}.jpg" for i in range(11)]))


def test_query_defaults_and_limits():
    params = OfferQueryParams()
    assert (params.page, params.limit, params.sort) == (1, 10, OfferSortField.CREATED_AT)
    with pytest.raises(ValidationError):
        OfferQueryParams(limit=101)
    with pytest.raises(ValidationError):
        OfferQueryParams(page=0)
    with pytest.raises(ValidationError):
        OfferQueryParams(sort="status")
