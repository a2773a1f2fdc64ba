"""Messages — status labels and message templates."""

from app.core import messages
from app.core.domain_types import InvestmentStatus


def test_every_investment_status_has_a_label():
    labels = {messages.investment_status_label(s.value) for s in InvestmentStatus}
    assert labels == {
        "W oczekiwaniu", "Zaakceptowana", "Odrzucona", "Anulowana", "Zakończona",
    }


def test_unknown_status_echoes_back():
    assert messages.investment_status_label("archived") == "archived"


def test_templates_format():
    assert "500,00 zł" in messages.INVESTMENT_MINIMUM_AMOUNT.format(minimum="500,00 zł")
    text = messages.INVESTMENT_INVALID_TRANSITION.format(
        current="pending", requested="closed",
    )
    assert "'pending'" in text and "'closed'" in text
