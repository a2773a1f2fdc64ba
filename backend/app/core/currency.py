"""Currency Conversion — major units (PLN) at the API edge, minor units (grosze) in storage.

Invariants:
    - to_minor_units rounds half-up to the nearest grosz, so float drift never leaks
    - to_major_units(to_minor_units(x)) == x for any x with at most two decimal places
    - Every read/write path converts exactly once, in one direction

Design Decisions:
    - Decimal over float arithmetic: 0.29 * 100 is 28.999999999999996 in binary floats
    - Floats are routed through str() before Decimal so the shortest repr is used
"""

from decimal import Decimal, ROUND_HALF_UP

from app.core.domain_types import MinorUnits

MINOR_UNITS_PER_MAJOR = 100

_ONE = Decimal("1")
_CENT = Decimal("0.01")


def to_minor_units(amount: Decimal | float | int) -> MinorUnits:
    """Convert a major-unit amount to integer minor units."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return MinorUnits(int(
        (value * MINOR_UNITS_PER_MAJOR).quantize(_ONE, rounding=ROUND_HALF_UP),
    ))


def to_major_units(amount: int) -> Decimal:
    """Convert stored minor units back to a major-unit Decimal."""
    return (Decimal(amount) / MINOR_UNITS_PER_MAJOR).quantize(_CENT)


def format_currency(amount: Decimal | float | int) -> str:
    """Render a major-unit amount as Polish złoty, e.g. ``1 234,50 zł`` (plain ASCII spaces)."""
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    value = value.quantize(_CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    whole, fraction = f"{abs(value):.2f}".split(".")
    grouped = f"{int(whole):,}".replace(",", " ")
    return f"{sign}{grouped},{fraction} zł"
