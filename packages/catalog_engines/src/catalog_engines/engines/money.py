"""Decimal helpers for money arithmetic."""

from decimal import ROUND_HALF_UP, Decimal

CENTS = Decimal("0.01")
TENTHS = Decimal("0.1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: object) -> Decimal:
    """Convert ints, floats, strings and None to Decimal (None -> 0)."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_money(value: Decimal) -> Decimal:
    """Round to cents, halves away from zero."""
    return to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def percent_of(base: Decimal, percent: Decimal) -> Decimal:
    return to_decimal(base) * to_decimal(percent) / HUNDRED


def round_tenths(value: Decimal) -> Decimal:
    return to_decimal(value).quantize(TENTHS, rounding=ROUND_HALF_UP)
