"""Money helpers shared by the calculators.

``round_up`` is the one rounding policy for finalising money: always up, in
the provider's favour. Quote totals, VAT, deposits and travel-time minutes all
go through it.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP
from typing import Union

Number = Union[Decimal, int, float, str]

CURRENCY_SYMBOL = "£"


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _exponent(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_up(amount: Number, *, places: int = 0) -> Decimal:
    """Ceiling of ``amount`` at ``places`` decimals (0 = whole pounds)."""
    return to_decimal(amount).quantize(_exponent(places), rounding=ROUND_CEILING)


def round_half_up(amount: Number, *, places: int = 0) -> Decimal:
    return to_decimal(amount).quantize(_exponent(places), rounding=ROUND_HALF_UP)


def money(amount: Number) -> Decimal:
    """Display precision (pence), half-up."""
    return round_half_up(amount, places=2)


def format_price(amount: Number) -> str:
    return f"{CURRENCY_SYMBOL}{money(amount):.2f}"


__all__ = [
    "CURRENCY_SYMBOL",
    "Number",
    "format_price",
    "money",
    "round_half_up",
    "round_up",
    "to_decimal",
]
