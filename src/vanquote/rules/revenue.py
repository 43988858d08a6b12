"""Platform/driver revenue split, VAT and deposits.

Quoted totals are treated as VAT-inclusive: the VAT figure is the share of
the total that is tax, extracted with ``total * r / (1 + r)``. Nothing here
adds VAT on top of a quoted total.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .money import Number, round_half_up, round_up, to_decimal
from .rate_table import DEFAULT_RATE_TABLE, RateTable

PENCE_PER_POUND = 100


@dataclass(frozen=True)
class RevenueSplit:
    platform_fee: int
    driver_share: int

    @property
    def total(self) -> int:
        return self.platform_fee + self.driver_share


def split_revenue(total: int, rates: RateTable = DEFAULT_RATE_TABLE) -> RevenueSplit:
    """Platform fee is rounded; the driver gets the exact remainder."""
    platform_fee = int(round_half_up(Decimal(total) * rates.platform_fee_percentage))
    return RevenueSplit(platform_fee=platform_fee, driver_share=total - platform_fee)


def vat_from_inclusive(total: Number, rates: RateTable = DEFAULT_RATE_TABLE) -> Decimal:
    """VAT contained in a VAT-inclusive amount, rounded up to the penny."""
    rate = rates.vat_rate
    return round_up(to_decimal(total) * rate / (Decimal("1") + rate), places=2)


def price_with_vat(price: Number, rates: RateTable = DEFAULT_RATE_TABLE) -> int:
    """Gross up a VAT-exclusive price to whole pounds."""
    return int(round_up(to_decimal(price) * (Decimal("1") + rates.vat_rate)))


def deposit_pence(total: Number, rates: RateTable = DEFAULT_RATE_TABLE) -> int:
    """Upfront deposit in pence: whole pounds of ``total * deposit_percentage``, rounded up."""
    pounds = round_up(to_decimal(total) * rates.deposit_percentage)
    return int(pounds) * PENCE_PER_POUND


__all__ = [
    "PENCE_PER_POUND",
    "RevenueSplit",
    "deposit_pence",
    "price_with_vat",
    "split_revenue",
    "vat_from_inclusive",
]
