"""Distance, time, crew and access charges."""
from __future__ import annotations

from decimal import Decimal

from ..models import FloorAccess, VanSize
from .money import Number, to_decimal as _dec
from .rate_table import DEFAULT_RATE_TABLE, RateTable


def per_mile_rate(
    distance_miles: Number, is_urban: bool, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    """Urban or short journeys pay the higher per-mile rate."""
    if is_urban or _dec(distance_miles) < rates.short_haul_miles:
        return rates.rate_per_mile_max
    return rates.rate_per_mile_min


def distance_charge(
    distance_miles: Number, is_urban: bool = False, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    """Base fare plus distance at the applicable per-mile rate."""
    miles = _dec(distance_miles)
    return rates.minimum_price + miles * per_mile_rate(miles, is_urban, rates)


def van_size_multiplier(
    van_size: VanSize | str, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    return rates.van_multiplier(VanSize(van_size).value)


def hourly_rate(van_size: VanSize | str, rates: RateTable = DEFAULT_RATE_TABLE) -> Decimal:
    return rates.hourly_rate(VanSize(van_size).value)


def time_charge(
    van_size: VanSize | str, hours: Number | None, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    if not hours:
        return Decimal("0")
    booked = _dec(hours)
    if booked <= 0:
        return Decimal("0")
    return hourly_rate(van_size, rates) * booked


def helper_fee(
    helpers: int, hours: Number | None, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    """Helpers are billed for at least ``helper_minimum_hours`` each."""
    if helpers <= 0:
        return Decimal("0")
    billed_hours = max(_dec(hours or 0), rates.helper_minimum_hours)
    return Decimal(helpers) * rates.helper_hourly_rate * billed_hours


def floor_access_fee(
    floor_access: FloorAccess | str,
    lift_available: bool,
    rates: RateTable = DEFAULT_RATE_TABLE,
) -> Decimal:
    fee = rates.floor_fee(FloorAccess(floor_access).value)
    if lift_available:
        return fee * rates.lift_discount
    return fee


__all__ = [
    "distance_charge",
    "floor_access_fee",
    "helper_fee",
    "hourly_rate",
    "per_mile_rate",
    "time_charge",
    "van_size_multiplier",
]
