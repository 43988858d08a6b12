"""Vehicle running costs and journey time estimates."""
from __future__ import annotations

from decimal import Decimal

from ..models import VanSize
from .money import Number, round_up, to_decimal
from .rate_table import DEFAULT_RATE_TABLE, RateTable

_MINUTES_PER_HOUR = Decimal("60")


def fuel_cost(
    distance_miles: Number, van_size: VanSize | str, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    """(miles / mpg) gallons, priced per litre via the UK gallon."""
    mpg = rates.mpg(VanSize(van_size).value)
    gallons = to_decimal(distance_miles) / mpg
    return gallons * rates.fuel_cost_per_litre * rates.litres_per_gallon


def return_journey_cost(
    distance_miles: Number, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    # Empty leg home: lowest per-mile rate, no base fare, no urban uplift.
    raw = to_decimal(distance_miles) * rates.rate_per_mile_min
    return raw * rates.return_journey_factor


def estimate_travel_minutes(
    distance_miles: Number, rates: RateTable = DEFAULT_RATE_TABLE
) -> int:
    """Driving time plus loading time plus a traffic buffer on the driving part."""
    driving = to_decimal(distance_miles) / rates.average_speed_mph * _MINUTES_PER_HOUR
    total = driving + rates.loading_minutes + driving * rates.traffic_buffer
    return int(round_up(total))


def format_duration(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    if hours > 0:
        unit = "hour" if hours == 1 else "hours"
        return f"{hours} {unit} and {mins} minutes"
    return f"{mins} minutes"


__all__ = [
    "estimate_travel_minutes",
    "format_duration",
    "fuel_cost",
    "return_journey_cost",
]
