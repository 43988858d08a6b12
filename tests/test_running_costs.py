from decimal import Decimal

import pytest

from vanquote.rules.money import money
from vanquote.rules.running_costs import (
    estimate_travel_minutes,
    format_duration,
    fuel_cost,
    return_journey_cost,
)


@pytest.mark.parametrize(
    "miles, van, expected",
    [
        (10, "medium", Decimal("2.12")),
        (40, "large", Decimal("10.18")),
        (34, "small", Decimal("6.36")),
        (0, "luton", Decimal("0.00")),
    ],
)
def test_fuel_cost(miles, van, expected) -> None:
    assert money(fuel_cost(miles, van)) == expected


def test_fuel_cost_unknown_van_uses_medium_economy() -> None:
    assert fuel_cost(100, "suv") == fuel_cost(100, "medium")


@pytest.mark.parametrize(
    "miles, expected",
    [(10, Decimal("4.0")), (0, Decimal("0")), (125, Decimal("50"))],
)
def test_return_journey_is_half_of_lowest_per_mile_rate(miles, expected) -> None:
    assert return_journey_cost(miles) == expected


@pytest.mark.parametrize(
    "miles, expected",
    [
        (0, 30),
        (40, 99),     # 60 driving + 30 loading + 9 buffer
        (100, 203),   # 150 + 30 + 22.5 -> rounded up
        (1, 32),      # 1.5 + 30 + 0.225 -> 31.725 -> 32
    ],
)
def test_estimate_travel_minutes(miles, expected) -> None:
    assert estimate_travel_minutes(miles) == expected


@pytest.mark.parametrize(
    "minutes, expected",
    [
        (30, "30 minutes"),
        (59, "59 minutes"),
        (60, "1 hour and 0 minutes"),
        (99, "1 hour and 39 minutes"),
        (203, "3 hours and 23 minutes"),
    ],
)
def test_format_duration(minutes, expected) -> None:
    assert format_duration(minutes) == expected
