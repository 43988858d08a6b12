"""Tunable pricing constants for van moves.

Every calculator in :mod:`vanquote.rules` receives a :class:`RateTable`
explicitly; nothing reads a module-level rate directly. The table is frozen,
so a single instance can be shared by any number of concurrent quotes.

Tiered lookups (by van size, floor access or urgency) resolve unknown keys
to a documented default tier rather than raising.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Tuple

DEFAULT_VAN_SIZE = "medium"
DEFAULT_FLOOR_ACCESS = "ground"
DEFAULT_URGENCY = "standard"


def _frozen(values: Mapping[str, str]) -> Mapping[str, Decimal]:
    return MappingProxyType({k: Decimal(v) for k, v in values.items()})


@dataclass(frozen=True)
class RateTable:
    # Base pricing
    minimum_price: Decimal = Decimal("15")
    rate_per_mile_min: Decimal = Decimal("0.80")  # rural / long haul
    rate_per_mile_max: Decimal = Decimal("1.20")  # urban / short haul
    short_haul_miles: Decimal = Decimal("10")

    van_size_multipliers: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen(
            {"small": "1.0", "medium": "1.2", "large": "1.4", "luton": "1.6"}
        )
    )
    hourly_rates: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen(
            {"small": "25", "medium": "30", "large": "35", "luton": "40"}
        )
    )

    # Crew & access
    helper_hourly_rate: Decimal = Decimal("20")
    helper_minimum_hours: Decimal = Decimal("2")
    floor_access_fees: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen(
            {
                "ground": "0",
                "firstFloor": "20",
                "secondFloor": "40",
                "thirdFloorPlus": "60",
            }
        )
    )
    lift_discount: Decimal = Decimal("0.5")

    # Schedule surcharges (fractions added to a 1.0 multiplier)
    peak_time_surcharge: Decimal = Decimal("0.15")
    evening_surcharge: Decimal = Decimal("0.10")
    weekend_surcharge: Decimal = Decimal("0.12")
    holiday_surcharge: Decimal = Decimal("0.20")
    evening_start_hour: int = 18
    # Half-open [start, end) hour windows, Monday-Friday only
    peak_windows: Tuple[Tuple[int, int], ...] = ((7, 9), (16, 19))

    urgency_multipliers: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen(
            {"standard": "1.0", "priority": "1.15", "express": "1.30"}
        )
    )

    # Running costs
    fuel_efficiency_mpg: Mapping[str, Decimal] = field(
        default_factory=lambda: _frozen(
            {"small": "34", "medium": "30", "large": "25", "luton": "20"}
        )
    )
    fuel_cost_per_litre: Decimal = Decimal("1.40")
    litres_per_gallon: Decimal = Decimal("4.54609")  # UK gallon
    return_journey_factor: Decimal = Decimal("0.50")

    # Revenue
    platform_fee_percentage: Decimal = Decimal("0.25")
    vat_rate: Decimal = Decimal("0.20")
    deposit_percentage: Decimal = Decimal("0.25")

    # Travel time
    average_speed_mph: Decimal = Decimal("40")
    loading_minutes: Decimal = Decimal("30")
    traffic_buffer: Decimal = Decimal("0.15")

    @property
    def driver_share_percentage(self) -> Decimal:
        return Decimal("1") - self.platform_fee_percentage

    # ------------- Tier lookups -------------

    @staticmethod
    def _tier(table: Mapping[str, Decimal], key: str, default: str) -> Decimal:
        if key in table:
            return table[key]
        return table[default]

    def van_multiplier(self, van_size: str) -> Decimal:
        return self._tier(self.van_size_multipliers, van_size, DEFAULT_VAN_SIZE)

    def hourly_rate(self, van_size: str) -> Decimal:
        return self._tier(self.hourly_rates, van_size, DEFAULT_VAN_SIZE)

    def mpg(self, van_size: str) -> Decimal:
        return self._tier(self.fuel_efficiency_mpg, van_size, DEFAULT_VAN_SIZE)

    def floor_fee(self, floor_access: str) -> Decimal:
        return self._tier(self.floor_access_fees, floor_access, DEFAULT_FLOOR_ACCESS)

    def urgency_multiplier(self, urgency: str) -> Decimal:
        return self._tier(self.urgency_multipliers, urgency, DEFAULT_URGENCY)


DEFAULT_RATE_TABLE = RateTable()


__all__ = [
    "DEFAULT_FLOOR_ACCESS",
    "DEFAULT_RATE_TABLE",
    "DEFAULT_URGENCY",
    "DEFAULT_VAN_SIZE",
    "RateTable",
]
