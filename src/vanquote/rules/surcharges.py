"""Schedule and urgency surcharges.

Both surcharges are expressed as multipliers starting at 1.0. Schedule
components (weekend, holiday, evening, peak commute) add their percentages
together before the multiplier is applied once; the engine applies schedule
and urgency to the same base amount without compounding them.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, Optional

from ..models import Urgency
from .holiday_calendar import HolidayCalendar, UKBankHolidayHeuristic
from .rate_table import DEFAULT_RATE_TABLE, RateTable

logger = logging.getLogger(__name__)

# "6:30pm", "06:30 PM", "18:00"; minutes are required.
_TIME_RE = re.compile(r"(\d+):([0-5]\d)\s*([ap]m)?", re.IGNORECASE)

_DEFAULT_CALENDAR = UKBankHolidayHeuristic()


def parse_move_hour(time_string: Optional[str]) -> Optional[int]:
    """Best-effort hour (0-23 scale) from a free-text time, or None."""
    if not time_string:
        return None
    match = _TIME_RE.search(time_string)
    if match is None:
        logger.debug("unparseable move time %r; skipping evening check", time_string)
        return None
    hour = int(match.group(1))
    meridiem = (match.group(3) or "").lower()
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0
    return hour


@dataclass(frozen=True)
class ScheduleSurcharge:
    multiplier: Decimal
    components: Dict[str, Decimal]

    @property
    def percentage(self) -> Decimal:
        return (self.multiplier - Decimal("1")) * Decimal("100")


def _no_surcharge() -> ScheduleSurcharge:
    return ScheduleSurcharge(multiplier=Decimal("1"), components={})


def schedule_surcharge(
    move_date: object,
    time_string: Optional[str] = None,
    *,
    calendar: HolidayCalendar = _DEFAULT_CALENDAR,
    rates: RateTable = DEFAULT_RATE_TABLE,
) -> ScheduleSurcharge:
    """Weekend, holiday, evening and peak-commute surcharges for a move slot.

    ``move_date`` that is not a date/datetime yields no surcharge. The evening
    check prefers ``time_string`` and falls back to the hour of ``move_date``
    only when no time string was supplied. Peak commute windows are checked
    against the hour of ``move_date``.
    """
    if isinstance(move_date, datetime):
        when = move_date
    elif isinstance(move_date, date):
        when = datetime(move_date.year, move_date.month, move_date.day)
    else:
        logger.debug("no usable move date (%r); schedule surcharge skipped", move_date)
        return _no_surcharge()

    components: Dict[str, Decimal] = {}
    weekday = when.weekday()

    if weekday >= 5:  # Sat=5, Sun=6
        components["weekend"] = rates.weekend_surcharge

    if calendar.is_holiday(when.date()):
        components["holiday"] = rates.holiday_surcharge

    if time_string:
        evening_hour = parse_move_hour(time_string)
    else:
        evening_hour = when.hour
    if evening_hour is not None and evening_hour >= rates.evening_start_hour:
        components["evening"] = rates.evening_surcharge

    if weekday < 5 and any(start <= when.hour < end for start, end in rates.peak_windows):
        components["peak"] = rates.peak_time_surcharge

    multiplier = Decimal("1") + sum(components.values(), Decimal("0"))
    return ScheduleSurcharge(multiplier=multiplier, components=components)


def urgency_multiplier(
    urgency: Urgency | str, rates: RateTable = DEFAULT_RATE_TABLE
) -> Decimal:
    return rates.urgency_multiplier(Urgency(urgency).value)


def surcharge_amount(base: Decimal, multiplier: Decimal) -> Decimal:
    """Portion of ``base`` attributable to a ``multiplier`` above 1.0."""
    return base * (multiplier - Decimal("1"))


__all__ = [
    "ScheduleSurcharge",
    "parse_move_hour",
    "schedule_surcharge",
    "surcharge_amount",
    "urgency_multiplier",
]
