"""Public-holiday calendars used by the schedule surcharge.

The default calendar is an intentionally approximate English bank-holiday
heuristic built from fixed-date and fixed-weekday rules. Easter-based
holidays (Good Friday, Easter Monday) are not modeled by it.

Callers that need an authoritative calendar can opt into
:class:`HolidaysLibraryCalendar`, which delegates to the `holidays` package.
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Protocol, Tuple, runtime_checkable

import holidays as _holidays

logger = logging.getLogger(__name__)

MONDAY, TUESDAY = 0, 1

DEFAULT_YEARS = range(2020, 2041)


@runtime_checkable
class HolidayCalendar(Protocol):
    def is_holiday(self, on: date) -> bool:
        ...


def _new_years_day(on: date) -> bool:
    # Jan 1, or the Monday after when it falls on a weekend.
    return on.month == 1 and (
        on.day == 1 or (on.day in (2, 3) and on.weekday() == MONDAY)
    )


def _early_may(on: date) -> bool:
    return on.month == 5 and on.weekday() == MONDAY and on.day <= 7


def _spring_bank(on: date) -> bool:
    return on.month == 5 and on.weekday() == MONDAY and on.day > 24


def _summer_bank(on: date) -> bool:
    return on.month == 8 and on.weekday() == MONDAY and on.day > 24


def _christmas_day(on: date) -> bool:
    return on.month == 12 and (
        on.day == 25 or (on.day == 27 and on.weekday() in (MONDAY, TUESDAY))
    )


def _boxing_day(on: date) -> bool:
    return on.month == 12 and (on.day == 26 or (on.day == 28 and on.weekday() == MONDAY))


_HEURISTIC_RULES: List[Tuple[str, Callable[[date], bool]]] = [
    ("New Year's Day", _new_years_day),
    ("Early May Bank Holiday", _early_may),
    ("Spring Bank Holiday", _spring_bank),
    ("Summer Bank Holiday", _summer_bank),
    ("Christmas Day", _christmas_day),
    ("Boxing Day", _boxing_day),
]


def _as_date(on: date | datetime) -> date:
    return on.date() if isinstance(on, datetime) else on


class UKBankHolidayHeuristic:
    """Approximate English bank holidays without Easter."""

    def holiday_name(self, on: date | datetime) -> str | None:
        day = _as_date(on)
        for name, rule in _HEURISTIC_RULES:
            if rule(day):
                return name
        return None

    def is_holiday(self, on: date | datetime) -> bool:
        return self.holiday_name(on) is not None

    def __repr__(self) -> str:
        return "UKBankHolidayHeuristic()"


class HolidaysLibraryCalendar:
    """UK public holidays (Easter included) from the `holidays` package."""

    def __init__(
        self,
        subdivision: str = "ENG",
        *,
        years: Iterable[int] = DEFAULT_YEARS,
    ):
        self.subdivision = subdivision.upper()
        self.years = tuple(years)
        # Built once and never expanded, so lookups stay read-only.
        self._calendar = _holidays.UK(
            subdiv=self.subdivision, years=self.years, expand=False
        )

    def holiday_name(self, on: date | datetime) -> Optional[str]:
        day = _as_date(on)
        if day.year not in self.years:
            logger.debug("%s outside prebuilt holiday years; treating as working day", day)
            return None
        return self._calendar.get(day)

    def is_holiday(self, on: date | datetime) -> bool:
        return self.holiday_name(on) is not None

    def __repr__(self) -> str:
        return f"HolidaysLibraryCalendar(subdivision={self.subdivision!r})"


def upcoming_holidays(
    calendar: HolidayCalendar,
    *,
    start: date,
    days: int = 90,
    limit: int = 4,
) -> List[Dict[str, str]]:
    """Return the next ``limit`` holidays within ``days`` of ``start``.

    Useful for showing customers which dates carry the holiday surcharge.
    """
    namer: Callable[[date], str | None] | None = getattr(calendar, "holiday_name", None)
    entries: List[Dict[str, str]] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        if not calendar.is_holiday(day):
            continue
        name = namer(day) if namer else None
        entries.append({"name": name or "Public holiday", "date": day.isoformat()})
        if len(entries) >= limit:
            break
    return entries


__all__ = [
    "HolidayCalendar",
    "HolidaysLibraryCalendar",
    "UKBankHolidayHeuristic",
    "upcoming_holidays",
]
