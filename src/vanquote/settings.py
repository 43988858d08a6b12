from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

from .rules.holiday_calendar import (
    HolidayCalendar,
    HolidaysLibraryCalendar,
    UKBankHolidayHeuristic,
)
from .rules.quote_engine import QuoteEngine
from .rules.rates_loader import load_rate_table

logger = logging.getLogger("vanquote")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    # Optional JSON file of RateTable overrides; defaults apply when unset.
    rates_path: str | None = Field(default=None, alias="PRICING_RATES_PATH")

    # "heuristic" keeps the approximate bank-holiday rules (no Easter);
    # "holidays" uses the full UK calendar from the holidays package.
    holiday_calendar: Literal["heuristic", "holidays"] = Field(
        default="heuristic", alias="PRICING_HOLIDAY_CALENDAR"
    )
    holiday_subdivision: str = Field(default="ENG", alias="PRICING_HOLIDAY_SUBDIVISION")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {"env_file": ".env", "extra": "ignore"}

    def build_calendar(self) -> HolidayCalendar:
        if self.holiday_calendar == "holidays":
            logger.info("Holiday calendar → holidays package (%s)", self.holiday_subdivision)
            return HolidaysLibraryCalendar(self.holiday_subdivision)
        logger.info("Holiday calendar → built-in bank holiday heuristic")
        return UKBankHolidayHeuristic()


def configure_logging(cfg: Settings | None = None) -> None:
    """Root logging setup for host applications; the library itself never calls it."""
    cfg = cfg or Settings()
    logging.basicConfig(level=cfg.log_level.upper(), format=LOG_FORMAT)


def build_engine(cfg: Settings | None = None) -> QuoteEngine:
    cfg = cfg or Settings()
    rates = load_rate_table(cfg.rates_path)
    if cfg.rates_path:
        logger.info("Rate table source → %s", cfg.rates_path)
    return QuoteEngine(rates=rates, calendar=cfg.build_calendar())
