"""Rate table overrides loaded from JSON."""
from __future__ import annotations

import dataclasses
import json
import logging
import os
from decimal import Decimal, InvalidOperation
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .rate_table import (
    DEFAULT_FLOOR_ACCESS,
    DEFAULT_RATE_TABLE,
    DEFAULT_URGENCY,
    DEFAULT_VAN_SIZE,
    RateTable,
)

__all__ = [
    "MissingRateField",
    "load_rate_table",
    "rate_table_from_mapping",
    "resolve_rates_path",
]

logger = logging.getLogger(__name__)


class MissingRateField(KeyError):
    """Raised when a rate override file names an unknown or incomplete field."""

    def __init__(self, field_path: str):
        super().__init__(field_path)
        self.field_path = field_path

    def __str__(self) -> str:  # KeyError would repr-quote the message
        return f"missing or unknown rate field: {self.field_path}"


# Tier tables must keep their default tier so fallbacks stay resolvable.
_TIER_DEFAULTS: Dict[str, str] = {
    "van_size_multipliers": DEFAULT_VAN_SIZE,
    "hourly_rates": DEFAULT_VAN_SIZE,
    "fuel_efficiency_mpg": DEFAULT_VAN_SIZE,
    "floor_access_fees": DEFAULT_FLOOR_ACCESS,
    "urgency_multipliers": DEFAULT_URGENCY,
}
_INT_FIELDS = {"evening_start_hour"}
_WINDOW_FIELDS = {"peak_windows"}

_FIELDS = {f.name for f in dataclasses.fields(RateTable)}


def resolve_rates_path(path: str | os.PathLike[str] | None) -> Path | None:
    if path is not None:
        return Path(path)
    override = os.getenv("PRICING_RATES_PATH")
    if override:
        return Path(override)
    return None


def _to_decimal(field_path: str, value: Any) -> Decimal:
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"{field_path} must be numeric, got {value!r}") from exc


def _normalise(name: str, value: Any) -> Any:
    if name in _TIER_DEFAULTS:
        if not isinstance(value, Mapping):
            raise MissingRateField(name)
        default_tier = _TIER_DEFAULTS[name]
        if default_tier not in value:
            raise MissingRateField(f"{name}.{default_tier}")
        return MappingProxyType(
            {str(k): _to_decimal(f"{name}.{k}", v) for k, v in value.items()}
        )
    if name in _INT_FIELDS:
        return int(value)
    if name in _WINDOW_FIELDS:
        windows = []
        for window in value:
            start, end = (int(x) for x in window)
            if not 0 <= start < end <= 24:
                raise ValueError(f"{name} window {window!r} is not a valid hour range")
            windows.append((start, end))
        return tuple(windows)
    return _to_decimal(name, value)


def rate_table_from_mapping(
    overrides: Mapping[str, Any], *, base: RateTable = DEFAULT_RATE_TABLE
) -> RateTable:
    changes: Dict[str, Any] = {}
    for name, value in overrides.items():
        if name not in _FIELDS:
            raise MissingRateField(name)
        changes[name] = _normalise(name, value)
    return dataclasses.replace(base, **changes)


@lru_cache(maxsize=None)
def _load_cached(path_str: str) -> RateTable:
    path = Path(path_str)
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    if not isinstance(data, Mapping):
        raise ValueError("rate overrides must be a JSON object of field -> value")
    table = rate_table_from_mapping(data)
    logger.info("Loaded %d rate override(s) from %s", len(data), path)
    return table


def load_rate_table(path: str | os.PathLike[str] | None = None) -> RateTable:
    """Return the default rate table with overrides from ``path`` applied.

    With no path and no ``PRICING_RATES_PATH`` the built-in defaults are
    returned unchanged.
    """
    resolved = resolve_rates_path(path)
    if resolved is None:
        return DEFAULT_RATE_TABLE
    return _load_cached(str(resolved.resolve()))
