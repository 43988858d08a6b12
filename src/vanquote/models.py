from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from .rules.money import format_price, money as _money
from .rules.rate_table import DEFAULT_FLOOR_ACCESS, DEFAULT_URGENCY, DEFAULT_VAN_SIZE

logger = logging.getLogger(__name__)


class PricingValidationError(ValueError):
    """Raised when a required numeric input cannot produce a meaningful price."""


# -------------------------------
# Enumerations (unknown -> default tier)
# -------------------------------

class _FallbackEnum(Enum):
    """Enum that resolves unknown values to a default member instead of raising.

    The fallback member of each subclass is the one whose value is listed for
    it in ``_DEFAULT_VALUES``; those are the rate table's default tiers.
    """

    @classmethod
    def default(cls) -> "_FallbackEnum":
        return cls(_DEFAULT_VALUES[cls.__name__])

    @classmethod
    def _missing_(cls, value: object) -> "_FallbackEnum":
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        fallback = cls.default()
        logger.debug("unrecognised %s %r; using %s", cls.__name__, value, fallback.value)
        return fallback


class VanSize(_FallbackEnum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    LUTON = "luton"


class FloorAccess(_FallbackEnum):
    GROUND = "ground"
    FIRST_FLOOR = "firstFloor"
    SECOND_FLOOR = "secondFloor"
    THIRD_FLOOR_PLUS = "thirdFloorPlus"


class Urgency(_FallbackEnum):
    STANDARD = "standard"
    PRIORITY = "priority"
    EXPRESS = "express"


_DEFAULT_VALUES: Dict[str, str] = {
    "VanSize": DEFAULT_VAN_SIZE,
    "FloorAccess": DEFAULT_FLOOR_ACCESS,
    "Urgency": DEFAULT_URGENCY,
}


# -------------------------------
# Request
# -------------------------------

class QuoteRequest(BaseModel):
    """A validated move request as handed over by the web layer."""

    model_config = ConfigDict(frozen=True)

    distance_miles: float = Field(..., ge=0, allow_inf_nan=False, examples=[10.0])
    van_size: VanSize = VanSize.MEDIUM
    helpers: int = Field(0, ge=0, le=3)
    floor_access: FloorAccess = FloorAccess.GROUND
    lift_available: bool = False
    move_date: Optional[datetime] = Field(None, examples=["2024-03-12T10:00:00"])
    move_time: Optional[str] = Field(None, examples=["6:30pm"])
    urgency: Urgency = Urgency.STANDARD
    is_urban: bool = False
    hours: float = Field(0, ge=0, allow_inf_nan=False)

    @field_validator("van_size", "floor_access", "urgency", mode="before")
    @classmethod
    def _coerce_tier(cls, value: Any, info: ValidationInfo) -> Any:
        enum_cls = {"van_size": VanSize, "floor_access": FloorAccess, "urgency": Urgency}[
            info.field_name
        ]
        if value is None:
            return enum_cls.default()
        return enum_cls(value)

    @field_validator("move_date", mode="before")
    @classmethod
    def _coerce_move_date(cls, value: Any) -> Optional[datetime]:
        # Schedule inputs degrade to "no surcharge" rather than failing the quote.
        if value is None or isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime.combine(value, time.min)
        if isinstance(value, str):
            try:
                return datetime.fromisoformat(value.strip())
            except ValueError:
                logger.debug("ignoring unparseable move_date %r", value)
                return None
        logger.debug("ignoring move_date of type %s", type(value).__name__)
        return None

    @field_validator("hours", mode="before")
    @classmethod
    def _coerce_hours(cls, value: Any) -> Any:
        return 0 if value is None else value


def ensure_priceable(request: QuoteRequest) -> None:
    """Reject required numerics that slipped past request validation."""
    for name in ("distance_miles", "hours"):
        value = getattr(request, name)
        try:
            number = float(value)
        except (TypeError, ValueError) as exc:
            raise PricingValidationError(f"{name} must be a number, got {value!r}") from exc
        if not math.isfinite(number):
            raise PricingValidationError(f"{name} must be finite, got {value!r}")
        if number < 0:
            raise PricingValidationError(f"{name} must be non-negative, got {value!r}")


# -------------------------------
# Results
# -------------------------------

@dataclass(frozen=True)
class LineItem:
    code: str
    label: str
    amount: Decimal

    def render(self) -> str:
        return f"{self.label}: {format_price(self.amount)}"


@dataclass(frozen=True)
class PriceBreakdown:
    """One quote's totals, revenue split and explainable line items.

    Component amounts are kept unrounded; ``subtotal`` and ``total`` are whole
    pounds, rounded up. ``total`` is VAT-inclusive and ``vat_amount`` is the
    VAT contained within it, not an addition to it.
    """

    line_items: Tuple[LineItem, ...]
    distance_charge: Decimal
    van_size_multiplier: Decimal
    time_charge: Decimal
    helper_fee: Decimal
    floor_access_fee: Decimal
    peak_multiplier: Decimal
    peak_surcharge: Decimal
    urgency_multiplier: Decimal
    urgency_surcharge: Decimal
    fuel_cost: Decimal
    return_journey_cost: Decimal
    raw_subtotal: Decimal
    subtotal: int
    vat_amount: Decimal
    total: int
    platform_fee: int
    driver_share: int
    includes_vat: bool = True

    def lines(self) -> List[str]:
        return [item.render() for item in self.line_items]

    def components(self) -> Dict[str, str]:
        return {
            "distance_charge": str(_money(self.distance_charge)),
            "van_size_multiplier": str(self.van_size_multiplier),
            "time_charge": str(_money(self.time_charge)),
            "helper_fee": str(_money(self.helper_fee)),
            "floor_access_fee": str(_money(self.floor_access_fee)),
            "peak_multiplier": str(self.peak_multiplier),
            "peak_surcharge": str(_money(self.peak_surcharge)),
            "urgency_multiplier": str(self.urgency_multiplier),
            "urgency_surcharge": str(_money(self.urgency_surcharge)),
            "fuel_cost": str(_money(self.fuel_cost)),
            "return_journey_cost": str(_money(self.return_journey_cost)),
        }

    def as_dict(self) -> Dict[str, Any]:
        return {
            "breakdown": self.lines(),
            "line_items": [
                {"code": item.code, "label": item.label, "amount": str(_money(item.amount))}
                for item in self.line_items
            ],
            "components": self.components(),
            "totals": {
                "subtotal": self.subtotal,
                "vat_amount": str(_money(self.vat_amount)),
                "total": self.total,
                "platform_fee": self.platform_fee,
                "driver_share": self.driver_share,
            },
            "includes_vat": self.includes_vat,
        }


@dataclass(frozen=True)
class SimpleQuote:
    breakdown: PriceBreakdown
    estimated_minutes: int
    estimated_time: str
    explanation: str
    price_string: str
    currency: str = "£"

    @property
    def total(self) -> int:
        return self.breakdown.total

    def as_dict(self) -> Dict[str, Any]:
        payload = self.breakdown.as_dict()
        payload.update(
            {
                "currency": self.currency,
                "price_string": self.price_string,
                "estimated_minutes": self.estimated_minutes,
                "estimated_time": self.estimated_time,
                "explanation": self.explanation,
            }
        )
        return payload


@dataclass(frozen=True)
class PricingHistoryRecord:
    """Row handed to the persistence layer; stored as-is, never read back here."""

    from_location: str
    to_location: str
    distance: int
    van_size: str
    final_price: int
    original_price: int
    factors: str = field(default="{}")

    def factors_dict(self) -> Dict[str, Any]:
        return json.loads(self.factors)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "fromLocation": self.from_location,
            "toLocation": self.to_location,
            "distance": self.distance,
            "vanSize": self.van_size,
            "finalPrice": self.final_price,
            "originalPrice": self.original_price,
            "factors": self.factors,
        }
