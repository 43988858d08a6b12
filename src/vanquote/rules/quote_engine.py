# src/vanquote/rules/quote_engine.py
from __future__ import annotations

import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from ..models import (
    FloorAccess,
    LineItem,
    PriceBreakdown,
    PricingHistoryRecord,
    QuoteRequest,
    SimpleQuote,
    Urgency,
    VanSize,
    ensure_priceable,
)
from . import charges, revenue, running_costs, surcharges
from .holiday_calendar import HolidayCalendar, UKBankHolidayHeuristic
from .money import CURRENCY_SYMBOL, round_half_up, round_up
from .rate_table import DEFAULT_RATE_TABLE, RateTable

logger = logging.getLogger(__name__)


def _pct(fraction: Decimal) -> str:
    return f"{(fraction * Decimal('100')).normalize():f}"


class QuoteEngine:
    """
    Composes the leaf calculators into a single quote:
      - build_breakdown(QuoteRequest) -> PriceBreakdown (full booking quote)
      - simple_quote(...) -> SimpleQuote (landing-page estimate)
    The engine holds only its rate table and holiday calendar; it keeps no
    per-call state and can be shared across threads.
    """

    def __init__(
        self,
        rates: RateTable = DEFAULT_RATE_TABLE,
        calendar: Optional[HolidayCalendar] = None,
    ):
        self.rates = rates
        self.calendar: HolidayCalendar = calendar or UKBankHolidayHeuristic()

    # ------------- Full breakdown -------------

    def build_breakdown(self, request: QuoteRequest) -> PriceBreakdown:
        ensure_priceable(request)
        rates = self.rates
        van_size = VanSize(request.van_size)
        floor_access = FloorAccess(request.floor_access)
        urgency = Urgency(request.urgency)
        miles = Decimal(str(request.distance_miles))
        hours = Decimal(str(request.hours or 0))

        # ---- 1) Distance & van size ----
        distance_charge = charges.distance_charge(miles, request.is_urban, rates)
        van_mult = charges.van_size_multiplier(van_size, rates)
        sized_distance = distance_charge * van_mult

        # ---- 2) Time, crew and access ----
        time_charge = charges.time_charge(van_size, hours, rates)
        helper_fee = charges.helper_fee(request.helpers, hours, rates)
        floor_fee = charges.floor_access_fee(floor_access, request.lift_available, rates)

        # ---- 3) Surcharges (same base, not compounded) ----
        surcharge_base = sized_distance + time_charge
        schedule = surcharges.schedule_surcharge(
            request.move_date,
            request.move_time,
            calendar=self.calendar,
            rates=rates,
        )
        peak_surcharge = surcharges.surcharge_amount(surcharge_base, schedule.multiplier)
        urgency_mult = surcharges.urgency_multiplier(urgency, rates)
        urgency_surcharge = surcharges.surcharge_amount(surcharge_base, urgency_mult)

        # ---- 4) Running costs ----
        fuel = running_costs.fuel_cost(miles, van_size, rates)
        return_leg = running_costs.return_journey_cost(miles, rates)

        # ---- 5) Totals ----
        raw_subtotal = (
            sized_distance
            + time_charge
            + helper_fee
            + floor_fee
            + peak_surcharge
            + urgency_surcharge
            + fuel
            + return_leg
        )
        total = int(round_up(raw_subtotal))
        vat_amount = revenue.vat_from_inclusive(total, rates)
        split = revenue.split_revenue(total, rates)

        items: List[LineItem] = [
            LineItem("distance", f"Distance ({miles:.1f} miles)", distance_charge),
            LineItem("van_size", f"Van size ({van_size.value})", sized_distance - distance_charge),
            LineItem("helpers", f"Helpers ({request.helpers})", helper_fee),
            LineItem("fuel", "Fuel", fuel),
            LineItem("return_journey", "Return journey", return_leg),
        ]
        if floor_fee > 0:
            lift_note = ", with lift" if request.lift_available else ""
            items.append(
                LineItem("floor_access", f"Floor access ({floor_access.value}{lift_note})", floor_fee)
            )
        if peak_surcharge > 0:
            pct = round_half_up(schedule.percentage)
            items.append(LineItem("peak_time", f"Peak time surcharge ({pct}%)", peak_surcharge))
        if urgency_surcharge > 0:
            pct = round_half_up((urgency_mult - Decimal("1")) * Decimal("100"))
            items.append(LineItem("urgency", f"Urgency surcharge ({pct}%)", urgency_surcharge))
        items.extend(
            [
                LineItem("subtotal", "Subtotal (excluding VAT)", Decimal(total)),
                LineItem("vat", f"VAT ({_pct(rates.vat_rate)}%)", vat_amount),
                LineItem("total", "Total (including VAT)", Decimal(total)),
                LineItem(
                    "platform_fee",
                    f"Platform fee ({_pct(rates.platform_fee_percentage)}%)",
                    Decimal(split.platform_fee),
                ),
                LineItem(
                    "driver_share",
                    f"Driver payment ({_pct(rates.driver_share_percentage)}%)",
                    Decimal(split.driver_share),
                ),
            ]
        )

        logger.debug(
            "quote: %.1f miles, %s van, schedule x%s, urgency x%s -> total %s",
            miles,
            van_size.value,
            schedule.multiplier,
            urgency_mult,
            total,
        )

        return PriceBreakdown(
            line_items=tuple(items),
            distance_charge=distance_charge,
            van_size_multiplier=van_mult,
            time_charge=time_charge,
            helper_fee=helper_fee,
            floor_access_fee=floor_fee,
            peak_multiplier=schedule.multiplier,
            peak_surcharge=peak_surcharge,
            urgency_multiplier=urgency_mult,
            urgency_surcharge=urgency_surcharge,
            fuel_cost=fuel,
            return_journey_cost=return_leg,
            raw_subtotal=raw_subtotal,
            subtotal=total,
            vat_amount=vat_amount,
            total=total,
            platform_fee=split.platform_fee,
            driver_share=split.driver_share,
        )

    # ------------- Landing-page estimate -------------

    def simple_quote(
        self,
        distance_miles: float,
        van_size: VanSize | str = VanSize.MEDIUM,
        move_date: Optional[date | datetime | str] = None,
        is_urban: bool = False,
    ) -> SimpleQuote:
        """Quick estimate: no helpers, ground floor, no lift, standard urgency."""
        request = QuoteRequest(
            distance_miles=distance_miles,
            van_size=van_size,
            helpers=0,
            floor_access=FloorAccess.GROUND,
            lift_available=False,
            move_date=move_date,
            urgency=Urgency.STANDARD,
            is_urban=is_urban,
        )
        breakdown = self.build_breakdown(request)
        minutes = running_costs.estimate_travel_minutes(request.distance_miles, self.rates)
        estimated_time = running_costs.format_duration(minutes)
        explanation = (
            f"{CURRENCY_SYMBOL}{breakdown.total} for a {request.van_size.value} van, "
            f"{request.distance_miles:.1f} miles. Estimated time: {estimated_time}."
        )
        return SimpleQuote(
            breakdown=breakdown,
            estimated_minutes=minutes,
            estimated_time=estimated_time,
            explanation=explanation,
            price_string=f"{CURRENCY_SYMBOL}{breakdown.total:.2f}",
            currency=CURRENCY_SYMBOL,
        )

    # ------------- Downstream helpers -------------

    def deposit_pence(self, breakdown: PriceBreakdown) -> int:
        return revenue.deposit_pence(breakdown.total, self.rates)

    @staticmethod
    def pricing_history(
        breakdown: PriceBreakdown,
        request: QuoteRequest,
        *,
        from_location: str,
        to_location: str,
        original_price: Optional[int] = None,
    ) -> PricingHistoryRecord:
        """Pricing-history row for the persistence layer.

        ``original_price`` is the price first shown to the customer when it
        differs from the final one (e.g. after an admin override); it defaults
        to the quoted total.
        """
        factors = {
            "vanSize": request.van_size.value,
            "helpers": request.helpers,
            "floorAccess": request.floor_access.value,
            "liftAvailable": request.lift_available,
            "urgency": request.urgency.value,
            "isUrban": request.is_urban,
            "moveDate": request.move_date.isoformat() if request.move_date else None,
            "components": breakdown.components(),
        }
        return PricingHistoryRecord(
            from_location=from_location,
            to_location=to_location,
            distance=int(round_half_up(Decimal(str(request.distance_miles)))),
            van_size=request.van_size.value,
            final_price=breakdown.total,
            original_price=breakdown.total if original_price is None else original_price,
            factors=json.dumps(factors, sort_keys=True),
        )


__all__ = ["QuoteEngine"]
