from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from vanquote.models import (
    FloorAccess,
    LineItem,
    PricingHistoryRecord,
    QuoteRequest,
    Urgency,
    VanSize,
)
from vanquote.rules.rate_table import DEFAULT_FLOOR_ACCESS, DEFAULT_URGENCY, DEFAULT_VAN_SIZE


@pytest.mark.parametrize(
    "enum_cls, raw, expected",
    [
        (VanSize, "luton", VanSize.LUTON),
        (VanSize, "Luton", VanSize.LUTON),
        (VanSize, "suv", VanSize.MEDIUM),
        (VanSize, None, VanSize.MEDIUM),
        (FloorAccess, "secondfloor", FloorAccess.SECOND_FLOOR),
        (FloorAccess, "basement", FloorAccess.GROUND),
        (Urgency, "express", Urgency.EXPRESS),
        (Urgency, "yesterday", Urgency.STANDARD),
    ],
)
def test_enum_fallbacks(enum_cls, raw, expected) -> None:
    assert enum_cls(raw) is expected


def test_request_defaults_and_coercions() -> None:
    req = QuoteRequest(
        distance_miles=12,
        van_size="SUV",
        floor_access=None,
        urgency="asap",
        move_date=date(2024, 3, 12),
        hours=None,
    )
    assert req.van_size is VanSize.MEDIUM
    assert req.floor_access is FloorAccess.GROUND
    assert req.urgency is Urgency.STANDARD
    assert req.move_date == datetime(2024, 3, 12, 0, 0)
    assert req.hours == 0
    assert req.helpers == 0
    assert req.lift_available is False
    assert req.is_urban is False


def test_request_parses_iso_move_date_and_drops_garbage() -> None:
    assert QuoteRequest(distance_miles=1, move_date="2024-03-16T18:30:00").move_date == datetime(
        2024, 3, 16, 18, 30
    )
    assert QuoteRequest(distance_miles=1, move_date="tomorrow-ish").move_date is None
    assert QuoteRequest(distance_miles=1, move_date=1710000000).move_date is None


@pytest.mark.parametrize(
    "field, value",
    [
        ("distance_miles", -0.1),
        ("distance_miles", float("nan")),
        ("distance_miles", float("inf")),
        ("hours", -1),
        ("hours", float("inf")),
        ("helpers", 4),
        ("helpers", -1),
    ],
)
def test_request_rejects_invalid_required_numbers(field, value) -> None:
    params = {"distance_miles": 10}
    params[field] = value
    with pytest.raises(ValidationError):
        QuoteRequest(**params)


def test_request_is_immutable() -> None:
    req = QuoteRequest(distance_miles=3)
    with pytest.raises(ValidationError):
        req.distance_miles = 4


def test_line_item_render() -> None:
    assert LineItem("fuel", "Fuel", Decimal("2.1215")).render() == "Fuel: £2.12"


def test_history_record_as_dict_uses_persistence_field_names() -> None:
    record = PricingHistoryRecord(
        from_location="Leeds",
        to_location="York",
        distance=25,
        van_size="luton",
        final_price=80,
        original_price=85,
        factors='{"urgency": "express"}',
    )
    assert record.as_dict() == {
        "fromLocation": "Leeds",
        "toLocation": "York",
        "distance": 25,
        "vanSize": "luton",
        "finalPrice": 80,
        "originalPrice": 85,
        "factors": '{"urgency": "express"}',
    }
    assert record.factors_dict() == {"urgency": "express"}


@pytest.mark.parametrize(
    "enum_cls, expected_value",
    [
        (VanSize, DEFAULT_VAN_SIZE),
        (FloorAccess, DEFAULT_FLOOR_ACCESS),
        (Urgency, DEFAULT_URGENCY),
    ],
)
def test_enum_default_follows_rate_table_default_tier(enum_cls, expected_value) -> None:
    assert enum_cls.default() is enum_cls(expected_value)
    assert enum_cls("no-such-tier").value == expected_value
