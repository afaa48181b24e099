from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta, timezone
from decimal import Decimal

import pytest

from changestage.domain.submit import EnumParseError, FieldType, coerce_value, parse_enum
from tests.helpers.catalog import Category, Priority


def test_enum_member_name_round_trips() -> None:
    for member in Category:
        assert coerce_value(FieldType(Category), member.name) is member


def test_enum_falls_back_to_member_value() -> None:
    assert coerce_value(FieldType(Category), "garden") is Category.GARDEN


def test_int_enum_parses_numeric_text() -> None:
    assert parse_enum(Priority, "2") is Priority.HIGH
    assert parse_enum(Priority, "HIGH") is Priority.HIGH


def test_enum_member_passes_through() -> None:
    assert coerce_value(FieldType(Category), Category.KITCHEN) is Category.KITCHEN


def test_unknown_enum_text_fails() -> None:
    with pytest.raises(EnumParseError) as excinfo:
        coerce_value(FieldType(Category), "Furniture")

    assert excinfo.value.enum_name == "Category"
    assert excinfo.value.value == "Furniture"


def test_date_widens_to_midnight_timestamp() -> None:
    result = coerce_value(FieldType(datetime), date(2024, 3, 9))

    assert result == datetime(2024, 3, 9, 0, 0)
    assert isinstance(result, datetime)


def test_date_into_date_field_is_unchanged() -> None:
    value = date(2024, 3, 9)

    assert coerce_value(FieldType(date), value) is value


def test_offset_is_dropped_keeping_wall_clock() -> None:
    value = datetime(2024, 3, 9, 18, 45, tzinfo=timezone(timedelta(hours=5)))

    result = coerce_value(FieldType(datetime), value)

    assert result == datetime(2024, 3, 9, 18, 45)
    assert isinstance(result, datetime)
    assert result.tzinfo is None


def test_offset_is_kept_for_offset_fields() -> None:
    value = datetime(2024, 3, 9, 18, 45, tzinfo=UTC)

    assert coerce_value(FieldType(datetime, keep_offset=True), value) is value


def test_time_of_day_becomes_elapsed_duration() -> None:
    result = coerce_value(FieldType(timedelta), time(8, 30, 15, 500))

    assert result == timedelta(hours=8, minutes=30, seconds=15, microseconds=500)


def test_time_into_time_field_is_unchanged() -> None:
    value = time(8, 30)

    assert coerce_value(FieldType(time), value) is value


@pytest.mark.parametrize(
    ("declared", "value"),
    [
        (str, "Widget"),
        (int, 7),
        (Decimal, Decimal("9.99")),
        (str, 42),
        (Category, None),
    ],
)
def test_unhandled_pairs_pass_through(declared: type, value: object) -> None:
    assert coerce_value(FieldType(declared), value) is value
