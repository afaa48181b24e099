"""Coerce upstream primitive values into native field types."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import TYPE_CHECKING

from .errors import EnumParseError

if TYPE_CHECKING:
    from .schema import FieldType


def coerce_value(field_type: FieldType, value: object) -> object:
    """Convert ``value`` for a field of ``field_type``.

    Only the enumerated conversions happen here, every other value is returned unchanged
    and left for the caller's type check.
    """

    declared = field_type.python_type
    if value is None:
        return None
    if issubclass(declared, Enum):
        return parse_enum(declared, value)
    if issubclass(declared, datetime):
        return _coerce_datetime(value, keep_offset=field_type.keep_offset)
    if issubclass(declared, timedelta) and isinstance(value, time):
        return time_to_timedelta(value)
    return value


def parse_enum[E: Enum](enum_cls: type[E], value: object) -> E:
    """Return the member named by ``value``, falling back to a lookup by value."""

    if isinstance(value, enum_cls):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return enum_cls[text]
        except KeyError:
            pass
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        pass
    if isinstance(value, str) and _is_integer(value):
        try:
            return enum_cls(int(value))
        except ValueError:
            pass
    raise EnumParseError(enum_cls.__name__, value)


def time_to_timedelta(value: time) -> timedelta:
    return timedelta(
        hours=value.hour,
        minutes=value.minute,
        seconds=value.second,
        microseconds=value.microsecond,
    )


def _coerce_datetime(value: object, *, keep_offset: bool) -> object:
    if isinstance(value, datetime):
        if value.tzinfo is not None and not keep_offset:
            # wall clock reading is kept, no conversion to another zone
            return value.replace(tzinfo=None)
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    return value


def _is_integer(text: str) -> bool:
    return text.strip().lstrip("+-").isdigit()
