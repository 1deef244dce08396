"""Tagged field values and the comparators used by the sort stage.

Records are generic, so a field can hold anything. Before comparing, a raw
value is classified into one of the variants below; only like variants are
ordered against each other. Any other pairing compares equal, which keeps
the sort stable instead of raising on mixed data.
"""

from __future__ import annotations

import locale
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from numbers import Real
from typing import Any, Union

_EPOCH = datetime(1970, 1, 1)


@dataclass(frozen=True)
class StringValue:
    value: str


@dataclass(frozen=True)
class NumberValue:
    value: float


@dataclass(frozen=True)
class TemporalValue:
    value: datetime


@dataclass(frozen=True)
class OtherValue:
    value: Any = None


FieldValue = Union[StringValue, NumberValue, TemporalValue, OtherValue]


def is_number(value: Any) -> bool:
    # bool is an int subclass but is not a number for filtering or sorting.
    if isinstance(value, bool):
        return False
    return isinstance(value, (Real, Decimal))


def as_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return None


def to_field_value(raw: Any) -> FieldValue:
    if isinstance(raw, str):
        return StringValue(raw)
    if is_number(raw):
        return NumberValue(float(raw))
    dt = as_datetime(raw)
    if dt is not None:
        return TemporalValue(dt)
    return OtherValue(raw)


def epoch_ms(value: datetime) -> float:
    """Milliseconds since the epoch. Naive datetimes are read as UTC."""
    if value.tzinfo is None:
        return (value - _EPOCH).total_seconds() * 1000.0
    return (value - datetime(1970, 1, 1, tzinfo=timezone.utc)).total_seconds() * 1000.0


def align_datetimes(a: datetime, b: datetime) -> tuple:
    """Make a pair subtractable: if only one side is aware, the naive one is read as UTC."""
    if (a.tzinfo is None) == (b.tzinfo is None):
        return a, b
    if a.tzinfo is None:
        a = a.replace(tzinfo=timezone.utc)
    else:
        b = b.replace(tzinfo=timezone.utc)
    return a, b


def compare_strings(a: str, b: str) -> int:
    primary = locale.strcoll(a.casefold(), b.casefold())
    if primary:
        return primary
    return locale.strcoll(a, b)


def compare_numbers(a: float, b: float) -> float:
    return a - b


def compare_temporal(a: datetime, b: datetime) -> float:
    return epoch_ms(a) - epoch_ms(b)


def compare_values(a: FieldValue, b: FieldValue) -> float:
    if isinstance(a, StringValue) and isinstance(b, StringValue):
        return compare_strings(a.value, b.value)
    if isinstance(a, NumberValue) and isinstance(b, NumberValue):
        return compare_numbers(a.value, b.value)
    if isinstance(a, TemporalValue) and isinstance(b, TemporalValue):
        return compare_temporal(a.value, b.value)
    # Mismatched or unsupported pairs carry no ordering signal.
    return 0


def compare_raw(a: Any, b: Any) -> float:
    return compare_values(to_field_value(a), to_field_value(b))
