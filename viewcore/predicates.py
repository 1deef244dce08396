from __future__ import annotations

import math
from typing import Any, Collection, Optional

from viewcore.values import as_datetime, epoch_ms, is_number


def contains_text(value: Any, query: Any) -> bool:
    if not isinstance(value, str):
        return False
    return str(query).lower() in value.lower()


def equals_number(value: Any, target: Any) -> bool:
    if not is_number(value):
        return False
    try:
        wanted = float(target)
    except (TypeError, ValueError):
        return False
    if math.isnan(wanted):
        return False
    return float(value) == wanted


def in_range(value: Any, low: Optional[float] = None, high: Optional[float] = None) -> bool:
    if not is_number(value):
        return low is None and high is None
    if low is not None and value < low:
        return False
    if high is not None and value > high:
        return False
    return True


def in_set(value: Any, allowed: Optional[Collection[Any]]) -> bool:
    if not allowed:
        return True
    return value in allowed


def in_date_range(value: Any, start: Any = None, end: Any = None) -> bool:
    start_dt = as_datetime(start)
    end_dt = as_datetime(end)
    if start_dt is None and end_dt is None:
        return True
    dt = as_datetime(value)
    if dt is None:
        return False
    ts = epoch_ms(dt)
    if start_dt is not None and ts < epoch_ms(start_dt):
        return False
    if end_dt is not None and ts > epoch_ms(end_dt):
        return False
    return True


def matches_field_value(field_value: Any, filter_value: Any) -> bool:
    """Filter stage rule: substring for strings, equality for numbers, else no match."""
    if isinstance(field_value, str):
        return contains_text(field_value, filter_value)
    if is_number(field_value):
        return equals_number(field_value, filter_value)
    return False
