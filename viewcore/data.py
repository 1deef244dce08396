"""Coercion of collaborator-supplied rows into models and frames.

The persistence layer hands over already-materialized rows (dicts, usually
straight from a document store). Nothing here fetches or caches; rows are
normalized on every call.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from viewcore.models import Category, Expense
from viewcore.values import epoch_ms, is_number

FRAME_COLUMNS = ["position", "id", "description", "amount", "category", "ts"]


def parse_datetime(value: object) -> Optional[datetime]:
    """Parse datetimes, dates, ISO strings and epoch milliseconds.

    Returns ``None`` for anything that does not parse. Timezone-aware inputs
    keep their offset.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    try:
        if is_number(value):
            if math.isnan(float(value)):  # type: ignore[arg-type]
                return None
            ts = pd.to_datetime(value, unit="ms", errors="coerce")
        else:
            ts = pd.to_datetime(str(value), errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _as_amount(value: object) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        out = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(out) else out


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def coerce_expense(raw: Union[Expense, Mapping[str, Any]]) -> Expense:
    if isinstance(raw, Expense):
        return raw
    return Expense(
        id=_as_text(raw.get("id")),
        description=_as_text(raw.get("description")),
        amount=_as_amount(raw.get("amount")),
        category=_as_text(raw.get("category")),
        date=parse_datetime(raw.get("date")),
        created_by=_as_text(raw.get("created_by", raw.get("createdBy"))),
    )


def coerce_expenses(rows: Optional[Iterable[Union[Expense, Mapping[str, Any]]]]) -> List[Expense]:
    if not rows:
        return []
    return [coerce_expense(r) for r in rows if r is not None]


def coerce_category(raw: Union[Category, Mapping[str, Any]]) -> Category:
    if isinstance(raw, Category):
        return raw
    icon = raw.get("icon")
    return Category(
        id=_as_text(raw.get("id")),
        name=_as_text(raw.get("name")),
        color=_as_text(raw.get("color")),
        icon=None if icon is None else str(icon),
    )


def coerce_categories(rows: Optional[Iterable[Union[Category, Mapping[str, Any]]]]) -> List[Category]:
    if not rows:
        return []
    return [coerce_category(r) for r in rows if r is not None]


def expenses_frame(expenses: Sequence[Expense]) -> pd.DataFrame:
    if not expenses:
        return pd.DataFrame(columns=FRAME_COLUMNS)
    records = [
        {
            "position": i,
            "id": e.id,
            "description": e.description or "",
            "amount": float(e.amount),
            "category": e.category,
            "ts": epoch_ms(e.date) if e.date is not None else math.nan,
        }
        for i, e in enumerate(expenses)
    ]
    return pd.DataFrame.from_records(records, columns=FRAME_COLUMNS)
