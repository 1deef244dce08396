from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

from viewcore.data import parse_datetime
from viewcore.predicates import matches_field_value
from viewcore.values import compare_raw

DEFAULT_PAGE_SIZE = 20
DEFAULT_DEBOUNCE_MS = 300
MAX_PAGE_SIZE = 500

EXPENSE_SORT_KEYS = ("date", "amount", "category")

Accessor = Callable[[Any], Any]
FieldRef = Union[str, Accessor]
Predicate = Callable[[Any], bool]
Comparator = Callable[[Any, Any], float]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def coerce(cls, value: object) -> "SortDirection":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        return cls.DESC if text in {"desc", "descending"} else cls.ASC

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def field_getter(ref: FieldRef) -> Accessor:
    """Return an accessor for a field reference.

    Callables are used as-is. Names read a mapping key first and fall back to
    an attribute; a missing field reads as ``None``.
    """
    if callable(ref):
        return ref

    def get(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(ref)
        return getattr(record, ref, None)

    return get


def field_name(ref: Optional[FieldRef]) -> Optional[str]:
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref
    return getattr(ref, "__name__", repr(ref))


@dataclass(frozen=True)
class FilterSpec:
    field: Optional[FieldRef] = None
    value: Any = None
    custom_predicate: Optional[Predicate] = None

    @property
    def is_active(self) -> bool:
        if self.custom_predicate is not None:
            return True
        return self.field is not None and self.value is not None and self.value != ""

    def predicate(self) -> Optional[Predicate]:
        if self.custom_predicate is not None:
            return self.custom_predicate
        if not self.is_active:
            return None
        get = field_getter(self.field)
        wanted = self.value
        return lambda record: matches_field_value(get(record), wanted)


@dataclass(frozen=True)
class SortSpec:
    field: Optional[FieldRef] = None
    direction: SortDirection = SortDirection.ASC
    custom_comparator: Optional[Comparator] = None

    def comparator(self) -> Optional[Comparator]:
        if self.custom_comparator is not None:
            return self.custom_comparator
        if self.field is None:
            return None
        get = field_getter(self.field)
        sign = -1 if SortDirection.coerce(self.direction) is SortDirection.DESC else 1
        return lambda a, b: sign * compare_raw(get(a), get(b))


@dataclass(frozen=True)
class PageState:
    current_page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass(frozen=True)
class ViewOptions:
    page_size: int = DEFAULT_PAGE_SIZE
    initial_page: int = 1
    debounce_ms: int = DEFAULT_DEBOUNCE_MS


@dataclass(frozen=True)
class ExpenseQuery:
    search_query: str = ""
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    categories: List[str] = field(default_factory=list)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: str = "date"
    sort_order: SortDirection = SortDirection.DESC


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default


def _as_float(value: object) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _as_str_list(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    return [str(v) for v in values if v is not None and str(v) != ""]


def normalize_view_options(raw: Optional[Mapping[str, Any]] = None) -> ViewOptions:
    raw = raw or {}
    page_size = _as_int(raw.get("page_size", DEFAULT_PAGE_SIZE), DEFAULT_PAGE_SIZE)
    page_size = max(1, min(MAX_PAGE_SIZE, page_size))
    initial_page = max(1, _as_int(raw.get("initial_page", 1), 1))
    debounce_ms = _as_int(raw.get("debounce_ms", DEFAULT_DEBOUNCE_MS), DEFAULT_DEBOUNCE_MS)
    return ViewOptions(page_size=page_size, initial_page=initial_page, debounce_ms=debounce_ms)


def normalize_expense_query(raw: Optional[Mapping[str, Any]] = None) -> ExpenseQuery:
    raw = raw or {}
    sort_by = str(raw.get("sort_by") or "date").strip().lower()
    if sort_by not in EXPENSE_SORT_KEYS:
        sort_by = "date"
    return ExpenseQuery(
        search_query=str(raw.get("search_query") or "").strip(),
        min_amount=_as_float(raw.get("min_amount")),
        max_amount=_as_float(raw.get("max_amount")),
        categories=_as_str_list(raw.get("categories")),
        date_from=parse_datetime(raw.get("date_from")),
        date_to=parse_datetime(raw.get("date_to")),
        sort_by=sort_by,
        sort_order=SortDirection.coerce(raw.get("sort_order") or "desc"),
    )
