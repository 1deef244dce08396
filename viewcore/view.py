"""List view orchestrator.

``ListView`` owns the filter, sort and page state over a caller-supplied
collection and recomputes the derived view synchronously whenever that
state changes. Filter updates go through a :class:`~viewcore.debounce.Debouncer`;
any change of filter or sort criteria sends the view back to page 1.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, is_dataclass, replace
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar, Union

from viewcore.debounce import CancelHandle, Debouncer, Timer
from viewcore.filters import (
    Comparator,
    FieldRef,
    FilterSpec,
    PageState,
    Predicate,
    SortDirection,
    SortSpec,
    ViewOptions,
    field_name,
)
from viewcore.stages import filter_records, paginate, sort_records, total_pages

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _item_payload(item: Any) -> Any:
    to_dict = getattr(item, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(item) and not isinstance(item, type):
        return asdict(item)
    return item


@dataclass(frozen=True)
class ViewState:
    items: List[Any]
    total_items: int
    total_pages: int
    current_page: int
    page_size: int
    sort_by: Optional[str]
    sort_direction: str
    filter_value: Any
    is_loading: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [_item_payload(i) for i in self.items],
            "total_items": self.total_items,
            "total_pages": self.total_pages,
            "current_page": self.current_page,
            "page_size": self.page_size,
            "sort_by": self.sort_by,
            "sort_direction": self.sort_direction,
            "filter_value": self.filter_value,
            "is_loading": self.is_loading,
        }


class ListView(Generic[T]):
    def __init__(
        self,
        source: Optional[Sequence[T]] = None,
        *,
        options: Optional[ViewOptions] = None,
        filter_field: Optional[FieldRef] = None,
        filter_value: Any = None,
        sort_field: Optional[FieldRef] = None,
        sort_direction: Union[SortDirection, str] = SortDirection.ASC,
        custom_predicate: Optional[Predicate] = None,
        custom_comparator: Optional[Comparator] = None,
        timer: Optional[Timer] = None,
    ):
        self.options = options or ViewOptions()
        self._source: Sequence[T] = source if source is not None else []
        self._source_version = 0
        self._filter = FilterSpec(field=filter_field, value=filter_value, custom_predicate=custom_predicate)
        self._sort = SortSpec(
            field=sort_field,
            direction=SortDirection.coerce(sort_direction),
            custom_comparator=custom_comparator,
        )
        self._page = PageState(
            current_page=max(1, self.options.initial_page),
            page_size=max(1, self.options.page_size),
        )
        self._debouncer = Debouncer(self._apply_filter, self.options.debounce_ms, timer=timer)
        self._memo_key: Optional[tuple] = None
        self._filtered_sorted: Sequence[T] = []
        self._refresh()

    # -- recomputation -------------------------------------------------------

    def _refresh(self, *, reset_page: bool = False) -> None:
        key = (self._source_version, self._filter, self._sort)
        if key != self._memo_key:
            self._filtered_sorted = sort_records(filter_records(self._source, self._filter), self._sort)
            self._memo_key = key

        pages = self.total_pages
        current = self._page.current_page
        if reset_page or current > max(pages, 1):
            if current != 1:
                logger.debug("page reset from %s to 1 (total_pages=%s)", current, pages)
            self._page = replace(self._page, current_page=1)

    def _apply_filter(self, spec: FilterSpec) -> None:
        self._filter = spec
        logger.debug("filter applied: field=%s value=%r", field_name(spec.field), spec.value)
        self._refresh(reset_page=True)

    # -- operations ----------------------------------------------------------

    def set_source(self, source: Sequence[T]) -> None:
        self._source = source if source is not None else []
        self._source_version += 1
        self._refresh()

    def set_filter(self, criteria: Any) -> CancelHandle:
        """Schedule a new filter value, or a whole ``FilterSpec``, for debounced application."""
        if isinstance(criteria, FilterSpec):
            target = criteria
        else:
            target = replace(self._filter, value=criteria)
        return self._debouncer.schedule(target)

    def set_sort(self, field: FieldRef) -> None:
        if self._sort.field is not None and self._sort.field == field:
            self._sort = replace(self._sort, direction=self._sort.direction.flipped())
        else:
            self._sort = replace(self._sort, field=field, direction=SortDirection.ASC)
        logger.debug("sort changed: field=%s direction=%s", field_name(field), self._sort.direction.value)
        self._refresh(reset_page=True)

    def go_to_page(self, page: int) -> None:
        if not isinstance(page, int) or isinstance(page, bool):
            return
        if 1 <= page <= self.total_pages:
            self._page = replace(self._page, current_page=page)

    def next_page(self) -> None:
        if self._page.current_page < self.total_pages:
            self._page = replace(self._page, current_page=self._page.current_page + 1)

    def prev_page(self) -> None:
        if self._page.current_page > 1:
            self._page = replace(self._page, current_page=self._page.current_page - 1)

    def close(self) -> None:
        self._debouncer.close()

    # -- derived outputs -----------------------------------------------------

    @property
    def timer(self) -> Timer:
        return self._debouncer.timer

    @property
    def page(self) -> List[T]:
        return paginate(self._filtered_sorted, self._page)

    @property
    def filtered_data(self) -> List[T]:
        return list(self._filtered_sorted)

    @property
    def total_items(self) -> int:
        return len(self._filtered_sorted)

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self._page.page_size)

    @property
    def current_page(self) -> int:
        return self._page.current_page

    @property
    def page_size(self) -> int:
        return self._page.page_size

    @property
    def sort_by(self) -> Optional[FieldRef]:
        return self._sort.field

    @property
    def sort_direction(self) -> SortDirection:
        return self._sort.direction

    @property
    def filter_value(self) -> Any:
        return self._filter.value

    @property
    def is_loading(self) -> bool:
        return self._debouncer.pending

    def snapshot(self) -> ViewState:
        return ViewState(
            items=self.page,
            total_items=self.total_items,
            total_pages=self.total_pages,
            current_page=self.current_page,
            page_size=self.page_size,
            sort_by=field_name(self._sort.field),
            sort_direction=self._sort.direction.value,
            filter_value=self._filter.value,
            is_loading=self.is_loading,
        )
