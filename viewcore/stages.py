"""Filter -> sort -> paginate stages.

Each stage is a pure function over a sequence of records. Inputs are never
mutated; when a stage has no active criteria it hands back the same
sequence object.
"""

from __future__ import annotations

import math
from functools import cmp_to_key
from typing import List, Sequence, TypeVar

from viewcore.filters import FilterSpec, PageState, SortSpec

T = TypeVar("T")


def filter_records(source: Sequence[T], spec: FilterSpec) -> Sequence[T]:
    predicate = spec.predicate()
    if predicate is None:
        return source
    return [record for record in source if predicate(record)]


def _as_key(comparator):
    def cmp(a, b) -> int:
        result = comparator(a, b)
        # NaN and other unordered results compare as ties.
        if result > 0:
            return 1
        if result < 0:
            return -1
        return 0

    return cmp_to_key(cmp)


def sort_records(source: Sequence[T], spec: SortSpec) -> Sequence[T]:
    comparator = spec.comparator()
    if comparator is None:
        return source
    return sorted(source, key=_as_key(comparator))


def total_pages(count: int, page_size: int) -> int:
    if count <= 0 or page_size <= 0:
        return 0
    return math.ceil(count / page_size)


def paginate(source: Sequence[T], page: PageState) -> List[T]:
    if page.page_size <= 0 or page.current_page < 1:
        return []
    start = (page.current_page - 1) * page.page_size
    if start >= len(source):
        return []
    return list(source[start:start + page.page_size])
