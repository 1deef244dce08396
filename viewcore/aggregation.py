from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import pandas as pd

from viewcore.charts import category_share_chart
from viewcore.data import coerce_categories, coerce_expenses, expenses_frame, parse_datetime
from viewcore.filters import ExpenseQuery, SortDirection, SortSpec
from viewcore.formatting import format_currency, format_date, format_percent
from viewcore.models import Category, CategoryStat, DateWindow, Expense, PeriodComparison
from viewcore.predicates import contains_text, in_date_range, in_range, in_set
from viewcore.stages import sort_records
from viewcore.values import align_datetimes

logger = logging.getLogger(__name__)

ExpenseLike = Union[Expense, Mapping[str, Any]]
CategoryLike = Union[Category, Mapping[str, Any]]

# Smallest step between two adjacent windows.
RESOLUTION = timedelta(milliseconds=1)

EXPENSE_SORT_FIELDS = {
    "date": lambda e: e.date,
    "amount": lambda e: e.amount,
    "category": lambda e: e.category,
}


def _total(expenses: Sequence[Expense]) -> float:
    if not expenses:
        return 0.0
    return float(expenses_frame(expenses)["amount"].sum())


def calculate_category_stats(
    expenses: Optional[Iterable[ExpenseLike]],
    categories: Optional[Iterable[CategoryLike]],
    *,
    include_expenses: bool = False,
) -> List[CategoryStat]:
    """Per-category totals and share of overall spend, largest first.

    The overall total covers every expense, including ones whose category is
    not listed. Categories without spend are left out.
    """
    expenses = coerce_expenses(expenses)
    categories = coerce_categories(categories)
    if not expenses or not categories:
        return []

    frame = expenses_frame(expenses)
    total_amount = float(frame["amount"].sum())
    by_category = frame.groupby("category", sort=False)["amount"].sum()

    stats: List[CategoryStat] = []
    for category in categories:
        amount = float(by_category.get(category.id, 0.0))
        if amount == 0:
            continue
        percentage = amount / total_amount * 100 if total_amount > 0 else 0.0
        stats.append(
            CategoryStat(
                id=category.id,
                name=category.name,
                amount=amount,
                percentage=percentage,
                color=category.color,
                icon=category.icon,
                expenses=[e for e in expenses if e.category == category.id] if include_expenses else None,
            )
        )
    stats.sort(key=lambda s: s.amount, reverse=True)
    return stats


def get_filtered_and_sorted_expenses(
    expenses: Optional[Iterable[ExpenseLike]],
    search_query: str = "",
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    category_ids: Optional[Iterable[str]] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    sort_by: str = "date",
    sort_order: Union[SortDirection, str] = SortDirection.DESC,
) -> List[Expense]:
    expenses = coerce_expenses(expenses)
    if not expenses:
        return []

    frame = expenses_frame(expenses)
    mask = pd.Series(True, index=frame.index)
    if search_query:
        mask &= frame["description"].map(lambda d: contains_text(d, search_query))
    if min_amount is not None or max_amount is not None:
        mask &= frame["amount"].map(lambda a: in_range(a, min_amount, max_amount))
    wanted = {str(c) for c in (category_ids or [])}
    if wanted:
        mask &= frame["category"].map(lambda c: in_set(c, wanted))
    start = parse_datetime(date_from)
    end = parse_datetime(date_to)
    if start is not None or end is not None:
        dates = pd.Series([e.date for e in expenses], index=frame.index, dtype=object)
        mask &= dates.map(lambda d: in_date_range(d, start, end))

    selected = [expenses[int(i)] for i in frame.loc[mask, "position"]]
    spec = SortSpec(field=EXPENSE_SORT_FIELDS.get(sort_by), direction=SortDirection.coerce(sort_order))
    return list(sort_records(selected, spec))


def query_expenses(expenses: Optional[Iterable[ExpenseLike]], query: Optional[ExpenseQuery] = None) -> List[Expense]:
    query = query or ExpenseQuery()
    return get_filtered_and_sorted_expenses(
        expenses,
        query.search_query,
        query.min_amount,
        query.max_amount,
        query.categories,
        query.date_from,
        query.date_to,
        query.sort_by,
        query.sort_order,
    )


def compare_with_previous_period(
    current_expenses: Optional[Iterable[ExpenseLike]],
    previous_expenses: Optional[Iterable[ExpenseLike]],
) -> PeriodComparison:
    current_total = _total(coerce_expenses(current_expenses))
    previous_total = _total(coerce_expenses(previous_expenses))
    difference = current_total - previous_total
    if previous_total > 0:
        percentage_change = difference / previous_total * 100
    else:
        # Growth from nothing is reported as +100%, anything else as no change.
        percentage_change = 100.0 if difference > 0 else 0.0
    return PeriodComparison(
        current_total=current_total,
        previous_total=previous_total,
        difference=difference,
        percentage_change=percentage_change,
    )


def get_previous_period_dates(current_from: Any, current_to: Any) -> DateWindow:
    """The window of equal length that ends just before ``current_from``."""
    start = parse_datetime(current_from)
    end = parse_datetime(current_to)
    if start is None or end is None:
        raise ValueError("current_from and current_to must be dates or datetimes")
    start, end = align_datetimes(start, end)
    duration = end - start
    previous_to = start - RESOLUTION
    previous_from = previous_to - duration
    return DateWindow(from_=previous_from, to=previous_to)


def _query_payload(query: ExpenseQuery) -> Dict[str, Any]:
    payload = asdict(query)
    payload["date_from"] = query.date_from.isoformat() if query.date_from else None
    payload["date_to"] = query.date_to.isoformat() if query.date_to else None
    payload["sort_order"] = SortDirection.coerce(query.sort_order).value
    return payload


def compute_expense_summary(
    expenses: Optional[Iterable[ExpenseLike]],
    categories: Optional[Iterable[CategoryLike]],
    *,
    period_from: Any = None,
    period_to: Any = None,
    query: Optional[ExpenseQuery] = None,
) -> Dict[str, Any]:
    expenses = coerce_expenses(expenses)
    categories = coerce_categories(categories)
    query = query or ExpenseQuery()

    start = parse_datetime(period_from)
    end = parse_datetime(period_to)
    comparison = None
    previous_window = None
    current = expenses
    if start is not None and end is not None:
        previous_window = get_previous_period_dates(start, end)
        current = get_filtered_and_sorted_expenses(expenses, date_from=start, date_to=end)
        previous = get_filtered_and_sorted_expenses(
            expenses, date_from=previous_window.from_, date_to=previous_window.to
        )
        comparison = compare_with_previous_period(current, previous)
    elif start is not None or end is not None:
        logger.debug("summary period ignored: both period_from and period_to are required")

    stats = calculate_category_stats(current, categories)
    total = _total(current)
    listed = query_expenses(current, query)

    category_rows = []
    for stat in stats:
        row = stat.to_dict()
        row["amount_display"] = format_currency(stat.amount)
        row["percentage_display"] = format_percent(stat.percentage)
        category_rows.append(row)

    expense_rows = []
    for expense in listed:
        row = expense.to_dict()
        row["amount_display"] = format_currency(expense.amount, decimals=2)
        row["date_display"] = format_date(expense.date)
        expense_rows.append(row)

    return {
        "query": _query_payload(query),
        "totals": {"count": len(current), "amount": total, "amount_display": format_currency(total)},
        "category_stats": category_rows,
        "comparison": comparison.to_dict() if comparison is not None else None,
        "previous_window": previous_window.to_dict() if previous_window is not None else None,
        "expenses": expense_rows,
        "charts": {"category_share": category_share_chart(stats)},
    }
