from __future__ import annotations

import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import (
    CategoryStatsRequest,
    ComparisonRequest,
    ExpenseQueryModel,
    ExpenseQueryRequest,
    ListViewRequest,
    PeriodRequest,
    SummaryRequest,
)
from viewcore.aggregation import (
    calculate_category_stats,
    compare_with_previous_period,
    compute_expense_summary,
    get_previous_period_dates,
    query_expenses,
)
from viewcore.data import coerce_categories, coerce_expenses
from viewcore.filters import ExpenseQuery, normalize_expense_query, normalize_view_options
from viewcore.view import ListView


app = FastAPI(title="Expense View API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _query_from_model(model: ExpenseQueryModel) -> ExpenseQuery:
    return normalize_expense_query(model.model_dump())


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


@app.post("/expenses/query")
def expenses_query(request: ExpenseQueryRequest):
    try:
        expenses = coerce_expenses([e.model_dump() for e in request.expenses])
        listed = query_expenses(expenses, _query_from_model(request.query))
        return _json({"expenses": [e.to_dict() for e in listed], "total_items": len(listed)})
    except Exception as exc:
        logger.exception("expenses_query failed")
        return _error(exc)


@app.post("/stats/categories")
def category_stats(request: CategoryStatsRequest):
    try:
        stats = calculate_category_stats(
            coerce_expenses([e.model_dump() for e in request.expenses]),
            coerce_categories([c.model_dump() for c in request.categories]),
            include_expenses=request.include_expenses,
        )
        return _json({"stats": [s.to_dict() for s in stats]})
    except Exception as exc:
        logger.exception("category_stats failed")
        return _error(exc)


@app.post("/stats/comparison")
def comparison(request: ComparisonRequest):
    try:
        result = compare_with_previous_period(
            coerce_expenses([e.model_dump() for e in request.current]),
            coerce_expenses([e.model_dump() for e in request.previous]),
        )
        return _json(result.to_dict())
    except Exception as exc:
        logger.exception("comparison failed")
        return _error(exc)


@app.post("/periods/previous")
def previous_period(request: PeriodRequest):
    try:
        return _json(get_previous_period_dates(request.from_, request.to).to_dict())
    except Exception as exc:
        logger.exception("previous_period failed")
        return _error(exc)


@app.post("/view/page")
def view_page(request: ListViewRequest):
    try:
        options = normalize_view_options(
            {**request.options.model_dump(), "initial_page": request.page, "debounce_ms": 0}
        )
        view = ListView(
            request.records,
            options=options,
            filter_field=request.filter_field,
            filter_value=request.filter_value,
            sort_field=request.sort_by,
            sort_direction=request.sort_direction,
        )
        return _json(view.snapshot().to_dict())
    except Exception as exc:
        logger.exception("view_page failed")
        return _error(exc)


@app.post("/summary")
def summary(request: SummaryRequest):
    try:
        payload = compute_expense_summary(
            coerce_expenses([e.model_dump() for e in request.expenses]),
            coerce_categories([c.model_dump() for c in request.categories]),
            period_from=request.period_from,
            period_to=request.period_to,
            query=_query_from_model(request.query),
        )
        return _json(payload)
    except Exception as exc:
        logger.exception("summary failed")
        return _error(exc)
