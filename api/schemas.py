from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class ExpenseModel(BaseModel):
    id: str
    description: str = ""
    amount: float = 0.0
    category: str = ""
    date: Optional[datetime] = None
    created_by: str = ""


class CategoryModel(BaseModel):
    id: str
    name: str = ""
    color: str = ""
    icon: Optional[str] = None


class ExpenseQueryModel(BaseModel):
    search_query: str = ""
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    categories: List[str] = Field(default_factory=list)
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    sort_by: Literal["date", "amount", "category"] = "date"
    sort_order: Literal["asc", "desc"] = "desc"


class ViewOptionsModel(BaseModel):
    page_size: int = 20
    initial_page: int = 1


class CategoryStatsRequest(BaseModel):
    expenses: List[ExpenseModel] = Field(default_factory=list)
    categories: List[CategoryModel] = Field(default_factory=list)
    include_expenses: bool = False


class ComparisonRequest(BaseModel):
    current: List[ExpenseModel] = Field(default_factory=list)
    previous: List[ExpenseModel] = Field(default_factory=list)


class PeriodRequest(BaseModel):
    from_: datetime = Field(alias="from")
    to: datetime


class ExpenseQueryRequest(BaseModel):
    expenses: List[ExpenseModel] = Field(default_factory=list)
    query: ExpenseQueryModel = Field(default_factory=ExpenseQueryModel)


class ListViewRequest(BaseModel):
    records: List[Dict[str, Any]] = Field(default_factory=list)
    filter_field: Optional[str] = None
    filter_value: Optional[Union[str, float]] = None
    sort_by: Optional[str] = None
    sort_direction: Literal["asc", "desc"] = "asc"
    page: int = 1
    options: ViewOptionsModel = Field(default_factory=ViewOptionsModel)


class SummaryRequest(BaseModel):
    expenses: List[ExpenseModel] = Field(default_factory=list)
    categories: List[CategoryModel] = Field(default_factory=list)
    period_from: Optional[datetime] = None
    period_to: Optional[datetime] = None
    query: ExpenseQueryModel = Field(default_factory=ExpenseQueryModel)
