from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class Expense:
    id: str
    description: str = ""
    amount: float = 0.0
    category: str = ""
    date: Optional[datetime] = None
    created_by: str = ""

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["date"] = self.date.isoformat() if self.date is not None else None
        return payload


@dataclass
class Category:
    id: str
    name: str = ""
    color: str = ""
    icon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CategoryStat:
    id: str
    name: str
    amount: float
    percentage: float
    color: str
    icon: Optional[str] = None
    expenses: Optional[List[Expense]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "amount": self.amount,
            "percentage": self.percentage,
            "color": self.color,
            "icon": self.icon,
        }
        if self.expenses is not None:
            payload["expenses"] = [e.to_dict() for e in self.expenses]
        return payload


@dataclass(frozen=True)
class PeriodComparison:
    current_total: float = 0.0
    previous_total: float = 0.0
    difference: float = 0.0
    percentage_change: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class DateWindow:
    from_: datetime
    to: datetime

    def to_dict(self) -> Dict[str, str]:
        return {"from": self.from_.isoformat(), "to": self.to.isoformat()}
