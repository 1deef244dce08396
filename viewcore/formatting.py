from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

import pandas as pd

from viewcore.data import parse_datetime


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    try:
        return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return None


def format_currency(value: object, symbol: str = "₽", decimals: int = 0) -> str:
    rounded = round_half_up(value, decimals) if not isinstance(value, str) else None
    if rounded is None:
        return "N/A"
    return f"{rounded:,.{decimals}f} {symbol}".replace(",", " ")


def format_percent(value: object, digits: int = 1) -> str:
    rounded = round_half_up(value, digits) if not isinstance(value, str) else None
    if rounded is None:
        return "N/A"
    return f"{rounded:.{digits}f}%"


def format_date(value: object, fmt: str = "%d %B %Y") -> str:
    dt = parse_datetime(value)
    if dt is None:
        return "" if value is None else str(value)
    return dt.strftime(fmt)
