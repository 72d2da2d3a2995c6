from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Optional

from ..common.datetime_utils import parse_iso_date, parse_optional_datetime
from ..common.numbers import as_float


def row_date(value: Any) -> Optional[date]:
    """Normalize backend DATE values (``'2025-01-31'`` strings or date objects)."""
    if value is None or value == "":
        return None
    return parse_iso_date(value)


def row_datetime(value: Any) -> Optional[datetime]:
    """Normalize backend timestamptz values to aware datetimes."""
    return parse_optional_datetime(value)


def row_float(value: Any, default: float = 0.0) -> float:
    return as_float(value, default)


def row_int(value: Any, default: int = 0) -> int:
    if value is None or value == "":
        return default
    return int(float(value))


def row_list(value: Any) -> List[Any]:
    """JSON array columns come back as lists; anything else is treated as empty."""
    if isinstance(value, list):
        return value
    return []


def iso_or_none(value: Optional[Any]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()
