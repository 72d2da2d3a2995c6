from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Optional, Union
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

DateLike = Union[date, str]
DateTimeLike = Union[datetime, str]

_FRACTION = re.compile(r"\.(\d{1,6})(?=$|[+-])")
_SHORT_OFFSET = re.compile(r"([+-]\d{2})$")


def parse_iso_date(value: DateLike) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_iso_datetime(value: DateTimeLike) -> datetime:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Naive values are taken as UTC, which is how the backend stores timestamptz.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            # fromisoformat before 3.11 wants 3 or 6 fraction digits and a HH:MM offset.
            text = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0"), text)
            text = text[:10] + _SHORT_OFFSET.sub(r"\1:00", text[10:])
            dt = datetime.fromisoformat(text)
        except (AttributeError, ValueError):
            raise ValidationError(f"Invalid timestamp: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_optional_datetime(value: Optional[DateTimeLike]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    return parse_iso_datetime(value)


def now_utc() -> datetime:
    """Current time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def get_timezone(name: str) -> tzinfo:
    return ZoneInfo(name)


def local_date(moment: datetime, tz: tzinfo) -> date:
    return parse_iso_datetime(moment).astimezone(tz).date()


def combine_local(work_date: date, hhmm: str, tz: tzinfo) -> datetime:
    """Build an aware timestamp from a work date and an HH:MM string."""
    try:
        t = datetime.strptime((hhmm or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError("Invalid time (HH:MM)")
    return datetime.combine(work_date, t, tzinfo=tz)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def total_days_inclusive(start: DateLike, end: DateLike) -> int:
    """Calculate total days between two dates (inclusive)."""
    return (parse_iso_date(end) - parse_iso_date(start)).days + 1


def previous_month(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year


def next_month(month: int, year: int) -> tuple[int, int]:
    if month == 12:
        return 1, year + 1
    return month + 1, year


def month_name(month: int, year: Optional[int] = None) -> str:
    name = calendar.month_name[month]
    return f"{name} {year}" if year is not None else name


def current_week_in_month(today: date) -> tuple[date, date]:
    """Monday..Sunday window around `today`, clamped to today's month."""
    monday = today - timedelta(days=today.weekday())
    sunday = monday + timedelta(days=6)
    first, last = month_bounds(today.year, today.month)
    return max(monday, first), min(sunday, last)
