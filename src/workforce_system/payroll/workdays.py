"""Per-employee working-day calendar arithmetic. Months are 1-indexed."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import days_in_month
from ..core.constants import ALL_WEEKDAYS, DEFAULT_WORKING_DAYS
from ..core.enums import WeekDay


def weekday_of(day: date) -> WeekDay:
    return ALL_WEEKDAYS[day.weekday()]


def is_working_day(day: date, working_days: Iterable[WeekDay]) -> bool:
    return weekday_of(day) in set(working_days)


def working_days_in_month(working_days: Iterable[WeekDay], month: int, year: int) -> int:
    days = set(working_days)
    return sum(
        1
        for d in range(1, days_in_month(year, month) + 1)
        if weekday_of(date(year, month, d)) in days
    )


def monthly_total_hours(working_days: Iterable[WeekDay], daily_hours: float, month: int, year: int) -> float:
    return working_days_in_month(working_days, month, year) * daily_hours


def average_monthly_hours(working_days: Sequence[WeekDay], daily_hours: float, year: int) -> float:
    total = sum(monthly_total_hours(working_days, daily_hours, m, year) for m in range(1, 13))
    return total / 12


def weekday_display_name(day: WeekDay) -> str:
    return day.value.capitalize()


def weekday_short_name(day: WeekDay) -> str:
    return weekday_display_name(day)[:3]


def format_working_days(working_days: Optional[Sequence[WeekDay]]) -> str:
    """Compact label for a working-day set, e.g. "Mon-Fri" or "Mon, Wed"."""
    working_days = list(working_days or [])
    if not working_days:
        return "No working days"
    if len(working_days) == 7:
        return "All days"
    if len(working_days) == 5 and set(working_days) == set(DEFAULT_WORKING_DAYS):
        return "Mon-Fri"
    if len(working_days) <= 3:
        return ", ".join(weekday_short_name(d) for d in working_days)
    return f"{len(working_days)} days/week"
