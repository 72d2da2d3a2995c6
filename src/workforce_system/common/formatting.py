"""Display formatting for hours, money and break summaries."""

from __future__ import annotations

import math
from datetime import datetime, tzinfo
from typing import Iterable, Optional

from .numbers import round_int


def format_hours(hours: Optional[float]) -> str:
    """Format fractional hours, e.g. 8.5 -> "8h 30m", 0.75 -> "45m", 8 -> "8h"."""
    if not hours:
        return "0m"
    h = math.floor(hours)
    m = round_int((hours - h) * 60)
    if m == 60:
        h, m = h + 1, 0

    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"


def format_minutes_clock(minutes: int) -> str:
    """Worked minutes as HH:MM (report columns)."""
    minutes = int(minutes)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _group_indian(digits: str) -> str:
    # Last three digits, then groups of two: 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_currency(amount: Optional[float], symbol: str = "₹") -> str:
    """INR with Indian digit grouping and no decimals: 123456 -> "₹1,23,456"."""
    value = round_int(amount or 0)
    sign = "-" if value < 0 else ""
    return f"{sign}{symbol}{_group_indian(str(abs(value)))}"


def format_duration_minutes(total_minutes: int) -> str:
    hours, minutes = divmod(int(total_minutes), 60)
    if hours > 0:
        return f"{hours}h {minutes}m" if minutes > 0 else f"{hours}h"
    return f"{minutes}m"


def format_break_summary(durations: Iterable[Optional[int]], *, empty: str = "No breaks") -> str:
    """e.g. "2 breaks (1h 15m)" for a list of break durations in minutes."""
    durations = list(durations)
    if not durations:
        return empty

    count = len(durations)
    total_minutes = sum(d or 0 for d in durations)
    summary = f"{count} break{'s' if count > 1 else ''}"
    if total_minutes > 0:
        summary += f" ({format_duration_minutes(total_minutes)})"
    return summary


def format_time(moment: datetime, tz: Optional[tzinfo] = None) -> str:
    if tz is not None:
        moment = moment.astimezone(tz)
    return moment.strftime("%H:%M")
