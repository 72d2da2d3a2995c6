"""Worked-hours arithmetic for attendance records.

All functions are pure; timestamps are aware datetimes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional

from ..common.formatting import format_break_summary
from ..common.numbers import percentage, round_half_up
from ..core.constants import DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import AttendanceStatus
from .model import AttendanceBreak, AttendanceRecord


def whole_minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from start to end, truncated toward zero."""
    return int((end - start).total_seconds() / 60)


def gross_hours(check_in: datetime, check_out: datetime) -> float:
    """Hours between check-in and check-out (no break deduction), 2 decimals."""
    return round_half_up(whole_minutes_between(check_in, check_out) / 60)


def break_minutes(breaks: Iterable[AttendanceBreak]) -> int:
    return sum(int(b.duration_minutes or 0) for b in breaks)


def break_hours(breaks: Iterable[AttendanceBreak]) -> float:
    return round_half_up(break_minutes(breaks) / 60)


def net_hours(check_in: datetime, check_out: datetime, breaks: Iterable[AttendanceBreak]) -> float:
    gross = gross_hours(check_in, check_out)
    return round_half_up(max(0.0, gross - break_hours(breaks)))


def record_net_hours(record: AttendanceRecord) -> float:
    """Net hours of a record; 0 until it is checked out."""
    if not record.check_in_time or not record.check_out_time:
        return 0.0
    return net_hours(record.check_in_time, record.check_out_time, record.breaks)


def attendance_status(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
) -> AttendanceStatus:
    if not check_in:
        return AttendanceStatus.ABSENT
    if not check_out:
        return AttendanceStatus.INCOMPLETE
    return AttendanceStatus.PRESENT


def record_status(record: Optional[AttendanceRecord]) -> AttendanceStatus:
    if record is None:
        return AttendanceStatus.ABSENT
    return attendance_status(record.check_in_time, record.check_out_time)


def is_valid_attendance(hours: Optional[float], minimum_hours: float = DEFAULT_MINIMUM_VALID_HOURS) -> bool:
    return (hours or 0) >= minimum_hours


def attendance_percentage(present_days: int, total_days: int) -> int:
    return percentage(present_days, total_days)


def breaks_summary(breaks: Iterable[AttendanceBreak]) -> str:
    return format_break_summary(b.duration_minutes for b in breaks)
