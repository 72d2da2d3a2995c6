"""Break window arithmetic: durations, overlap and conflict checks."""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterable, Optional, Union

from ..attendance.hours import whole_minutes_between
from ..common.datetime_utils import combine_local, parse_iso_datetime
from ..common.formatting import format_break_summary
from ..common.numbers import round_half_up
from ..core.enums import BreakStatus
from ..core.exceptions import ValidationError
from .model import BreakRequest, TimeWindow

Moment = Union[datetime, str]


def break_duration(start: Moment, end: Moment) -> int:
    """Whole minutes between two timestamps, never negative."""
    minutes = whole_minutes_between(parse_iso_datetime(start), parse_iso_datetime(end))
    return max(0, minutes)


def windows_overlap(a: TimeWindow, b: TimeWindow) -> bool:
    """Half-open overlap: windows that only touch do not overlap."""
    return a.start < b.end and a.end > b.start


def _approved(requests: Iterable[BreakRequest]) -> list:
    return [r for r in requests if r.status == BreakStatus.APPROVED]


def approved_break_minutes(requests: Iterable[BreakRequest]) -> int:
    return sum(int(r.duration_minutes or 0) for r in _approved(requests))


def approved_break_hours(requests: Iterable[BreakRequest]) -> float:
    return round_half_up(approved_break_minutes(requests) / 60)


def net_hours_with_requests(total_hours: float, requests: Iterable[BreakRequest]) -> float:
    return round_half_up(max(0.0, (total_hours or 0) - approved_break_hours(requests)))


def approved_breaks_summary(requests: Iterable[BreakRequest]) -> str:
    requests = list(requests)
    if not requests:
        return "No breaks"
    return format_break_summary((r.duration_minutes for r in _approved(requests)), empty="No approved breaks")


def find_conflict(
    candidate: TimeWindow,
    requests: Iterable[BreakRequest],
    *,
    exclude_id: Optional[str] = None,
) -> Optional[BreakRequest]:
    """First approved break overlapping ``candidate``; ``exclude_id`` skips the break being edited."""
    for r in _approved(requests):
        if exclude_id is not None and r.id == exclude_id:
            continue
        window = r.approved_window
        if window is not None and windows_overlap(candidate, window):
            return r
    return None


def validate_break_window(
    window: TimeWindow,
    check_in: datetime,
    check_out: Optional[datetime] = None,
) -> None:
    if window.end <= window.start:
        raise ValidationError("Break end time must be after start time")
    if window.start < check_in:
        raise ValidationError("Break cannot start before check-in time")
    if check_out is not None and window.end > check_out:
        raise ValidationError("Break cannot end after check-out time")


def window_from_clock(work_date: date, start_hhmm: str, end_hhmm: str, tz: tzinfo) -> TimeWindow:
    """Build a window from HH:MM strings; an end at or before the start rolls into the next day."""
    start = combine_local(work_date, start_hhmm, tz)
    end = combine_local(work_date, end_hhmm, tz)
    if end <= start:
        end += timedelta(days=1)
    return TimeWindow(start, end)
