from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import BreakStatus


@dataclass(frozen=True)
class TimeWindow:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class BreakRequest:
    """A requested (or HR-assigned) break for one attendance record."""

    id: str
    user_id: str
    attendance_record_id: str
    request_date: date
    requested_start_time: Optional[datetime]
    requested_end_time: Optional[datetime]
    status: BreakStatus
    approved_start_time: Optional[datetime] = None
    approved_end_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
    reason: Optional[str] = None
    notes: Optional[str] = None
    requested_by: Optional[str] = None
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    reviewer_notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def approved_window(self) -> Optional[TimeWindow]:
        if self.approved_start_time is None or self.approved_end_time is None:
            return None
        return TimeWindow(self.approved_start_time, self.approved_end_time)
