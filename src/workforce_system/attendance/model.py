from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import CheckInMethod, MarkedByRole


@dataclass(frozen=True)
class AttendanceBreak:
    """An approved break window, stored as JSON on the attendance row."""

    start_time: datetime
    end_time: datetime
    duration_minutes: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one day."""

    id: str
    user_id: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime] = None
    total_hours: Optional[float] = None
    is_valid_day: bool = False
    breaks: Tuple[AttendanceBreak, ...] = field(default_factory=tuple)
    marked_by: Optional[str] = None
    marked_by_role: MarkedByRole = MarkedByRole.SELF
    check_in_method: CheckInMethod = CheckInMethod.SELF
    notes: Optional[str] = None
    wifi_ssid: Optional[str] = None
    wifi_verified: bool = False


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports/exports: a record joined with its employee."""

    user_id: str
    full_name: str
    employee_code: str
    department: Optional[str]
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    breaks: Tuple[AttendanceBreak, ...] = ()
    notes: Optional[str] = None


@dataclass(frozen=True)
class MonthlySummary:
    records: Tuple[AttendanceRecord, ...]
    total_days: int
    valid_days: int
    total_hours: float
    average_hours: float


@dataclass(frozen=True)
class RosterEntry:
    """One line of the HR daily roster; ``record`` is None for placeholders."""

    user_id: str
    full_name: str
    employee_code: str
    department: Optional[str]
    work_date: date
    status: str
    record: Optional[AttendanceRecord] = None
    net_hours: float = 0.0
    break_summary: str = "No breaks"
