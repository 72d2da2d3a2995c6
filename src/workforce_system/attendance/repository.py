from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import CheckInMethod, MarkedByRole
from .model import AttendanceBreak, AttendanceRecord, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest first."""

        raise NotImplementedError

    def list_for_range(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: str,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime] = None,
        total_hours: Optional[float] = None,
        is_valid_day: bool = False,
        marked_by: Optional[str] = None,
        marked_by_role: MarkedByRole = MarkedByRole.SELF,
        check_in_method: CheckInMethod = CheckInMethod.SELF,
        notes: Optional[str] = None,
        wifi_ssid: Optional[str] = None,
        wifi_verified: bool = False,
    ) -> AttendanceRecord:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        record_id: str,
        check_out_time: datetime,
        total_hours: float,
        is_valid_day: bool,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def admin_update_record(
        self,
        *,
        record_id: str,
        check_in_time: datetime,
        check_out_time: Optional[datetime],
        total_hours: Optional[float],
        is_valid_day: bool,
        notes: Optional[str] = None,
    ) -> Optional[AttendanceRecord]:
        """HR override of a whole record."""

        raise NotImplementedError

    def set_breaks(self, *, record_id: str, breaks: Sequence[AttendanceBreak]) -> bool:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
