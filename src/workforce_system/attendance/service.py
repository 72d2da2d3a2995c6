from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, List, Optional, Sequence

from ..common.datetime_utils import current_week_in_month, local_date, month_bounds, now_utc
from ..common.numbers import round_half_up
from ..common.validators import optional_text, require_month
from ..core.constants import DEFAULT_DAILY_HOURS, DEFAULT_HISTORY_LIMIT, DEFAULT_MINIMUM_VALID_HOURS
from ..core.enums import CheckInMethod, MarkedByRole, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..payroll.workdays import is_working_day
from ..users.model import Employee
from ..users.repository import EmployeeRepository
from ..wifi.service import WifiService
from .hours import breaks_summary, gross_hours, is_valid_attendance, record_net_hours, record_status
from .model import AttendanceRecord, MonthlySummary, RosterEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AttendanceStats:
    total_records: int
    valid_records: int
    total_hours: float
    average_hours: float
    unique_employees: int


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        wifi: Optional[WifiService] = None,
        *,
        tz: tzinfo,
        minimum_valid_hours: float = DEFAULT_MINIMUM_VALID_HOURS,
    ):
        self._attendance = attendance
        self._employees = employees
        self._wifi = wifi
        self._tz = tz
        self._minimum_valid_hours = float(minimum_valid_hours)

    def _get_employee(self, user_id: str) -> Employee:
        emp = self._employees.get_by_id(user_id)
        if not emp:
            raise NotFoundError("Employee not found")
        return emp

    def _day_fields(self, check_in: datetime, check_out: Optional[datetime]) -> tuple:
        if check_out is None:
            return None, False
        hours = gross_hours(check_in, check_out)
        return hours, is_valid_attendance(hours, self._minimum_valid_hours)

    @staticmethod
    def _validate_times(check_in: datetime, check_out: Optional[datetime], *, now: datetime) -> None:
        if check_out is None:
            return
        if check_out > now:
            raise ValidationError("Check-out time cannot be in the future")
        if check_out < check_in:
            raise ValidationError("Check-out time must be after check-in time")

    @staticmethod
    def _validate_working_day(emp: Employee, work_date: date) -> None:
        if emp.working_days and not is_working_day(work_date, emp.working_days):
            raise ValidationError("Cannot mark attendance on a non-working day")

    def today(self, *, now: Optional[datetime] = None) -> date:
        return local_date(now or now_utc(), self._tz)

    def check_in(
        self,
        user_id: str,
        *,
        ssid: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or now_utc()
        today = local_date(now, self._tz)

        emp = self._get_employee(user_id)
        if not emp.is_active:
            raise ValidationError("Your account is inactive")

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing:
            raise ValidationError("You have already checked in today")

        wifi_ssid, wifi_verified = None, False
        if emp.wifi_verification_required:
            if self._wifi is None:
                raise ValidationError("WiFi verification is not available")
            result = self._wifi.verify(emp, ssid)
            if not result.verified:
                raise ValidationError("Please connect to the office WiFi to check in")
            wifi_ssid, wifi_verified = result.ssid, True

        record = self._attendance.create(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            marked_by=user_id,
            marked_by_role=MarkedByRole.SELF,
            check_in_method=CheckInMethod.SELF,
            notes=optional_text(notes),
            wifi_ssid=wifi_ssid,
            wifi_verified=wifi_verified,
        )
        logger.info("Check-in user=%s date=%s", user_id, today)
        return record

    def check_out(self, user_id: str, *, notes: Optional[str] = None, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_utc()
        today = local_date(now, self._tz)

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            # Overnight shift: the open record belongs to the previous local day.
            previous = self._attendance.get_for_user_and_date(user_id, today - timedelta(days=1))
            if previous and previous.check_in_time and previous.check_out_time is None:
                record = previous
        if not record or not record.check_in_time:
            raise ValidationError("You have not checked in today")
        if record.check_out_time is not None:
            raise ValidationError("You have already checked out today")

        hours, valid = self._day_fields(record.check_in_time, now)
        updated = self._attendance.update_checkout(
            record_id=record.id,
            check_out_time=now,
            total_hours=hours,
            is_valid_day=valid,
            notes=optional_text(notes) or record.notes,
        )
        if not updated:
            raise NotFoundError("Attendance record not found")
        logger.info("Check-out user=%s date=%s hours=%s", user_id, record.work_date, hours)
        return updated

    def get_today_record(self, user_id: str, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, self.today(now=now))

    def get_history(self, user_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(user_id, limit=limit)

    def get_range(self, *, start: date, end: date, user_id: Optional[str] = None) -> Sequence[AttendanceRecord]:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        return self._attendance.list_for_range(start_date=start, end_date=end, user_id=user_id)

    def mark_attendance(
        self,
        *,
        current_role: Role,
        marked_by: str,
        user_id: str,
        work_date: date,
        check_in_time: datetime,
        check_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        """HR marks a day for an employee; an existing record for that day is overwritten."""
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can mark attendance")

        now = now or now_utc()
        emp = self._get_employee(user_id)
        self._validate_working_day(emp, work_date)
        self._validate_times(check_in_time, check_out_time, now=now)

        hours, valid = self._day_fields(check_in_time, check_out_time)
        notes = optional_text(notes)

        existing = self._attendance.get_for_user_and_date(user_id, work_date)
        if existing:
            record = self._attendance.admin_update_record(
                record_id=existing.id,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                total_hours=hours,
                is_valid_day=valid,
                notes=notes,
            )
            if not record:
                raise NotFoundError("Attendance record not found")
        else:
            record = self._attendance.create(
                user_id=user_id,
                work_date=work_date,
                check_in_time=check_in_time,
                check_out_time=check_out_time,
                total_hours=hours,
                is_valid_day=valid,
                marked_by=marked_by,
                marked_by_role=MarkedByRole.HR,
                check_in_method=CheckInMethod.MANUAL,
                notes=notes,
            )
        logger.info("HR %s marked attendance user=%s date=%s", marked_by, user_id, work_date)
        return record

    def update_record(
        self,
        *,
        current_role: Role,
        record_id: str,
        check_in_time: Optional[datetime] = None,
        check_out_time: Optional[datetime] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can edit attendance")

        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")

        if check_in_time is not None:
            self._validate_working_day(self._get_employee(record.user_id), record.work_date)

        new_in = check_in_time or record.check_in_time
        new_out = check_out_time or record.check_out_time
        if new_in is None:
            raise ValidationError("Check-in time is required")
        self._validate_times(new_in, new_out, now=now or now_utc())

        hours, valid = self._day_fields(new_in, new_out)
        updated = self._attendance.admin_update_record(
            record_id=record.id,
            check_in_time=new_in,
            check_out_time=new_out,
            total_hours=hours,
            is_valid_day=valid,
            notes=optional_text(notes) if notes is not None else record.notes,
        )
        if not updated:
            raise NotFoundError("Attendance record not found")
        return updated

    def delete_record(self, *, current_role: Role, record_id: str) -> None:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can delete attendance")
        if not self._attendance.delete(record_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Deleted attendance record %s", record_id)

    def monthly_summary(self, *, user_id: str, month: int, year: int) -> MonthlySummary:
        month = require_month(month)
        start, end = month_bounds(year, month)
        records = tuple(self._attendance.list_for_user(user_id, start_date=start, end_date=end))

        total_hours = sum(r.total_hours or 0 for r in records)
        return MonthlySummary(
            records=records,
            total_days=len(records),
            valid_days=sum(1 for r in records if r.is_valid_day),
            total_hours=round_half_up(total_hours),
            average_hours=round_half_up(total_hours / len(records)) if records else 0.0,
        )

    @staticmethod
    def _completed(record: AttendanceRecord, required_hours: float) -> bool:
        return record.check_out_time is not None and (record.total_hours or 0) >= required_hours

    def current_week_days(self, user_id: str, *, now: Optional[datetime] = None) -> Sequence[AttendanceRecord]:
        """Completed days this week, limited to the current month."""
        start, end = current_week_in_month(self.today(now=now))
        emp = self._get_employee(user_id)
        required = emp.daily_working_hours or DEFAULT_DAILY_HOURS

        records = self._attendance.list_for_range(start_date=start, end_date=end, user_id=user_id)
        return [r for r in records if self._completed(r, required)]

    def current_week_counts(self, *, now: Optional[datetime] = None) -> Dict[str, int]:
        """user_id -> completed days this week (current month only)."""
        start, end = current_week_in_month(self.today(now=now))
        required = {e.id: e.daily_working_hours or DEFAULT_DAILY_HOURS for e in self._employees.list_employees()}

        counts: Dict[str, int] = {}
        for r in self._attendance.list_for_range(start_date=start, end_date=end):
            if self._completed(r, required.get(r.user_id, DEFAULT_DAILY_HOURS)):
                counts[r.user_id] = counts.get(r.user_id, 0) + 1
        return counts

    def daily_roster(self, *, work_date: date) -> List[RosterEntry]:
        """Every active employee for the day; missing records show as Absent."""
        by_user = {r.user_id: r for r in self._attendance.list_for_range(start_date=work_date, end_date=work_date)}

        roster = []
        for emp in self._employees.list_employees(active_only=True, role=Role.EMPLOYEE):
            record = by_user.get(emp.id)
            roster.append(
                RosterEntry(
                    user_id=emp.id,
                    full_name=emp.full_name,
                    employee_code=emp.employee_id,
                    department=emp.department,
                    work_date=work_date,
                    status=record_status(record).value,
                    record=record,
                    net_hours=record_net_hours(record) if record else 0.0,
                    break_summary=breaks_summary(record.breaks) if record else "No breaks",
                )
            )
        return roster

    def range_stats(self, *, start: date, end: date) -> AttendanceStats:
        records = self.get_range(start=start, end=end)
        total_hours = sum(r.total_hours or 0 for r in records)
        return AttendanceStats(
            total_records=len(records),
            valid_records=sum(1 for r in records if r.is_valid_day),
            total_hours=round_half_up(total_hours),
            average_hours=round_half_up(total_hours / len(records)) if records else 0.0,
            unique_employees=len({r.user_id for r in records}),
        )
