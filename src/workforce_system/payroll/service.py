from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Any, Dict, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..common.formatting import format_minutes_clock, format_time
from ..common.numbers import round_half_up
from ..common.validators import optional_text, require_month, require_non_negative
from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import Role, SalaryStatus, WeekDay
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import SalaryChange, SalaryRecord, SalaryStats
from .repository import SalaryChangeRepository, SalaryRecordRepository
from .salary import pro_rated_salary

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("base_salary", "allowances", "deductions", "bonus")
DAY_FIELDS = ("working_days", "present_days", "leaves_taken")


def _require_reviewer(role: Role, action: str) -> None:
    if not role.is_reviewer:
        raise AuthorizationError(f"Only HR can {action}")


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class PayrollReportService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()
        self._tz = tz

    def build_attendance_report(
        self,
        *,
        start: date,
        end: date,
        user_id: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("End date must be on or after start date")
        query_rows = self._attendance.get_report_rows(start_date=start, end_date=end, user_id=user_id)

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)

            out_rows.append(
                {
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "employee_id": r.employee_code,
                    "department": r.department or "-",
                    "work_date": r.work_date.strftime("%Y-%m-%d"),
                    "check_in": format_time(r.check_in_time, self._tz) if r.check_in_time else "-",
                    "check_out": format_time(r.check_out_time, self._tz) if r.check_out_time else "-",
                    "break_minutes": self._calculator.deducted_minutes(r),
                    "worked_hours": format_minutes_clock(minutes),
                    "note": r.notes or "",
                }
            )

            s = summary_map.get(r.user_id)
            if not s:
                s = {
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "employee_id": r.employee_code,
                    "days": 0,
                    "total_minutes": 0,
                }
                summary_map[r.user_id] = s
            s["days"] += 1
            s["total_minutes"] += minutes

        ordered = sorted(summary_map.values(), key=lambda x: x["total_minutes"], reverse=True)
        summary = [
            {
                "user_id": s["user_id"],
                "full_name": s["full_name"],
                "employee_id": s["employee_id"],
                "days": s["days"],
                "total_hours": format_minutes_clock(s["total_minutes"]),
            }
            for s in ordered
        ]
        return ReportData(rows=out_rows, summary=summary)


class SalaryService:
    """HR-maintained monthly salary records."""

    def __init__(self, salaries: SalaryRecordRepository):
        self._salaries = salaries

    @staticmethod
    def _validate_amounts(values: Mapping[str, Any]) -> None:
        for name in AMOUNT_FIELDS + DAY_FIELDS:
            if name in values:
                require_non_negative(values[name], name.replace("_", " ").capitalize())
        if values["present_days"] > values["working_days"]:
            raise ValidationError("Present days cannot exceed working days")

    @staticmethod
    def _total(values: Mapping[str, Any]) -> float:
        return round_half_up(
            pro_rated_salary(
                values["base_salary"],
                values["working_days"],
                values["present_days"],
                allowances=values["allowances"],
                bonus=values["bonus"],
                deductions=values["deductions"],
            )
        )

    def _get(self, record_id: str) -> SalaryRecord:
        record = self._salaries.get_by_id(record_id)
        if not record:
            raise NotFoundError("Salary record not found")
        return record

    def create_record(
        self,
        *,
        current_role: Role,
        created_by: str,
        user_id: str,
        month: int,
        year: int,
        base_salary: float,
        working_days: int,
        present_days: int,
        allowances: float = 0,
        deductions: float = 0,
        bonus: float = 0,
        leaves_taken: int = 0,
        notes: Optional[str] = None,
    ) -> SalaryRecord:
        _require_reviewer(current_role, "create salary records")
        month = require_month(month)

        values = {
            "base_salary": float(base_salary),
            "allowances": float(allowances or 0),
            "deductions": float(deductions or 0),
            "bonus": float(bonus or 0),
            "working_days": int(working_days),
            "present_days": int(present_days),
            "leaves_taken": int(leaves_taken or 0),
        }
        self._validate_amounts(values)
        if self._salaries.get_for_month(user_id, month, year):
            raise ValidationError("A salary record already exists for this month")

        record = self._salaries.create(
            user_id=user_id,
            month=month,
            year=int(year),
            total_salary=self._total(values),
            created_by=created_by,
            notes=optional_text(notes),
            **values,
        )
        logger.info("Salary record %s created for user=%s %02d/%d", record.id, user_id, month, year)
        return record

    def update_record(self, *, current_role: Role, record_id: str, updates: Mapping[str, Any]) -> SalaryRecord:
        _require_reviewer(current_role, "edit salary records")
        record = self._get(record_id)
        if record.status == SalaryStatus.PAID:
            raise ValidationError("Paid salary records cannot be changed")

        fields: Dict[str, Any] = {}
        try:
            for name in AMOUNT_FIELDS:
                if updates.get(name) is not None:
                    fields[name] = float(updates[name])
            for name in DAY_FIELDS:
                if updates.get(name) is not None:
                    fields[name] = int(updates[name])
        except (TypeError, ValueError):
            raise ValidationError("Salary amounts and day counts must be numbers")
        if "notes" in updates:
            fields["notes"] = optional_text(updates["notes"])
        if not fields:
            raise ValidationError("Nothing to update")

        merged = {name: getattr(record, name) for name in AMOUNT_FIELDS + DAY_FIELDS}
        merged.update({k: v for k, v in fields.items() if k != "notes"})
        self._validate_amounts(merged)
        fields["total_salary"] = self._total(merged)

        updated = self._salaries.update_fields(record.id, fields)
        if not updated:
            raise NotFoundError("Salary record not found")
        return updated

    def change_status(
        self,
        *,
        current_role: Role,
        record_id: str,
        status: SalaryStatus,
        approved_by: str,
        payment_method: Optional[str] = None,
        today: Optional[date] = None,
    ) -> SalaryRecord:
        _require_reviewer(current_role, "change salary status")
        status = SalaryStatus(status)
        record = self._get(record_id)
        if record.status == SalaryStatus.PAID:
            raise ValidationError("Salary has already been paid")

        fields: Dict[str, Any] = {"status": status.value}
        if status in {SalaryStatus.APPROVED, SalaryStatus.PAID}:
            fields["approved_by"] = approved_by
        if status == SalaryStatus.PAID:
            fields["payment_date"] = (today or now_utc().date()).isoformat()
            if payment_method:
                fields["payment_method"] = payment_method.strip()

        updated = self._salaries.update_fields(record.id, fields)
        if not updated:
            raise NotFoundError("Salary record not found")
        logger.info("Salary record %s -> %s by %s", record.id, status.value, approved_by)
        return updated

    def delete_record(self, *, current_role: Role, record_id: str) -> None:
        _require_reviewer(current_role, "delete salary records")
        if not self._salaries.delete(record_id):
            raise NotFoundError("Salary record not found")
        logger.info("Deleted salary record %s", record_id)

    def list_for_user(self, user_id: str, *, include_drafts: bool = False) -> Sequence[SalaryRecord]:
        """Employees only see approved or paid slips."""
        statuses = None if include_drafts else [SalaryStatus.APPROVED, SalaryStatus.PAID]
        return self._salaries.list_records(user_id=user_id, statuses=statuses)

    def latest_for_user(self, user_id: str) -> Optional[SalaryRecord]:
        records = self._salaries.list_records(
            user_id=user_id,
            statuses=[SalaryStatus.APPROVED, SalaryStatus.PAID],
            limit=1,
        )
        return records[0] if records else None

    def list_records(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[SalaryStatus] = None,
        user_id: Optional[str] = None,
    ) -> Sequence[SalaryRecord]:
        return self._salaries.list_records(
            user_id=user_id,
            month=month,
            year=year,
            statuses=[status] if status else None,
        )

    def list_pending(self) -> Sequence[SalaryRecord]:
        return self._salaries.list_records(statuses=[SalaryStatus.DRAFT, SalaryStatus.PENDING])

    def stats(self, *, month: int, year: int) -> SalaryStats:
        records = self._salaries.list_records(month=require_month(month), year=year)
        total = sum(r.total_salary for r in records)
        paid = [r for r in records if r.status == SalaryStatus.PAID]
        paid_total = sum(r.total_salary for r in paid)
        return SalaryStats(
            total_records=len(records),
            total_salary=round_half_up(total),
            paid_salary=round_half_up(paid_total),
            pending_salary=round_half_up(total - paid_total),
            pending_count=len(records) - len(paid),
            paid_count=len(paid),
        )


class SalaryChangeService:
    """Scheduled pay-term changes; the backend applies them on their effective date."""

    def __init__(self, changes: SalaryChangeRepository):
        self._changes = changes

    def schedule_change(
        self,
        *,
        current_role: Role,
        changed_by: str,
        user_id: str,
        new_base_salary: float,
        working_days: Sequence[WeekDay],
        daily_hours: float = DEFAULT_DAILY_HOURS,
        change_reason: Optional[str] = None,
        notes: Optional[str] = None,
        effective_from: Optional[date] = None,
    ) -> Any:
        """Without ``effective_from`` the backend uses the first day of next month."""
        _require_reviewer(current_role, "change salaries")
        require_non_negative(new_base_salary, "Base salary")
        days = [WeekDay(d) for d in working_days]
        if not days:
            raise ValidationError("Select at least one working day")
        if not 0 < float(daily_hours) <= 24:
            raise ValidationError("Daily hours must be between 0 and 24")

        result = self._changes.schedule(
            user_id=user_id,
            new_base_salary=float(new_base_salary),
            working_days=days,
            daily_hours=float(daily_hours),
            changed_by=changed_by,
            change_reason=optional_text(change_reason),
            notes=optional_text(notes),
            effective_from=effective_from,
        )
        logger.info("Salary change scheduled for user=%s by %s (effective %s)", user_id, changed_by, effective_from)
        return result

    def apply_pending(self) -> Any:
        result = self._changes.apply_pending()
        logger.info("Applied pending salary changes: %s", result)
        return result

    def history(self, user_id: str) -> Sequence[SalaryChange]:
        return self._changes.list_changes(user_id=user_id)

    def list_changes(
        self,
        *,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[SalaryChange]:
        return self._changes.list_changes(from_date=from_date, to_date=to_date)

    def upcoming(self, user_id: str, *, today: date) -> Optional[SalaryChange]:
        return self._changes.next_scheduled(user_id, after=today)

    def update_notes(self, *, current_role: Role, change_id: str, notes: Optional[str]) -> SalaryChange:
        _require_reviewer(current_role, "edit salary changes")
        updated = self._changes.update_notes(change_id, optional_text(notes))
        if not updated:
            raise NotFoundError("Salary change not found")
        return updated

    def delete_change(self, *, current_role: Role, change_id: str) -> None:
        """Only changes that have not been applied yet can be removed."""
        _require_reviewer(current_role, "delete salary changes")
        change = self._changes.get_by_id(change_id)
        if not change:
            raise NotFoundError("Salary change not found")
        if change.is_applied:
            raise ValidationError("Applied salary changes cannot be deleted")
        if not self._changes.delete(change.id):
            raise NotFoundError("Salary change not found")
