from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from ..backend.connection import BackendClient, eq, gte, in_, lte
from ..backend.rest_base import row_date, row_datetime, row_float, row_int, row_list
from ..core.enums import SalaryStatus, WeekDay
from .model import MonthlyEarnings, SalaryChange, SalaryRecord
from .repository import EarningsRepository, SalaryChangeRepository, SalaryRecordRepository

SALARY_TABLE = "salary_records"
EARNINGS_TABLE = "employee_monthly_earnings"
HISTORY_TABLE = "salary_history"

PERIOD_DESC = ["year.desc", "month.desc"]


def _to_salary(r: Dict[str, Any]) -> SalaryRecord:
    return SalaryRecord(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=row_float(r.get("base_salary")),
        allowances=row_float(r.get("allowances")),
        deductions=row_float(r.get("deductions")),
        bonus=row_float(r.get("bonus")),
        working_days=row_int(r.get("working_days")),
        present_days=row_int(r.get("present_days")),
        leaves_taken=row_int(r.get("leaves_taken")),
        total_salary=row_float(r.get("total_salary")),
        status=SalaryStatus(r.get("status") or SalaryStatus.DRAFT.value),
        approved_by=r.get("approved_by"),
        payment_date=row_date(r.get("payment_date")),
        payment_method=r.get("payment_method"),
        notes=r.get("notes"),
        created_by=r.get("created_by"),
        created_at=row_datetime(r.get("created_at")),
    )


def _to_earnings(r: Dict[str, Any]) -> MonthlyEarnings:
    return MonthlyEarnings(
        user_id=str(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        total_hours_worked=row_float(r.get("total_hours_worked")),
        expected_hours=row_float(r.get("expected_hours")),
        earned_salary=row_float(r.get("earned_salary")),
    )


def _to_change(r: Dict[str, Any]) -> SalaryChange:
    old = r.get("old_salary")
    hours = r.get("daily_working_hours")
    return SalaryChange(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        new_salary=row_float(r.get("new_salary")),
        effective_from=row_date(r["effective_from"]),
        old_salary=float(old) if old is not None else None,
        working_days=tuple(WeekDay(d) for d in row_list(r.get("working_days"))),
        daily_working_hours=float(hours) if hours is not None else None,
        is_applied=bool(r.get("is_applied", False)),
        changed_by=r.get("changed_by"),
        change_reason=r.get("change_reason"),
        notes=r.get("notes"),
        created_at=row_datetime(r.get("created_at")),
    )


class RestSalaryRecordRepository(SalaryRecordRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, record_id: str) -> Optional[SalaryRecord]:
        r = self._client.select_one(SALARY_TABLE, filters=[eq("id", record_id)])
        return _to_salary(r) if r else None

    def get_for_month(self, user_id: str, month: int, year: int) -> Optional[SalaryRecord]:
        r = self._client.select_one(
            SALARY_TABLE,
            filters=[eq("user_id", user_id), eq("month", month), eq("year", year)],
        )
        return _to_salary(r) if r else None

    def list_records(
        self,
        *,
        user_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        statuses: Optional[Sequence[SalaryStatus]] = None,
        limit: Optional[int] = None,
    ) -> Sequence[SalaryRecord]:
        filters = []
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        if month is not None:
            filters.append(eq("month", month))
        if year is not None:
            filters.append(eq("year", year))
        if statuses:
            filters.append(in_("status", list(statuses)))
        rows = self._client.select(SALARY_TABLE, filters=filters, order=PERIOD_DESC, limit=limit)
        return [_to_salary(r) for r in rows]

    def create(
        self,
        *,
        user_id: str,
        month: int,
        year: int,
        base_salary: float,
        allowances: float,
        deductions: float,
        bonus: float,
        working_days: int,
        present_days: int,
        leaves_taken: int,
        total_salary: float,
        created_by: str,
        notes: Optional[str] = None,
    ) -> SalaryRecord:
        r = self._client.insert(
            SALARY_TABLE,
            {
                "user_id": user_id,
                "month": int(month),
                "year": int(year),
                "base_salary": base_salary,
                "allowances": allowances,
                "deductions": deductions,
                "bonus": bonus,
                "working_days": int(working_days),
                "present_days": int(present_days),
                "leaves_taken": int(leaves_taken),
                "total_salary": total_salary,
                "created_by": created_by,
                "notes": notes,
                "status": SalaryStatus.DRAFT.value,
            },
        )
        return _to_salary(r)

    def update_fields(self, record_id: str, fields: Mapping[str, Any]) -> Optional[SalaryRecord]:
        rows = self._client.update(SALARY_TABLE, dict(fields), filters=[eq("id", record_id)])
        return _to_salary(rows[0]) if rows else None

    def delete(self, record_id: str) -> bool:
        return len(self._client.delete(SALARY_TABLE, filters=[eq("id", record_id)])) > 0


class RestEarningsRepository(EarningsRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_for_month(self, user_id: str, month: int, year: int) -> Optional[MonthlyEarnings]:
        r = self._client.select_one(
            EARNINGS_TABLE,
            filters=[eq("user_id", user_id), eq("month", month), eq("year", year)],
        )
        return _to_earnings(r) if r else None

    def list_for_user(self, user_id: str) -> Sequence[MonthlyEarnings]:
        rows = self._client.select(EARNINGS_TABLE, filters=[eq("user_id", user_id)], order=PERIOD_DESC)
        return [_to_earnings(r) for r in rows]

    def list_for_month(self, month: int, year: int) -> Sequence[MonthlyEarnings]:
        rows = self._client.select(
            EARNINGS_TABLE,
            filters=[eq("month", month), eq("year", year)],
            order=["earned_salary.desc"],
        )
        return [_to_earnings(r) for r in rows]


class RestSalaryChangeRepository(SalaryChangeRepository):
    def __init__(self, client: BackendClient):
        self._client = client

    def get_by_id(self, change_id: str) -> Optional[SalaryChange]:
        r = self._client.select_one(HISTORY_TABLE, filters=[eq("id", change_id)])
        return _to_change(r) if r else None

    def list_changes(
        self,
        *,
        user_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[SalaryChange]:
        filters = []
        if user_id is not None:
            filters.append(eq("user_id", user_id))
        if from_date is not None:
            filters.append(gte("effective_from", from_date))
        if to_date is not None:
            filters.append(lte("effective_from", to_date))
        rows = self._client.select(
            HISTORY_TABLE,
            filters=filters,
            order=["effective_from.desc", "created_at.desc"],
        )
        return [_to_change(r) for r in rows]

    def next_scheduled(self, user_id: str, *, after: date) -> Optional[SalaryChange]:
        r = self._client.select_one(
            HISTORY_TABLE,
            filters=[eq("user_id", user_id), ("effective_from", f"gt.{after.isoformat()}")],
            order=["effective_from.asc"],
        )
        return _to_change(r) if r else None

    def schedule(
        self,
        *,
        user_id: str,
        new_base_salary: float,
        working_days: Sequence[WeekDay],
        daily_hours: float,
        changed_by: str,
        change_reason: Optional[str],
        notes: Optional[str],
        effective_from: Optional[date],
    ) -> Any:
        return self._client.rpc(
            "update_employee_salary",
            {
                "p_user_id": user_id,
                "p_new_base_salary": new_base_salary,
                "p_new_working_days": [d.value for d in working_days],
                "p_new_daily_hours": daily_hours,
                "p_changed_by": changed_by,
                "p_change_reason": change_reason,
                "p_notes": notes,
                "p_effective_from": effective_from.isoformat() if effective_from else None,
            },
        )

    def apply_pending(self) -> Any:
        return self._client.rpc("apply_pending_salary_changes")

    def update_notes(self, change_id: str, notes: Optional[str]) -> Optional[SalaryChange]:
        rows = self._client.update(HISTORY_TABLE, {"notes": notes}, filters=[eq("id", change_id)])
        return _to_change(rows[0]) if rows else None

    def delete(self, change_id: str) -> bool:
        return len(self._client.delete(HISTORY_TABLE, filters=[eq("id", change_id)])) > 0
