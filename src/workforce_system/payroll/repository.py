from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import SalaryStatus, WeekDay
from .model import MonthlyEarnings, SalaryChange, SalaryRecord


class SalaryRecordRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def get_for_month(self, user_id: str, month: int, year: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list_records(
        self,
        *,
        user_id: Optional[str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        statuses: Optional[Sequence[SalaryStatus]] = None,
        limit: Optional[int] = None,
    ) -> Sequence[SalaryRecord]:
        """Newest period first."""

        raise NotImplementedError

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
        """New records always start as draft."""

        raise NotImplementedError

    def update_fields(self, record_id: str, fields: Mapping[str, Any]) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def delete(self, record_id: str) -> bool:
        raise NotImplementedError


class EarningsRepository(Protocol):
    def get_for_month(self, user_id: str, month: int, year: int) -> Optional[MonthlyEarnings]:
        raise NotImplementedError

    def list_for_user(self, user_id: str) -> Sequence[MonthlyEarnings]:
        raise NotImplementedError

    def list_for_month(self, month: int, year: int) -> Sequence[MonthlyEarnings]:
        """Highest earned salary first."""

        raise NotImplementedError


class SalaryChangeRepository(Protocol):
    def get_by_id(self, change_id: str) -> Optional[SalaryChange]:
        raise NotImplementedError

    def list_changes(
        self,
        *,
        user_id: Optional[str] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
    ) -> Sequence[SalaryChange]:
        raise NotImplementedError

    def next_scheduled(self, user_id: str, *, after: date) -> Optional[SalaryChange]:
        raise NotImplementedError

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
        raise NotImplementedError

    def apply_pending(self) -> Any:
        raise NotImplementedError

    def update_notes(self, change_id: str, notes: Optional[str]) -> Optional[SalaryChange]:
        raise NotImplementedError

    def delete(self, change_id: str) -> bool:
        raise NotImplementedError
