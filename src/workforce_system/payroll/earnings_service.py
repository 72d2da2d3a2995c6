"""Read-side payroll: backend-computed earnings, salary slips and the bank sheet.

``employee_monthly_earnings`` is maintained by the backend from attendance;
this module only reads it and derives display data.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Optional, Sequence, Tuple

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, previous_month
from ..common.numbers import round_half_up
from ..common.validators import require_month
from ..core.enums import DayMark, Role
from ..core.exceptions import NotFoundError
from ..users.repository import EmployeeRepository
from .model import BulkSalaryRow, EarningsStats, MonthlyEarnings, SalarySlip, SlipDay
from .repository import EarningsRepository
from .workdays import is_working_day, working_days_in_month

logger = logging.getLogger(__name__)


class EarningsService:
    def __init__(self, earnings: EarningsRepository):
        self._earnings = earnings

    def for_month(self, user_id: str, *, month: int, year: int) -> Optional[MonthlyEarnings]:
        return self._earnings.get_for_month(user_id, require_month(month), year)

    def history(self, user_id: str) -> Sequence[MonthlyEarnings]:
        return self._earnings.list_for_user(user_id)

    def all_for_month(self, *, month: int, year: int) -> Sequence[MonthlyEarnings]:
        return self._earnings.list_for_month(require_month(month), year)

    def month_stats(self, *, month: int, year: int) -> EarningsStats:
        rows = self._earnings.list_for_month(require_month(month), year)
        count = len(rows)
        total_earned = sum(e.earned_salary for e in rows)
        total_worked = sum(e.total_hours_worked for e in rows)
        return EarningsStats(
            total_employees=count,
            total_earned=round_half_up(total_earned),
            total_hours_worked=round_half_up(total_worked),
            total_expected_hours=round_half_up(sum(e.expected_hours for e in rows)),
            avg_hours_worked=round_half_up(total_worked / count) if count else 0.0,
            avg_earned=round_half_up(total_earned / count) if count else 0.0,
        )

    def available_slip_months(self, user_id: str, *, today: date) -> List[Tuple[int, int]]:
        """(month, year) pairs with earnings, newest first; the running month is excluded."""
        current = (today.year, today.month)
        return [
            (e.month, e.year)
            for e in self._earnings.list_for_user(user_id)
            if (e.year, e.month) < current
        ]


class SalarySlipService:
    def __init__(
        self,
        employees: EmployeeRepository,
        earnings: EarningsRepository,
        attendance: AttendanceRepository,
    ):
        self._employees = employees
        self._earnings = earnings
        self._attendance = attendance

    def build_slip(self, user_id: str, *, month: int, year: int) -> SalarySlip:
        month = require_month(month)
        emp = self._employees.get_by_id(user_id)
        if not emp:
            raise NotFoundError("Employee not found")

        earnings = self._earnings.get_for_month(user_id, month, year)
        if not earnings:
            raise NotFoundError(
                "No salary data found for this month. "
                "Please ensure the month has ended and salary has been calculated."
            )

        start, end = month_bounds(year, month)
        records = self._attendance.list_for_user(user_id, start_date=start, end_date=end)
        by_date = {r.work_date: r for r in records}

        days = []
        day = start
        while day <= end:
            record = by_date.get(day)
            if record:
                days.append(SlipDay(day=day, day_name=day.strftime("%a"), mark=DayMark.PRESENT, hours=record.total_hours or 0.0))
            elif is_working_day(day, emp.working_days):
                days.append(SlipDay(day=day, day_name=day.strftime("%a"), mark=DayMark.ABSENT))
            else:
                days.append(SlipDay(day=day, day_name=day.strftime("%a"), mark=DayMark.WEEKLY_OFF))
            day += timedelta(days=1)

        present = len(by_date)
        working = working_days_in_month(emp.working_days, month, year)
        prev_month, prev_year = previous_month(month, year)
        previous = self._earnings.get_for_month(user_id, prev_month, prev_year)

        return SalarySlip(
            employee_name=emp.full_name,
            employee_code=emp.employee_id,
            phone=emp.phone or "N/A",
            hourly_rate=emp.hourly_rate,
            aadhaar_number=emp.aadhaar_number,
            month=month,
            year=year,
            period_start=start,
            period_end=end,
            total_hours=earnings.total_hours_worked,
            expected_hours=earnings.expected_hours,
            earned_salary=earnings.earned_salary,
            present_days=present,
            absent_days=max(0, working - present),
            leave_days=0,
            days=tuple(days),
            previous_balance=previous.earned_salary if previous else 0.0,
        )


class BulkSalarySheetService:
    """Monthly bank-transfer sheet for active employees with complete bank details."""

    def __init__(self, employees: EmployeeRepository, earnings: EarningsRepository):
        self._employees = employees
        self._earnings = earnings

    def build_sheet(self, *, month: int, year: int) -> List[BulkSalaryRow]:
        month = require_month(month)
        earned = {e.user_id: e.earned_salary for e in self._earnings.list_for_month(month, year)}
        eligible = sorted(
            (
                e
                for e in self._employees.list_employees(active_only=True, role=Role.EMPLOYEE)
                if e.id in earned and e.has_bank_details
            ),
            key=lambda e: e.full_name.lower(),
        )

        rows = [
            BulkSalaryRow(
                serial_no=i,
                name=e.full_name,
                account_number=e.account_number,
                ifsc_code=e.ifsc_code,
                amount=round_half_up(earned[e.id]),
                aadhaar_number=e.aadhaar_number,
                date_of_birth=e.date_of_birth,
            )
            for i, e in enumerate(eligible, start=1)
        ]
        logger.info("Bulk salary sheet %02d/%d: %d employee(s)", month, year, len(rows))
        return rows

    @staticmethod
    def total_amount(rows: Sequence[BulkSalaryRow]) -> float:
        return round_half_up(sum(r.amount for r in rows))
