from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..core.enums import DayMark, SalaryStatus, WeekDay


@dataclass(frozen=True)
class SalaryRecord:
    """A monthly salary record prepared by HR."""

    id: str
    user_id: str
    month: int
    year: int
    base_salary: float
    allowances: float
    deductions: float
    bonus: float
    working_days: int
    present_days: int
    leaves_taken: int
    total_salary: float
    status: SalaryStatus
    approved_by: Optional[str] = None
    payment_date: Optional[date] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class MonthlyEarnings:
    """Backend-computed earnings for one employee and month."""

    user_id: str
    month: int
    year: int
    total_hours_worked: float
    expected_hours: float
    earned_salary: float


@dataclass(frozen=True)
class SalaryChange:
    """A scheduled change to an employee's pay terms (``salary_history``)."""

    id: str
    user_id: str
    new_salary: float
    effective_from: date
    old_salary: Optional[float] = None
    working_days: Tuple[WeekDay, ...] = field(default_factory=tuple)
    daily_working_hours: Optional[float] = None
    is_applied: bool = False
    changed_by: Optional[str] = None
    change_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class SalaryStats:
    total_records: int
    total_salary: float
    paid_salary: float
    pending_salary: float
    pending_count: int
    paid_count: int


@dataclass(frozen=True)
class EarningsStats:
    total_employees: int
    total_earned: float
    total_hours_worked: float
    total_expected_hours: float
    avg_hours_worked: float
    avg_earned: float


@dataclass(frozen=True)
class SlipDay:
    day: date
    day_name: str
    mark: DayMark
    hours: Optional[float] = None


@dataclass(frozen=True)
class SalarySlip:
    employee_name: str
    employee_code: str
    phone: str
    hourly_rate: float
    aadhaar_number: Optional[str]
    month: int
    year: int
    period_start: date
    period_end: date
    total_hours: float
    expected_hours: float
    earned_salary: float
    present_days: int
    absent_days: int
    leave_days: int
    days: Tuple[SlipDay, ...]
    previous_balance: float = 0.0


@dataclass(frozen=True)
class BulkSalaryRow:
    serial_no: int
    name: str
    account_number: str
    ifsc_code: str
    amount: float
    aadhaar_number: str
    date_of_birth: Optional[date]
