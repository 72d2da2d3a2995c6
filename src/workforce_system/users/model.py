from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from ..core.constants import DEFAULT_DAILY_HOURS
from ..core.enums import Role, WeekDay


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee profile as stored in the ``users`` table.

    Plain data object; backend access lives in the repositories.
    """

    id: str
    employee_id: str
    full_name: str
    email: str
    role: Role
    department: Optional[str] = None
    designation: Optional[str] = None
    phone: Optional[str] = None
    organization_id: Optional[str] = None
    working_days: Tuple[WeekDay, ...] = field(default_factory=tuple)
    daily_working_hours: float = DEFAULT_DAILY_HOURS
    base_salary: float = 0.0
    hourly_rate: float = 0.0
    monthly_total_hours: float = 0.0
    is_active: bool = True
    wifi_verification_required: bool = False
    account_number: Optional[str] = None
    ifsc_code: Optional[str] = None
    aadhaar_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    date_of_joining: Optional[date] = None

    @property
    def has_bank_details(self) -> bool:
        return bool(self.account_number and self.ifsc_code and self.aadhaar_number)
