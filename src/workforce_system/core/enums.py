from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for permission checks."""

    EMPLOYEE = "employee"
    HR = "hr"
    ADMIN = "admin"

    @property
    def is_reviewer(self) -> bool:
        return self in {Role.HR, Role.ADMIN}


class AttendanceStatus(str, Enum):
    """Day status derived from a record's check-in/check-out pair."""

    PRESENT = "Present"
    INCOMPLETE = "Incomplete"
    ABSENT = "Absent"


class BreakStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EARNED = "earned"
    UNPAID = "unpaid"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class SalaryStatus(str, Enum):
    """Salary record lifecycle: draft -> pending -> approved -> paid."""

    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


class WeekDay(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class DayMark(str, Enum):
    """Single-letter marks printed on salary slips and attendance sheets."""

    PRESENT = "P"
    ABSENT = "A"
    WEEKLY_OFF = "WO"


class MarkedByRole(str, Enum):
    """Who recorded an attendance row."""

    SELF = "self"
    HR = "hr"


class CheckInMethod(str, Enum):
    SELF = "self"
    MANUAL = "manual"
