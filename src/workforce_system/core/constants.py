"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import LeaveType, WeekDay

DEFAULT_DAILY_HOURS = 8
DEFAULT_MINIMUM_VALID_HOURS = 6
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_TIMEZONE = "Asia/Kolkata"

ALL_WEEKDAYS = (
    WeekDay.MONDAY,
    WeekDay.TUESDAY,
    WeekDay.WEDNESDAY,
    WeekDay.THURSDAY,
    WeekDay.FRIDAY,
    WeekDay.SATURDAY,
    WeekDay.SUNDAY,
)
DEFAULT_WORKING_DAYS = ALL_WEEKDAYS[:5]

# Yearly leave quota per type (standard policy).
LEAVE_QUOTA = {
    LeaveType.CASUAL: 12,
    LeaveType.SICK: 12,
    LeaveType.EARNED: 15,
}

CANCELLED_BY_EMPLOYEE_NOTE = "Cancelled by employee"
EXPIRED_BREAK_NOTE = "Automatically rejected: Break request expired (not approved before start time)"
ASSIGNED_BREAK_REASON = "Assigned by HR"
ASSIGNED_BREAK_NOTE = "Break assigned directly by HR"

# Backend error code for "no rows returned" on single-row reads.
NO_ROWS_CODE = "PGRST116"
