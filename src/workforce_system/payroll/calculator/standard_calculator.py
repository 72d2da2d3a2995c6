from __future__ import annotations

from ...attendance.hours import whole_minutes_between
from ...attendance.model import AttendanceReportRow
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """(out - in) minus recorded breaks, not below 0. Open days count as 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        if not row.check_in_time or not row.check_out_time:
            return 0
        minutes = whole_minutes_between(row.check_in_time, row.check_out_time)
        return max(minutes - self.deducted_minutes(row), 0)
