from __future__ import annotations

from abc import ABC, abstractmethod

from ...attendance.hours import break_minutes
from ...attendance.model import AttendanceReportRow


class PayrollCalculator(ABC):
    """Rule turning one attendance row into payable minutes."""

    def deducted_minutes(self, row: AttendanceReportRow) -> int:
        return break_minutes(row.breaks)

    @abstractmethod
    def worked_minutes(self, row: AttendanceReportRow) -> int:
        raise NotImplementedError
