from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: str) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_id: Optional[str] = None,
        statuses: Optional[Sequence[LeaveStatus]] = None,
        start_from: Optional[date] = None,
        end_until: Optional[date] = None,
        end_from: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Filters: ``start_date >= start_from``, ``end_date <= end_until``, ``end_date >= end_from``."""

        raise NotImplementedError

    def create(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
    ) -> LeaveRequest:
        raise NotImplementedError

    def update_pending(
        self,
        *,
        request_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
    ) -> Optional[LeaveRequest]:
        """Only touches the row while it is still pending."""

        raise NotImplementedError

    def set_status(
        self,
        *,
        request_id: str,
        status: LeaveStatus,
        reviewed_by: Optional[str] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def delete(self, request_id: str) -> bool:
        raise NotImplementedError
