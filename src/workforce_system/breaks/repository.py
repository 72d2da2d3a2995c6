from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import BreakStatus
from .model import BreakRequest


class BreakRequestRepository(Protocol):
    def get_by_id(self, request_id: str) -> Optional[BreakRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[BreakStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[BreakRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_for_record(self, attendance_record_id: str) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def list_pending_started_before(self, moment: datetime) -> Sequence[BreakRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: str,
        attendance_record_id: str,
        request_date: date,
        requested_start_time: datetime,
        requested_end_time: datetime,
        requested_by: str,
        status: BreakStatus = BreakStatus.PENDING,
        reason: Optional[str] = None,
        notes: Optional[str] = None,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
        reviewed_by: Optional[str] = None,
        reviewed_at: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
    ) -> BreakRequest:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: str,
        status: BreakStatus,
        reviewed_by: Optional[str],
        reviewed_at: Optional[datetime],
        reviewer_notes: Optional[str] = None,
        approved_start_time: Optional[datetime] = None,
        approved_end_time: Optional[datetime] = None,
        duration_minutes: Optional[int] = None,
    ) -> Optional[BreakRequest]:
        """Move a request out of pending. Returns None when it no longer exists."""

        raise NotImplementedError

    def update_approved(
        self,
        *,
        request_id: str,
        approved_start_time: datetime,
        approved_end_time: datetime,
        duration_minutes: int,
        notes: Optional[str],
        reviewed_by: str,
        reviewed_at: datetime,
        reviewer_notes: Optional[str],
    ) -> Optional[BreakRequest]:
        raise NotImplementedError

    def delete_pending(self, request_id: str) -> bool:
        raise NotImplementedError
