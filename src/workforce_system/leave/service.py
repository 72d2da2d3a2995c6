from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..common.datetime_utils import now_utc, total_days_inclusive
from ..common.validators import optional_text, require_non_empty
from ..core.constants import LEAVE_QUOTA
from ..core.enums import LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import LeaveBalance, LeaveRequest, LeaveStats
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository):
        self._leaves = leaves

    @staticmethod
    def _validate(leave_type, start_date: date, end_date: date, reason: str) -> tuple:
        try:
            leave_type = LeaveType(leave_type)
        except ValueError:
            raise ValidationError("Invalid leave type")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        reason = require_non_empty(reason, "Reason")
        return leave_type, reason, total_days_inclusive(start_date, end_date)

    def _get_own(self, user_id: str, request_id: str) -> LeaveRequest:
        req = self._leaves.get_by_id(request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        if req.user_id != user_id:
            raise AuthorizationError("You can only change your own leave requests")
        return req

    def create_leave(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        leave_type, reason, days = self._validate(leave_type, start_date, end_date, reason)
        req = self._leaves.create(
            user_id=user_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=days,
            reason=reason,
        )
        logger.info("Leave request %s created by %s (%s, %d day(s))", req.id, user_id, leave_type.value, days)
        return req

    def update_leave(
        self,
        *,
        user_id: str,
        request_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        req = self._get_own(user_id, request_id)
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending requests can be edited")

        leave_type, reason, days = self._validate(leave_type, start_date, end_date, reason)
        updated = self._leaves.update_pending(
            request_id=req.id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=days,
            reason=reason,
        )
        if not updated:
            raise ValidationError("Only pending requests can be edited")
        return updated

    def cancel_leave(self, *, user_id: str, request_id: str) -> LeaveRequest:
        req = self._get_own(user_id, request_id)
        if req.status not in {LeaveStatus.PENDING, LeaveStatus.APPROVED}:
            raise ValidationError("This request can no longer be cancelled")

        updated = self._leaves.set_status(request_id=req.id, status=LeaveStatus.CANCELLED)
        if not updated:
            raise NotFoundError("Leave request not found")
        return updated

    def review_leave(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        status: LeaveStatus,
        reviewer_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        if not current_role.is_reviewer:
            raise AuthorizationError("Only HR can review leave requests")
        if status not in {LeaveStatus.APPROVED, LeaveStatus.REJECTED}:
            raise ValidationError("A review must approve or reject")

        req = self._leaves.get_by_id(request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Request has already been processed")

        updated = self._leaves.set_status(
            request_id=req.id,
            status=status,
            reviewed_by=reviewer_id,
            reviewed_at=now or now_utc(),
            reviewer_notes=optional_text(reviewer_notes),
        )
        if not updated:
            raise NotFoundError("Leave request not found")
        logger.info("Leave request %s %s by %s", req.id, status.value, reviewer_id)
        return updated

    def delete_leave(self, *, current_user_id: str, current_role: Role, request_id: str) -> None:
        req = self._leaves.get_by_id(request_id)
        if not req:
            raise NotFoundError("Leave request not found")
        if req.user_id != current_user_id and not current_role.is_reviewer:
            raise AuthorizationError("You can only delete your own leave requests")
        if not self._leaves.delete(req.id):
            raise NotFoundError("Leave request not found")

    def list_for_user(self, user_id: str) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(user_id=user_id)

    def list_pending(self) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(statuses=[LeaveStatus.PENDING])

    def list_all(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        user_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        return self._leaves.list_requests(
            user_id=user_id,
            statuses=[status] if status else None,
            start_from=start_date,
            end_until=end_date,
        )

    def upcoming(self, user_id: str, *, today: date) -> Sequence[LeaveRequest]:
        """Pending or approved leave that has not ended yet, soonest first."""
        return self._leaves.list_requests(
            user_id=user_id,
            statuses=[LeaveStatus.PENDING, LeaveStatus.APPROVED],
            end_from=today,
        )

    def balance(self, user_id: str, *, year: int) -> Dict[LeaveType, LeaveBalance]:
        approved = self._leaves.list_requests(
            user_id=user_id,
            statuses=[LeaveStatus.APPROVED],
            start_from=date(year, 1, 1),
            end_until=date(year, 12, 31),
        )
        used = {t: 0 for t in LEAVE_QUOTA}
        for req in approved:
            if req.leave_type in used:
                used[req.leave_type] += req.total_days
        return {t: LeaveBalance(leave_type=t, used=used[t], total=total) for t, total in LEAVE_QUOTA.items()}

    def stats(self, *, start_date: date, end_date: date) -> LeaveStats:
        requests = self._leaves.list_requests(start_from=start_date, end_until=end_date)
        return LeaveStats(
            total=len(requests),
            pending=sum(1 for r in requests if r.status == LeaveStatus.PENDING),
            approved=sum(1 for r in requests if r.status == LeaveStatus.APPROVED),
            rejected=sum(1 for r in requests if r.status == LeaveStatus.REJECTED),
            total_days=sum(r.total_days for r in requests if r.status == LeaveStatus.APPROVED),
        )
