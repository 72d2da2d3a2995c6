from __future__ import annotations

import logging
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence

from ..attendance.model import AttendanceBreak, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_utc
from ..common.formatting import format_time
from ..common.validators import optional_text, require_non_empty
from ..core.constants import (
    ASSIGNED_BREAK_NOTE,
    ASSIGNED_BREAK_REASON,
    CANCELLED_BY_EMPLOYEE_NOTE,
    EXPIRED_BREAK_NOTE,
)
from ..core.enums import BreakStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .intervals import break_duration, find_conflict, validate_break_window, window_from_clock
from .model import BreakRequest, TimeWindow
from .repository import BreakRequestRepository

logger = logging.getLogger(__name__)


class BreakService:
    """Use cases around break requests and the breaks stored on attendance records."""

    def __init__(self, breaks: BreakRequestRepository, attendance: AttendanceRepository, *, tz: tzinfo):
        self._breaks = breaks
        self._attendance = attendance
        self._tz = tz

    def _get_record(self, record_id: str) -> AttendanceRecord:
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def _get_request(self, request_id: str) -> BreakRequest:
        req = self._breaks.get_by_id(request_id)
        if not req:
            raise NotFoundError("Break request not found")
        return req

    @staticmethod
    def _require_reviewer(role: Role) -> None:
        if not role.is_reviewer:
            raise AuthorizationError("Only HR can manage breaks")

    def _check_window(self, record: AttendanceRecord, window: TimeWindow, *, exclude_id: Optional[str] = None) -> None:
        if record.check_in_time is None:
            raise ValidationError("No check-in recorded for this day")
        validate_break_window(window, record.check_in_time, record.check_out_time)

        conflict = find_conflict(window, self._breaks.list_for_record(record.id), exclude_id=exclude_id)
        if conflict:
            w = conflict.approved_window
            raise ValidationError(
                f"Break overlaps an approved break ({format_time(w.start, self._tz)}-{format_time(w.end, self._tz)})"
            )

    def _append_break(self, record: AttendanceRecord, new_break: AttendanceBreak) -> None:
        if not self._attendance.set_breaks(record_id=record.id, breaks=[*record.breaks, new_break]):
            raise NotFoundError("Attendance record not found")

    def clock_window(self, record_id: str, start_hhmm: str, end_hhmm: str) -> TimeWindow:
        """Window on the record's local day from HH:MM inputs."""
        record = self._get_record(record_id)
        return window_from_clock(record.work_date, start_hhmm, end_hhmm, self._tz)

    # Queries
    def list_for_user(self, user_id: str, *, status: Optional[BreakStatus] = None) -> Sequence[BreakRequest]:
        return self._breaks.list_requests(user_id=user_id, status=status)

    def list_pending(self) -> Sequence[BreakRequest]:
        return self._breaks.list_requests(status=BreakStatus.PENDING)

    def list_for_record(self, record_id: str, *, current_user_id: str, current_role: Role) -> Sequence[BreakRequest]:
        record = self._get_record(record_id)
        if record.user_id != current_user_id and not current_role.is_reviewer:
            raise AuthorizationError("You can only view breaks on your own attendance")
        return self._breaks.list_for_record(record_id)

    # Employee actions
    def create_request(
        self,
        *,
        user_id: str,
        attendance_record_id: str,
        start: datetime,
        end: datetime,
        reason: str,
    ) -> BreakRequest:
        reason = require_non_empty(reason, "Reason")
        record = self._get_record(attendance_record_id)
        if record.user_id != user_id:
            raise AuthorizationError("You can only request breaks on your own attendance")

        window = TimeWindow(start, end)
        self._check_window(record, window)

        req = self._breaks.create(
            user_id=user_id,
            attendance_record_id=record.id,
            request_date=record.work_date,
            requested_start_time=start,
            requested_end_time=end,
            requested_by=user_id,
            reason=reason,
        )
        logger.info("Break request %s created by %s", req.id, user_id)
        return req

    def cancel_request(self, *, user_id: str, request_id: str) -> BreakRequest:
        req = self._get_request(request_id)
        if req.user_id != user_id:
            raise AuthorizationError("You can only cancel your own requests")
        if req.status != BreakStatus.PENDING:
            raise ValidationError("Only pending requests can be cancelled")

        updated = self._breaks.decide(
            request_id=req.id,
            status=BreakStatus.REJECTED,
            reviewed_by=None,
            reviewed_at=None,
            reviewer_notes=CANCELLED_BY_EMPLOYEE_NOTE,
        )
        if not updated:
            raise NotFoundError("Break request not found")
        return updated

    def delete_request(self, *, current_user_id: str, current_role: Role, request_id: str) -> None:
        req = self._get_request(request_id)
        if req.user_id != current_user_id and not current_role.is_reviewer:
            raise AuthorizationError("You can only delete your own requests")
        if req.status != BreakStatus.PENDING or not self._breaks.delete_pending(req.id):
            raise ValidationError("Only pending requests can be deleted")

    # HR actions
    def approve_request(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        approved_start: Optional[datetime] = None,
        approved_end: Optional[datetime] = None,
        reviewer_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        self._require_reviewer(current_role)
        req = self._get_request(request_id)
        if req.status != BreakStatus.PENDING:
            raise ValidationError("Request has already been processed")

        start = approved_start or req.requested_start_time
        end = approved_end or req.requested_end_time
        if start is None or end is None:
            raise ValidationError("Approved start and end times are required")

        record = self._get_record(req.attendance_record_id)
        self._check_window(record, TimeWindow(start, end), exclude_id=req.id)

        duration = break_duration(start, end)
        notes = optional_text(reviewer_notes)
        updated = self._breaks.decide(
            request_id=req.id,
            status=BreakStatus.APPROVED,
            reviewed_by=reviewer_id,
            reviewed_at=now or now_utc(),
            reviewer_notes=notes,
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=duration,
        )
        if not updated:
            raise NotFoundError("Break request not found")

        self._append_break(record, AttendanceBreak(start, end, duration, notes))
        logger.info("Break request %s approved by %s (%d min)", req.id, reviewer_id, duration)
        return updated

    def reject_request(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        reviewer_notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        self._require_reviewer(current_role)
        req = self._get_request(request_id)
        if req.status != BreakStatus.PENDING:
            raise ValidationError("Request has already been processed")

        updated = self._breaks.decide(
            request_id=req.id,
            status=BreakStatus.REJECTED,
            reviewed_by=reviewer_id,
            reviewed_at=now or now_utc(),
            reviewer_notes=optional_text(reviewer_notes),
        )
        if not updated:
            raise NotFoundError("Break request not found")
        logger.info("Break request %s rejected by %s", req.id, reviewer_id)
        return updated

    def update_approved_break(
        self,
        *,
        current_role: Role,
        reviewer_id: str,
        request_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        """Edit an approved break; the matching break on the attendance record follows."""
        self._require_reviewer(current_role)
        now = now or now_utc()
        req = self._get_request(request_id)
        if req.status != BreakStatus.APPROVED:
            raise ValidationError("Only approved breaks can be edited")

        record = self._get_record(req.attendance_record_id)
        self._check_window(record, TimeWindow(start, end), exclude_id=req.id)

        duration = break_duration(start, end)
        notes = optional_text(notes)
        updated = self._breaks.update_approved(
            request_id=req.id,
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=duration,
            notes=notes,
            reviewed_by=reviewer_id,
            reviewed_at=now,
            reviewer_notes=f"Updated by HR at {now.isoformat()}",
        )
        if not updated:
            raise NotFoundError("Break request not found")

        replacement = AttendanceBreak(start, end, duration, notes)
        new_breaks: List[AttendanceBreak] = []
        matched = False
        for b in record.breaks:
            if not matched and b.start_time == req.approved_start_time and b.end_time == req.approved_end_time:
                new_breaks.append(replacement)
                matched = True
            else:
                new_breaks.append(b)
        if not matched:
            new_breaks.append(replacement)

        if not self._attendance.set_breaks(record_id=record.id, breaks=new_breaks):
            raise NotFoundError("Attendance record not found")
        logger.info("Approved break %s edited by %s", req.id, reviewer_id)
        return updated

    def assign_break(
        self,
        *,
        current_role: Role,
        assigned_by: str,
        attendance_record_id: str,
        start: datetime,
        end: datetime,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> BreakRequest:
        """HR adds a break directly; it is stored already approved."""
        self._require_reviewer(current_role)
        record = self._get_record(attendance_record_id)
        self._check_window(record, TimeWindow(start, end))

        duration = break_duration(start, end)
        notes = optional_text(notes)
        req = self._breaks.create(
            user_id=record.user_id,
            attendance_record_id=record.id,
            request_date=record.work_date,
            requested_start_time=start,
            requested_end_time=end,
            requested_by=assigned_by,
            status=BreakStatus.APPROVED,
            reason=ASSIGNED_BREAK_REASON,
            notes=notes,
            approved_start_time=start,
            approved_end_time=end,
            duration_minutes=duration,
            reviewed_by=assigned_by,
            reviewed_at=now or now_utc(),
            reviewer_notes=ASSIGNED_BREAK_NOTE,
        )
        self._append_break(record, AttendanceBreak(start, end, duration, notes))
        logger.info("Break %s assigned by %s to %s", req.id, assigned_by, record.user_id)
        return req

    def expire_pending(self, *, now: Optional[datetime] = None) -> int:
        """Reject pending requests whose requested start has already passed."""
        now = now or now_utc()
        expired = 0
        for req in self._breaks.list_pending_started_before(now):
            if self._breaks.decide(
                request_id=req.id,
                status=BreakStatus.REJECTED,
                reviewed_by=None,
                reviewed_at=now,
                reviewer_notes=EXPIRED_BREAK_NOTE,
            ):
                expired += 1
        if expired:
            logger.info("Auto-rejected %d expired break request(s)", expired)
        return expired
