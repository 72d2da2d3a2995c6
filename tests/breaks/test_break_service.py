from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from workforce_system.attendance.model import AttendanceRecord
from workforce_system.breaks.service import BreakService
from workforce_system.core.constants import (
    ASSIGNED_BREAK_REASON,
    CANCELLED_BY_EMPLOYEE_NOTE,
    EXPIRED_BREAK_NOTE,
)
from workforce_system.core.enums import BreakStatus, Role
from workforce_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError

CHECK_IN = datetime(2025, 1, 6, 3, 30, tzinfo=timezone.utc)
CHECK_OUT = CHECK_IN + timedelta(hours=9)


def _at(minutes: int) -> datetime:
    return CHECK_IN + timedelta(minutes=minutes)


@pytest.fixture
def service(breaks, attendance, tz):
    attendance.add(
        AttendanceRecord(
            id="a1",
            user_id="u1",
            work_date=date(2025, 1, 6),
            check_in_time=CHECK_IN,
            check_out_time=CHECK_OUT,
            total_hours=9.0,
            is_valid_day=True,
        )
    )
    return BreakService(breaks, attendance, tz=tz)


def _request(service, start=60, end=90, user_id="u1"):
    return service.create_request(
        user_id=user_id,
        attendance_record_id="a1",
        start=_at(start),
        end=_at(end),
        reason="Lunch",
    )


def _approve(service, request_id, **kwargs):
    return service.approve_request(
        current_role=Role.HR,
        reviewer_id="hr",
        request_id=request_id,
        now=CHECK_IN,
        **kwargs,
    )


def test_create_request_is_pending(service):
    req = _request(service)

    assert req.status == BreakStatus.PENDING
    assert req.request_date == date(2025, 1, 6)
    assert req.requested_by == "u1"


def test_create_request_validations(service):
    with pytest.raises(ValidationError):
        service.create_request(user_id="u1", attendance_record_id="a1", start=_at(60), end=_at(90), reason=" ")
    with pytest.raises(AuthorizationError):
        _request(service, user_id="u2")
    with pytest.raises(ValidationError):
        _request(service, start=-30, end=10)
    with pytest.raises(ValidationError):
        _request(service, start=530, end=560)
    with pytest.raises(NotFoundError):
        service.create_request(user_id="u1", attendance_record_id="nope", start=_at(60), end=_at(90), reason="x")


def test_request_overlapping_approved_break_is_rejected(service):
    _approve(service, _request(service, 60, 90).id)

    with pytest.raises(ValidationError) as exc:
        _request(service, 75, 105)
    assert "10:00-10:30" in str(exc.value)

    # Touching windows are fine.
    _request(service, 90, 120)


def test_approve_records_break_on_attendance(service, attendance):
    req = _request(service)
    approved = _approve(service, req.id, reviewer_notes="ok")

    assert approved.status == BreakStatus.APPROVED
    assert approved.duration_minutes == 30
    assert approved.reviewed_by == "hr"

    record = attendance.get_by_id("a1")
    assert [(b.start_time, b.end_time, b.duration_minutes) for b in record.breaks] == [(_at(60), _at(90), 30)]


def test_approve_with_adjusted_window(service):
    req = _request(service)
    approved = _approve(service, req.id, approved_start=_at(60), approved_end=_at(75))
    assert approved.duration_minutes == 15


def test_approve_requires_reviewer_and_pending(service):
    req = _request(service)
    with pytest.raises(AuthorizationError):
        service.approve_request(current_role=Role.EMPLOYEE, reviewer_id="u1", request_id=req.id)

    _approve(service, req.id)
    with pytest.raises(ValidationError):
        _approve(service, req.id)


def test_reject_request(service):
    req = _request(service)
    rejected = service.reject_request(
        current_role=Role.HR,
        reviewer_id="hr",
        request_id=req.id,
        reviewer_notes="Busy day",
        now=CHECK_IN,
    )
    assert rejected.status == BreakStatus.REJECTED
    assert rejected.reviewer_notes == "Busy day"


def test_cancel_pending_request(service):
    req = _request(service)
    cancelled = service.cancel_request(user_id="u1", request_id=req.id)

    assert cancelled.status == BreakStatus.REJECTED
    assert cancelled.reviewer_notes == CANCELLED_BY_EMPLOYEE_NOTE
    assert cancelled.reviewed_by is None


def test_cancel_rules(service):
    req = _request(service)
    with pytest.raises(AuthorizationError):
        service.cancel_request(user_id="u2", request_id=req.id)

    _approve(service, req.id)
    with pytest.raises(ValidationError):
        service.cancel_request(user_id="u1", request_id=req.id)


def test_delete_only_pending(service, breaks):
    pending = _request(service, 60, 90)
    approved = _request(service, 120, 150)
    _approve(service, approved.id)

    with pytest.raises(AuthorizationError):
        service.delete_request(current_user_id="u2", current_role=Role.EMPLOYEE, request_id=pending.id)
    with pytest.raises(ValidationError):
        service.delete_request(current_user_id="u1", current_role=Role.EMPLOYEE, request_id=approved.id)

    service.delete_request(current_user_id="u1", current_role=Role.EMPLOYEE, request_id=pending.id)
    assert breaks.get_by_id(pending.id) is None


def test_update_approved_break_moves_record_break(service, attendance):
    first = _request(service, 60, 90)
    second = _request(service, 200, 215)
    _approve(service, first.id)
    _approve(service, second.id)
    edited_at = CHECK_OUT

    updated = service.update_approved_break(
        current_role=Role.HR,
        reviewer_id="hr",
        request_id=first.id,
        start=_at(70),
        end=_at(115),
        notes="moved",
        now=edited_at,
    )

    assert updated.duration_minutes == 45
    assert updated.reviewer_notes == f"Updated by HR at {edited_at.isoformat()}"
    record = attendance.get_by_id("a1")
    assert [(b.start_time, b.duration_minutes, b.notes) for b in record.breaks] == [
        (_at(70), 45, "moved"),
        (_at(200), 15, None),
    ]


def test_update_approved_break_cannot_overlap_another(service):
    first = _request(service, 60, 90)
    second = _request(service, 120, 150)
    _approve(service, first.id)
    _approve(service, second.id)

    with pytest.raises(ValidationError):
        service.update_approved_break(
            current_role=Role.HR,
            reviewer_id="hr",
            request_id=first.id,
            start=_at(100),
            end=_at(130),
            now=CHECK_OUT,
        )


def test_update_pending_break_is_refused(service):
    req = _request(service)
    with pytest.raises(ValidationError):
        service.update_approved_break(
            current_role=Role.HR, reviewer_id="hr", request_id=req.id, start=_at(0), end=_at(10), now=CHECK_OUT
        )


def test_assign_break(service, attendance):
    req = service.assign_break(
        current_role=Role.HR,
        assigned_by="hr",
        attendance_record_id="a1",
        start=_at(240),
        end=_at(260),
        now=CHECK_OUT,
    )

    assert req.status == BreakStatus.APPROVED
    assert req.user_id == "u1"
    assert req.reason == ASSIGNED_BREAK_REASON
    assert req.duration_minutes == 20
    assert attendance.get_by_id("a1").breaks[-1].duration_minutes == 20


def test_expire_pending(service, breaks):
    early = _request(service, 30, 45)
    late = _request(service, 300, 330)

    expired = service.expire_pending(now=_at(60))

    assert expired == 1
    assert breaks.get_by_id(early.id).status == BreakStatus.REJECTED
    assert breaks.get_by_id(early.id).reviewer_notes == EXPIRED_BREAK_NOTE
    assert breaks.get_by_id(late.id).status == BreakStatus.PENDING


def test_clock_window_uses_record_day(service, tz):
    window = service.clock_window("a1", "13:00", "13:30")
    assert window.start == datetime(2025, 1, 6, 13, 0, tzinfo=tz)
    assert window.end - window.start == timedelta(minutes=30)


def test_list_for_record_is_owner_or_hr(service):
    req = _request(service)

    own = service.list_for_record("a1", current_user_id="u1", current_role=Role.EMPLOYEE)
    assert [r.id for r in own] == [req.id]
    assert len(service.list_for_record("a1", current_user_id="hr", current_role=Role.HR)) == 1

    with pytest.raises(AuthorizationError):
        service.list_for_record("a1", current_user_id="u2", current_role=Role.EMPLOYEE)
    with pytest.raises(NotFoundError):
        service.list_for_record("nope", current_user_id="u1", current_role=Role.EMPLOYEE)
