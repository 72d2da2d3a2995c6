from __future__ import annotations

import dataclasses
from datetime import date, datetime, timedelta, timezone

import pytest

from workforce_system.attendance.model import AttendanceBreak, AttendanceRecord
from workforce_system.attendance.service import AttendanceService
from workforce_system.core.enums import CheckInMethod, MarkedByRole, Role
from workforce_system.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from workforce_system.wifi.service import WifiService

# Monday 6 Jan 2025, 09:00 in Asia/Kolkata.
NOW = datetime(2025, 1, 6, 3, 30, tzinfo=timezone.utc)
MONDAY = date(2025, 1, 6)


@pytest.fixture
def service(attendance, employees, networks, tz):
    return AttendanceService(attendance, employees, WifiService(networks), tz=tz, minimum_valid_hours=6)


def _record(record_id, user_id, work_date, hours=None, check_out=True):
    check_in = datetime.combine(work_date, datetime.min.time(), tzinfo=timezone.utc) + timedelta(hours=4)
    return AttendanceRecord(
        id=record_id,
        user_id=user_id,
        work_date=work_date,
        check_in_time=check_in,
        check_out_time=check_in + timedelta(hours=hours or 0) if check_out else None,
        total_hours=hours,
        is_valid_day=(hours or 0) >= 6,
    )


def test_check_in_uses_local_work_date(service, attendance):
    # 00:30 local on Monday is still Sunday in UTC.
    record = service.check_in("u1", now=datetime(2025, 1, 5, 19, 0, tzinfo=timezone.utc))

    assert record.work_date == MONDAY
    assert record.marked_by == "u1"
    assert attendance.get_for_user_and_date("u1", MONDAY) is record


def test_check_in_twice_same_day_fails(service):
    service.check_in("u1", now=NOW)
    with pytest.raises(ValidationError):
        service.check_in("u1", now=NOW + timedelta(hours=1))


def test_inactive_employee_cannot_check_in(service, employees, new_employee):
    employees.add(new_employee("u3", is_active=False))
    with pytest.raises(ValidationError):
        service.check_in("u3", now=NOW)


def test_unknown_employee_cannot_check_in(service):
    with pytest.raises(NotFoundError):
        service.check_in("ghost", now=NOW)


def test_wifi_required_check_in(service, employees, new_employee):
    employees.add(new_employee("u3", wifi_verification_required=True))

    record = service.check_in("u3", ssid='"Office-5G"', now=NOW)
    assert record.wifi_verified is True
    assert record.wifi_ssid == "Office-5G"


@pytest.mark.parametrize("ssid", [None, "Cafe", "Old-Office"])
def test_wifi_required_check_in_rejects_other_networks(service, employees, new_employee, ssid):
    employees.add(new_employee("u3", wifi_verification_required=True))
    with pytest.raises(ValidationError):
        service.check_in("u3", ssid=ssid, now=NOW)


def test_check_out_computes_hours_and_validity(service):
    service.check_in("u1", now=NOW)
    record = service.check_out("u1", now=NOW + timedelta(hours=7, minutes=30))

    assert record.total_hours == 7.5
    assert record.is_valid_day is True


def test_short_day_is_not_valid(service):
    service.check_in("u1", now=NOW)
    record = service.check_out("u1", now=NOW + timedelta(hours=3))

    assert record.total_hours == 3.0
    assert record.is_valid_day is False


def test_check_out_requires_check_in_and_happens_once(service):
    with pytest.raises(ValidationError):
        service.check_out("u1", now=NOW)

    service.check_in("u1", now=NOW)
    service.check_out("u1", now=NOW + timedelta(hours=8))
    with pytest.raises(ValidationError):
        service.check_out("u1", now=NOW + timedelta(hours=9))


def test_check_out_after_midnight_closes_previous_day(service):
    # 22:00 local Monday to 01:00 local Tuesday.
    service.check_in("u1", now=datetime(2025, 1, 6, 16, 30, tzinfo=timezone.utc))
    record = service.check_out("u1", now=datetime(2025, 1, 6, 19, 30, tzinfo=timezone.utc))

    assert record.work_date == MONDAY
    assert record.total_hours == 3.0


def test_check_out_ignores_closed_previous_day(service):
    service.check_in("u1", now=NOW)
    service.check_out("u1", now=NOW + timedelta(hours=8))
    with pytest.raises(ValidationError):
        service.check_out("u1", now=NOW + timedelta(days=1))


def test_mark_attendance_requires_reviewer(service):
    with pytest.raises(AuthorizationError):
        service.mark_attendance(
            current_role=Role.EMPLOYEE,
            marked_by="u2",
            user_id="u1",
            work_date=MONDAY,
            check_in_time=NOW,
            now=NOW,
        )


def test_mark_attendance_rejects_non_working_day(service):
    sunday = date(2025, 1, 5)
    with pytest.raises(ValidationError):
        service.mark_attendance(
            current_role=Role.HR,
            marked_by="hr",
            user_id="u1",
            work_date=sunday,
            check_in_time=NOW - timedelta(days=1),
            now=NOW,
        )


def test_mark_attendance_rejects_future_or_inverted_times(service):
    kwargs = dict(current_role=Role.HR, marked_by="hr", user_id="u1", work_date=MONDAY, now=NOW)
    with pytest.raises(ValidationError):
        service.mark_attendance(check_in_time=NOW, check_out_time=NOW + timedelta(hours=1), **kwargs)
    with pytest.raises(ValidationError):
        service.mark_attendance(check_in_time=NOW, check_out_time=NOW - timedelta(hours=1), **kwargs)


def test_mark_attendance_overwrites_existing_day(service, attendance):
    first = service.check_in("u1", now=NOW)
    later = NOW + timedelta(hours=10)

    record = service.mark_attendance(
        current_role=Role.HR,
        marked_by="hr",
        user_id="u1",
        work_date=MONDAY,
        check_in_time=NOW - timedelta(hours=1),
        check_out_time=NOW + timedelta(hours=8),
        notes="  forgot to check out ",
        now=later,
    )

    assert record.id == first.id
    assert record.total_hours == 9.0
    assert record.is_valid_day is True
    assert record.notes == "forgot to check out"
    assert len(attendance.records) == 1


def test_mark_attendance_creates_manual_record(service):
    record = service.mark_attendance(
        current_role=Role.ADMIN,
        marked_by="admin",
        user_id="u2",
        work_date=MONDAY,
        check_in_time=NOW,
        now=NOW,
    )
    assert record.marked_by_role == MarkedByRole.HR
    assert record.check_in_method == CheckInMethod.MANUAL
    assert record.total_hours is None


def test_update_record_recomputes_hours(service, attendance):
    attendance.add(_record("a1", "u1", MONDAY, hours=4))
    record = attendance.get_by_id("a1")

    updated = service.update_record(
        current_role=Role.HR,
        record_id="a1",
        check_out_time=record.check_in_time + timedelta(hours=8),
        now=NOW + timedelta(days=1),
    )
    assert updated.total_hours == 8.0
    assert updated.is_valid_day is True


def test_update_missing_record(service):
    with pytest.raises(NotFoundError):
        service.update_record(current_role=Role.HR, record_id="nope", now=NOW)


def test_delete_record(service, attendance):
    attendance.add(_record("a1", "u1", MONDAY, hours=8))
    service.delete_record(current_role=Role.HR, record_id="a1")
    assert attendance.get_by_id("a1") is None

    with pytest.raises(NotFoundError):
        service.delete_record(current_role=Role.HR, record_id="a1")
    with pytest.raises(AuthorizationError):
        service.delete_record(current_role=Role.EMPLOYEE, record_id="a1")


def test_monthly_summary(service, attendance):
    attendance.add(_record("a1", "u1", date(2025, 1, 6), hours=8))
    attendance.add(_record("a2", "u1", date(2025, 1, 7), hours=5))
    attendance.add(_record("a3", "u1", date(2025, 2, 3), hours=8))

    summary = service.monthly_summary(user_id="u1", month=1, year=2025)

    assert summary.total_days == 2
    assert summary.valid_days == 1
    assert summary.total_hours == 13.0
    assert summary.average_hours == 6.5


def test_monthly_summary_empty_month(service):
    summary = service.monthly_summary(user_id="u1", month=3, year=2025)
    assert summary.total_days == 0
    assert summary.average_hours == 0.0


def test_current_week_days_counts_completed_days_only(service, attendance):
    wednesday = datetime(2025, 1, 8, 6, 0, tzinfo=timezone.utc)
    attendance.add(_record("a1", "u1", date(2025, 1, 6), hours=8))
    attendance.add(_record("a2", "u1", date(2025, 1, 7), hours=5))
    attendance.add(_record("a3", "u1", date(2025, 1, 8), check_out=False))
    attendance.add(_record("a4", "u2", date(2025, 1, 6), hours=9))

    days = service.current_week_days("u1", now=wednesday)
    assert [r.id for r in days] == ["a1"]
    assert service.current_week_counts(now=wednesday) == {"u1": 1, "u2": 1}


def test_daily_roster_includes_absent_employees(service, attendance):
    record = _record("a1", "u1", MONDAY, hours=8)
    lunch = AttendanceBreak(record.check_in_time, record.check_in_time + timedelta(minutes=30), 30)
    attendance.add(dataclasses.replace(record, breaks=(lunch,)))

    roster = {entry.user_id: entry for entry in service.daily_roster(work_date=MONDAY)}

    assert roster["u1"].status == "Present"
    assert roster["u1"].net_hours == 7.5
    assert roster["u1"].break_summary == "1 break (30m)"
    assert roster["u2"].status == "Absent"
    assert roster["u2"].record is None


def test_range_stats(service, attendance):
    attendance.add(_record("a1", "u1", date(2025, 1, 6), hours=8))
    attendance.add(_record("a2", "u2", date(2025, 1, 6), hours=4))

    stats = service.range_stats(start=date(2025, 1, 1), end=date(2025, 1, 31))
    assert stats.total_records == 2
    assert stats.valid_records == 1
    assert stats.total_hours == 12.0
    assert stats.average_hours == 6.0
    assert stats.unique_employees == 2

    with pytest.raises(ValidationError):
        service.range_stats(start=date(2025, 1, 31), end=date(2025, 1, 1))
