from datetime import date, datetime, timedelta, timezone

from workforce_system.attendance.hours import (
    attendance_percentage,
    attendance_status,
    breaks_summary,
    gross_hours,
    is_valid_attendance,
    net_hours,
    record_net_hours,
)
from workforce_system.attendance.model import AttendanceBreak, AttendanceRecord
from workforce_system.core.enums import AttendanceStatus

IN = datetime(2025, 1, 6, 3, 30, tzinfo=timezone.utc)


def _break(start_offset_min: int, minutes: int) -> AttendanceBreak:
    start = IN + timedelta(minutes=start_offset_min)
    return AttendanceBreak(start, start + timedelta(minutes=minutes), minutes)


def test_gross_and_net_hours():
    out = IN + timedelta(hours=9)
    assert gross_hours(IN, out) == 9.0
    assert net_hours(IN, out, [_break(120, 60)]) == 8.0


def test_partial_minutes_are_truncated():
    out = IN + timedelta(hours=8, minutes=20, seconds=59)
    assert gross_hours(IN, out) == 8.33


def test_net_hours_never_negative():
    out = IN + timedelta(minutes=10)
    assert net_hours(IN, out, [_break(0, 60)]) == 0.0


def test_record_net_hours_is_zero_until_checked_out():
    record = AttendanceRecord(id="a1", user_id="u1", work_date=date(2025, 1, 6), check_in_time=IN)
    assert record_net_hours(record) == 0.0


def test_attendance_status():
    assert attendance_status(None, None) == AttendanceStatus.ABSENT
    assert attendance_status(IN, None) == AttendanceStatus.INCOMPLETE
    assert attendance_status(IN, IN + timedelta(hours=1)) == AttendanceStatus.PRESENT


def test_valid_day_threshold():
    assert is_valid_attendance(6.0)
    assert not is_valid_attendance(5.99)
    assert not is_valid_attendance(None)
    assert is_valid_attendance(4, minimum_hours=4)


def test_percentage_and_summary():
    assert attendance_percentage(18, 20) == 90
    assert breaks_summary([_break(60, 15), _break(240, 30)]) == "2 breaks (45m)"
