from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from workforce_system.attendance.model import AttendanceRecord
from workforce_system.core.enums import DayMark
from workforce_system.core.exceptions import NotFoundError, ValidationError
from workforce_system.payroll.earnings_service import BulkSalarySheetService, EarningsService, SalarySlipService
from workforce_system.payroll.model import MonthlyEarnings


def _earnings(user_id, month, year, earned, worked=160.0, expected=176.0):
    return MonthlyEarnings(
        user_id=user_id,
        month=month,
        year=year,
        total_hours_worked=worked,
        expected_hours=expected,
        earned_salary=earned,
    )


def _present(record_id, user_id, day, hours=8.0):
    check_in = datetime(day.year, day.month, day.day, 4, 0, tzinfo=timezone.utc)
    return AttendanceRecord(id=record_id, user_id=user_id, work_date=day, check_in_time=check_in, total_hours=hours)


@pytest.fixture
def earnings(earnings_store):
    return earnings_store(
        [
            _earnings("u1", 12, 2024, 24000.0),
            _earnings("u1", 1, 2025, 25000.0, worked=150.5, expected=184.0),
            _earnings("u1", 2, 2025, 26000.0),
            _earnings("u2", 1, 2025, 31000.456, worked=170.0),
        ]
    )


def test_month_stats(earnings):
    stats = EarningsService(earnings).month_stats(month=1, year=2025)

    assert stats.total_employees == 2
    assert stats.total_earned == 56000.46
    assert stats.total_hours_worked == 320.5
    assert stats.total_expected_hours == 360.0
    assert stats.avg_hours_worked == 160.25
    assert stats.avg_earned == 28000.23


def test_month_stats_empty_month(earnings):
    stats = EarningsService(earnings).month_stats(month=6, year=2025)
    assert stats.total_employees == 0
    assert stats.avg_earned == 0.0


def test_available_slip_months_exclude_running_month(earnings):
    months = EarningsService(earnings).available_slip_months("u1", today=date(2025, 2, 14))
    assert months == [(1, 2025), (12, 2024)]


def test_for_month_and_all_for_month(earnings):
    svc = EarningsService(earnings)
    assert svc.for_month("u1", month=1, year=2025).earned_salary == 25000.0
    assert svc.for_month("u1", month=3, year=2025) is None
    assert [e.user_id for e in svc.all_for_month(month=1, year=2025)] == ["u2", "u1"]
    with pytest.raises(ValidationError):
        svc.for_month("u1", month=0, year=2025)


def test_salary_slip(employees, attendance, earnings, new_employee):
    employees.add(new_employee("u1", phone=None, hourly_rate=150.0, aadhaar_number="1234 5678 9012"))
    attendance.add(_present("a1", "u1", date(2025, 1, 1), hours=8.5))
    attendance.add(_present("a2", "u1", date(2025, 1, 2), hours=7.0))
    attendance.add(_present("a3", "u1", date(2025, 1, 4), hours=4.0))  # Saturday overtime

    slip = SalarySlipService(employees, earnings, attendance).build_slip("u1", month=1, year=2025)

    assert slip.phone == "N/A"
    assert slip.period_start == date(2025, 1, 1)
    assert slip.period_end == date(2025, 1, 31)
    assert len(slip.days) == 31
    assert slip.total_hours == 150.5
    assert slip.earned_salary == 25000.0
    assert slip.previous_balance == 24000.0
    assert slip.present_days == 3
    assert slip.absent_days == 20  # 23 working days minus 3 records
    assert slip.leave_days == 0

    by_day = {d.day.day: d for d in slip.days}
    assert (by_day[1].mark, by_day[1].hours, by_day[1].day_name) == (DayMark.PRESENT, 8.5, "Wed")
    assert by_day[3].mark == DayMark.ABSENT
    assert by_day[4].mark == DayMark.PRESENT
    assert by_day[5].mark == DayMark.WEEKLY_OFF


def test_salary_slip_without_previous_month(employees, attendance, earnings):
    slip = SalarySlipService(employees, earnings, attendance).build_slip("u1", month=12, year=2024)
    assert slip.previous_balance == 0.0


def test_salary_slip_requires_employee_and_earnings(employees, attendance, earnings):
    svc = SalarySlipService(employees, earnings, attendance)
    with pytest.raises(NotFoundError):
        svc.build_slip("ghost", month=1, year=2025)
    with pytest.raises(NotFoundError) as exc:
        svc.build_slip("u2", month=2, year=2025)
    assert "No salary data found for this month" in str(exc.value)


def test_bulk_sheet_filters_sorts_and_numbers(employees, earnings, new_employee):
    bank = dict(account_number="0011223344", ifsc_code="HDFC0000123", aadhaar_number="1111 2222 3333")
    employees.add(new_employee("u1", full_name="zara khan", **bank))
    employees.add(new_employee("u2", full_name="Asha Rao", date_of_birth=date(1990, 5, 1), **bank))
    earnings.rows.append(_earnings("u3", 1, 2025, 20000.0))
    employees.add(new_employee("u3", full_name="Bilal", ifsc_code="SBIN0000001"))  # incomplete bank details
    employees.add(new_employee("u4", full_name="Chitra", **bank))  # no earnings

    svc = BulkSalarySheetService(employees, earnings)
    rows = svc.build_sheet(month=1, year=2025)

    assert [(r.serial_no, r.name) for r in rows] == [(1, "Asha Rao"), (2, "zara khan")]
    assert rows[0].amount == 31000.46
    assert rows[0].date_of_birth == date(1990, 5, 1)
    assert svc.total_amount(rows) == 56000.46


def test_bulk_sheet_skips_inactive(employees, earnings, new_employee):
    bank = dict(account_number="1", ifsc_code="X", aadhaar_number="2")
    employees.add(new_employee("u1", is_active=False, **bank))
    employees.add(new_employee("u2", **bank))

    rows = BulkSalarySheetService(employees, earnings).build_sheet(month=1, year=2025)
    assert [r.name for r in rows] == ["Employee u2"]
