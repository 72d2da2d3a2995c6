from datetime import date

import pytest

from workforce_system.common.datetime_utils import (
    current_week_in_month,
    month_name,
    next_month,
    parse_iso_datetime,
    previous_month,
    total_days_inclusive,
)
from workforce_system.common.formatting import (
    format_break_summary,
    format_currency,
    format_hours,
    format_minutes_clock,
)
from workforce_system.common.numbers import percentage, round_half_up
from workforce_system.core.exceptions import ValidationError


@pytest.mark.parametrize(
    "hours, expected",
    [
        (0, "0m"),
        (None, "0m"),
        (0.75, "45m"),
        (8, "8h"),
        (8.5, "8h 30m"),
        (7.999, "8h"),
    ],
)
def test_format_hours(hours, expected):
    assert format_hours(hours) == expected


def test_format_currency_uses_indian_grouping():
    assert format_currency(999) == "₹999"
    assert format_currency(123456) == "₹1,23,456"
    assert format_currency(12345678) == "₹1,23,45,678"
    assert format_currency(-1500) == "-₹1,500"
    assert format_currency(None) == "₹0"


def test_format_break_summary():
    assert format_break_summary([]) == "No breaks"
    assert format_break_summary([30]) == "1 break (30m)"
    assert format_break_summary([45, 30]) == "2 breaks (1h 15m)"
    assert format_break_summary([0]) == "1 break"


def test_format_minutes_clock_pads_hours_and_minutes():
    assert format_minutes_clock(485) == "08:05"
    assert format_minutes_clock(0) == "00:00"
    assert format_minutes_clock(6000) == "100:00"


def test_round_half_up_and_percentage():
    assert round_half_up(0.125) == 0.13
    assert round_half_up(2.675) == 2.68
    assert percentage(1, 3) == 33
    assert percentage(2, 3) == 67
    assert percentage(5, 0) == 0


def test_total_days_inclusive():
    assert total_days_inclusive(date(2025, 1, 1), date(2025, 1, 1)) == 1
    assert total_days_inclusive("2025-01-30", "2025-02-02") == 4


def test_month_navigation_wraps_year():
    assert previous_month(1, 2025) == (12, 2024)
    assert next_month(12, 2025) == (1, 2026)
    assert month_name(3, 2025) == "March 2025"


def test_current_week_is_clamped_to_month():
    # Wednesday 1 Oct 2025: the week starts in September.
    assert current_week_in_month(date(2025, 10, 1)) == (date(2025, 10, 1), date(2025, 10, 5))
    # Friday 31 Oct 2025: the week ends in November.
    assert current_week_in_month(date(2025, 10, 31)) == (date(2025, 10, 27), date(2025, 10, 31))


def test_parse_iso_datetime_treats_naive_as_utc():
    dt = parse_iso_datetime("2025-01-01T10:00:00")
    assert dt.utcoffset().total_seconds() == 0
    assert parse_iso_datetime("2025-01-01T10:00:00Z") == dt


def test_parse_iso_datetime_accepts_trimmed_fractions_and_short_offsets():
    dt = parse_iso_datetime("2025-01-06T10:00:00.12345+00:00")
    assert dt.microsecond == 123450
    assert dt.utcoffset().total_seconds() == 0

    assert parse_iso_datetime("2025-01-06T10:00:00.5Z").microsecond == 500000
    assert parse_iso_datetime("2025-01-06 15:30:00+05").utcoffset().total_seconds() == 5 * 3600
    assert parse_iso_datetime("2025-01-06").date() == date(2025, 1, 6)


def test_parse_iso_datetime_rejects_garbage():
    with pytest.raises(ValidationError):
        parse_iso_datetime("yesterday")
