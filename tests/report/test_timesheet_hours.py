import pytest

from timesheet_report.backend.forms import ShiftRow
from timesheet_report.backend.hours import (
    OvertimePolicy,
    compute_daily_stats,
    compute_shift_hours,
    split_overtime,
)
from timesheet_report.backend.parsers import parse_clock_time


def test_parse_clock_time_basic_and_permissive():
    assert parse_clock_time("08:30") == 510
    assert parse_clock_time("0:0") == 0
    assert parse_clock_time("") == 0
    assert parse_clock_time(None) == 0
    # No range validation.
    assert parse_clock_time("25:99") == 1599
    # Seconds are ignored.
    assert parse_clock_time("08:30:15") == 510
    assert parse_clock_time("abc") == 0


def test_same_day_shift_is_plain_difference():
    for start, end in [("08:00", "16:00"), ("06:15", "14:45"), ("00:00", "23:59")]:
        row = ShiftRow(date="2025-09-01", start=start, end=end)
        expected = (parse_clock_time(end) - parse_clock_time(start)) / 60
        assert compute_shift_hours(row) == pytest.approx(expected)


def test_overnight_shift_flagged():
    row = ShiftRow(date="2025-09-01", start="22:00", end="02:00", crosses_midnight=True)
    assert compute_shift_hours(row) == pytest.approx(4.0)


def test_overnight_shift_detected_from_times():
    row = ShiftRow(date="2025-09-01", start="22:00", end="06:00")
    assert compute_shift_hours(row) == pytest.approx(8.0)


def test_flag_forces_next_day_end_even_when_end_is_later():
    row = ShiftRow(date="2025-09-01", start="08:00", end="09:00", crosses_midnight=True)
    assert compute_shift_hours(row) == pytest.approx(25.0)


def test_break_is_subtracted_and_result_clamped():
    row = ShiftRow(date="2025-09-01", start="08:00", end="18:00", break_minutes=60)
    assert compute_shift_hours(row) == pytest.approx(9.0)
    short = ShiftRow(date="2025-09-01", start="08:00", end="09:00", break_minutes=120)
    assert compute_shift_hours(short) == 0.0


def test_missing_start_or_end_counts_zero():
    assert compute_shift_hours(ShiftRow(date="2025-09-01", start="08:00")) == 0.0
    assert compute_shift_hours(ShiftRow(date="2025-09-01", end="16:00")) == 0.0


def test_overtime_split_defaults():
    stats = split_overtime(9.0)
    assert stats.regular_hours == pytest.approx(8.0)
    assert stats.overtime_hours == pytest.approx(1.0)
    assert stats.weighted_hours == pytest.approx(9.5)


def test_no_overtime_below_threshold():
    stats = split_overtime(5.0, threshold=8, rate=1.5)
    assert (stats.regular_hours, stats.overtime_hours, stats.weighted_hours) == (5.0, 0.0, 5.0)


def test_daily_stats_with_custom_policy():
    policy = OvertimePolicy(threshold=10, rate=2)
    row = ShiftRow(date="2025-09-02", start="07:00", end="21:00", break_minutes=30)
    stats = compute_daily_stats(row, policy.threshold, policy.rate)
    assert stats.total_hours == pytest.approx(13.5)
    assert stats.regular_hours == pytest.approx(10)
    assert stats.overtime_hours == pytest.approx(3.5)
    assert stats.weighted_hours == pytest.approx(17)
