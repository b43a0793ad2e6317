"""
Tests for the rotation calendar generator: cycle template, input
sanitization and the day-by-day walk to the end of the year.
"""

import pytest
import sys
from pathlib import Path
from datetime import date, timedelta

# Setup import path for src
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rotation_analyzer.calendar_generator import (
    DayStatus, build_cycle_template, count_statuses, generate_rotation_calendar,
    sanitize_count
)

W, T, R = DayStatus.WORK, DayStatus.TRANSITIONAL, DayStatus.REST


@pytest.mark.parametrize(
    "value, expected",
    [
        (6, 6),
        (2.9, 2),
        (0, 0),
        (-3, 0),
        (float("nan"), 0),
        (float("inf"), 0),
        (None, 0),
        ("abc", 0),
        ("4", 4),
    ],
)
def test_sanitize_count(value, expected):
    assert sanitize_count(value) == expected


@pytest.mark.parametrize(
    "work_days, rest_days, expected",
    [
        (6, 3, (W, W, W, W, W, W, T, R, R)),
        (2, 1, (W, W, T)),
        (3, 0, (W, W, W)),
        (0, 2, (T, R)),
        (0, 0, ()),
    ],
)
def test_cycle_template(work_days, rest_days, expected):
    assert build_cycle_template(work_days, rest_days) == expected


def test_full_year_6_3_counts():
    """365 days = 40 full cycles + 5 work days of the next one."""
    calendar_days = generate_rotation_calendar(6, 3, date(2026, 1, 1), 2026)
    counts = count_statuses(calendar_days)

    assert len(calendar_days) == 365
    assert counts[W] == 245
    assert counts[T] == 40
    assert counts[R] == 80
    assert calendar_days[0].date == date(2026, 1, 1)
    assert calendar_days[-1].date == date(2026, 12, 31)


def test_leap_year_has_366_days():
    calendar_days = generate_rotation_calendar(5, 3, date(2024, 1, 1), 2024)
    assert len(calendar_days) == 366
    assert sum(count_statuses(calendar_days).values()) == 366


def test_consecutive_dates_follow_template():
    """Statuses repeat with the cycle length, independent of the weekday."""
    calendar_days = generate_rotation_calendar(4, 4, date(2026, 3, 10), 2026)
    template = build_cycle_template(4, 4)

    for index, day in enumerate(calendar_days):
        assert day.date == date(2026, 3, 10) + timedelta(days=index)
        assert day.status == template[index % 8]


@pytest.mark.parametrize("work_days, rest_days", [(6, 3), (5, 3), (6, 4), (1, 1), (7, 7), (4, 0)])
def test_each_cycle_has_expected_composition(work_days, rest_days):
    """
    Why this is important: every complete cycle must contain exactly the
    configured work days, one transitional day when there is rest, and the
    remaining full rest days.
    """
    cycle_length = work_days + rest_days
    calendar_days = generate_rotation_calendar(work_days, rest_days, date(2026, 1, 1), 2026)
    full_cycles = len(calendar_days) // cycle_length

    for cycle in range(full_cycles):
        chunk = calendar_days[cycle * cycle_length:(cycle + 1) * cycle_length]
        counts = count_statuses(chunk)
        assert counts[W] == work_days
        assert counts[T] == (1 if rest_days > 0 else 0)
        assert counts[R] == max(0, rest_days - 1)


def test_partial_year_starts_at_start_date():
    calendar_days = generate_rotation_calendar(6, 3, date(2026, 12, 20), 2026)
    assert len(calendar_days) == 12
    assert calendar_days[0].status == W
    assert calendar_days[6].status == T


def test_start_date_before_year_runs_until_year_end():
    calendar_days = generate_rotation_calendar(2, 2, date(2025, 12, 31), 2026)
    assert len(calendar_days) == 366
    assert calendar_days[0].date == date(2025, 12, 31)


@pytest.mark.parametrize(
    "work_days, rest_days, start, year",
    [
        (0, 0, date(2026, 1, 1), 2026),
        (-1, -5, date(2026, 1, 1), 2026),
        (6, 3, date(2027, 1, 1), 2026),
        (6, 3, date(2026, 1, 1), 0),
        (6, 3, date(2026, 1, 1), 2026.5),
    ],
)
def test_degenerate_inputs_give_empty_calendar(work_days, rest_days, start, year):
    assert generate_rotation_calendar(work_days, rest_days, start, year) == ()


def test_invalid_rest_days_mean_work_only():
    calendar_days = generate_rotation_calendar(6.7, float("nan"), date(2026, 1, 1), 2026)
    assert len(calendar_days) == 365
    assert all(day.status == W for day in calendar_days)


def test_generation_is_deterministic():
    first = generate_rotation_calendar(6, 3, date(2026, 2, 14), 2026)
    second = generate_rotation_calendar(6, 3, date(2026, 2, 14), 2026)
    assert first == second


def test_last_supported_year_does_not_overflow():
    calendar_days = generate_rotation_calendar(1, 1, date(9999, 12, 30), 9999)
    assert [day.status for day in calendar_days] == [W, T]


def test_count_statuses_includes_missing_statuses():
    counts = count_statuses(generate_rotation_calendar(3, 0, date(2026, 12, 29), 2026))
    assert counts == {W: 3, T: 0, R: 0}
