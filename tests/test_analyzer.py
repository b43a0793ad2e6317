"""
Test Suite for the rotation analysis pipeline

Covers the assembled AnalysisResult, degenerate configurations,
determinism and best-rotation selection.
"""

import pytest
import sys
from pathlib import Path
from datetime import date

# Setup import path for src
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from rotation_analyzer.analyzer import (
    RotationConfig, ShiftRotationAnalyzer, analyze, find_best_rotation, format_pattern
)
from rotation_analyzer.staffing_solver import CoveragePolicy, LimitingFactor
from rotation_analyzer.weekend_classifier import WeekendPolicy


@pytest.fixture
def analyzer():
    """Analyzer for 2026 starting on New Year's Day."""
    return ShiftRotationAnalyzer(2026, date(2026, 1, 1))


@pytest.fixture
def rotations():
    return [
        RotationConfig(6, 3, 2, name="Current (6-3)", id="1"),
        RotationConfig(5, 3, 2, name="Option A (5-3)", id="2"),
        RotationConfig(6, 4, 2, name="Option B (6-4)", id="3"),
    ]


def test_analyze_rotation_6_3(analyzer, rotations):
    result = analyzer.analyze_rotation(rotations[0])

    assert result.rotation_id == "1"
    assert result.rotation_name == "Current (6-3)"
    assert result.pattern == "6 (2N) - T - 2"
    assert result.cycle_length == 9
    assert result.work_days == 245
    assert result.transitional_days == 40
    assert result.rest_days == 80
    assert result.total_rest_days == 120
    assert result.total_nights == 82

    assert result.weekend_stats.total_weekends == 52
    assert result.weekend_stats.full_weekends == 11

    assert result.vacation.total == 12
    assert result.vacation.factor == 2.0

    assert result.staffing.limiting_factor == LimitingFactor.VOLUME
    assert result.staffing.required_headcount == 27


def test_day_counts_cover_whole_range(analyzer, rotations):
    for config in rotations:
        result = analyzer.analyze_rotation(config)
        assert result.work_days + result.transitional_days + result.rest_days == 365


def test_analyze_function_matches_class(rotations):
    config = rotations[1]
    assert analyze(config, 2026, date(2026, 1, 1)) == \
        ShiftRotationAnalyzer(2026, date(2026, 1, 1)).analyze_rotation(config)


def test_analysis_is_deterministic(rotations):
    """
    Why this is important: the presentation layer re-runs the analysis on
    every change and relies on identical input producing identical output.
    """
    policy = CoveragePolicy(day_posts=12, night_posts=4, guard_posts=2,
                            vacation_shifts=22, backup_factor=1.05)
    first = analyze(rotations[0], 2026, date(2026, 3, 1), policy)
    second = analyze(rotations[0], 2026, date(2026, 3, 1), policy)

    assert first == second
    assert repr(first) == repr(second)


def test_start_date_after_year_end():
    result = analyze(RotationConfig(6, 3, 2), 2026, date(2027, 1, 1))

    assert result.work_days == 0
    assert result.transitional_days == 0
    assert result.rest_days == 0
    assert result.total_rest_days == 0
    assert result.total_nights == 0
    assert result.weekend_stats.total_weekends == 0
    assert result.weekend_stats.full_weekends == 0
    assert result.weekend_stats.details == ()


def test_zero_length_cycle_degrades_gracefully():
    """An empty rotation still scans the weekends of the year, all counted as work."""
    result = analyze(RotationConfig(0, 0), 2026, date(2026, 1, 1))

    assert result.cycle_length == 0
    assert result.work_days == 0
    assert result.weekend_stats.total_weekends == 52
    assert result.weekend_stats.full_weekends == 0
    assert result.vacation.factor == 0.0
    assert result.staffing.limiting_factor == LimitingFactor.UNACHIEVABLE
    assert result.staffing.required_headcount == 0


def test_invalid_counts_are_sanitized():
    result = analyze(RotationConfig(6.9, -2, 9), 2026, date(2026, 1, 1))

    assert result.cycle_length == 6
    assert result.pattern == "6 (6N)"
    assert result.work_days == 365
    assert result.weekend_stats.full_weekends == 0


def test_rotation_without_nights_is_unachievable(analyzer):
    result = analyzer.analyze_rotation(RotationConfig(5, 2, 0))
    assert result.staffing.limiting_factor == LimitingFactor.UNACHIEVABLE
    assert result.total_nights == 0


def test_invalid_year_returns_empty_result():
    result = analyze(RotationConfig(6, 3, 2), 0, date(2026, 1, 1))
    assert result.work_days == 0
    assert result.weekend_stats.total_weekends == 0


def test_clean_only_weekend_policy(rotations):
    analyzer = ShiftRotationAnalyzer(2026, date(2026, 1, 1), weekend_policy=WeekendPolicy.CLEAN_ONLY)
    result = analyzer.analyze_rotation(rotations[0])
    assert result.weekend_stats.full_weekends == 6


def test_default_label():
    result = analyze(RotationConfig(4, 4, 1), 2026, date(2026, 1, 1))
    assert result.rotation_name == "4-4"


@pytest.mark.parametrize(
    "work_days, rest_days, nights, expected",
    [
        (6, 3, 2, "6 (2N) - T - 2"),
        (5, 1, 0, "5 (0N) - T - 0"),
        (4, 0, 1, "4 (1N)"),
    ],
)
def test_format_pattern(work_days, rest_days, nights, expected):
    assert format_pattern(work_days, rest_days, nights) == expected


def test_analyze_rotations_keeps_order(analyzer, rotations):
    results = analyzer.analyze_rotations(rotations)
    assert [r.rotation_id for r in results] == ["1", "2", "3"]


def test_find_best_rotation(analyzer, rotations):
    results = analyzer.analyze_rotations(rotations)
    best = find_best_rotation(results)

    assert best.weekend_stats.full_weekends == max(r.weekend_stats.full_weekends for r in results)


def test_find_best_rotation_tie_prefers_later(analyzer, rotations):
    first = analyzer.analyze_rotation(rotations[0])
    duplicate = analyzer.analyze_rotation(RotationConfig(6, 3, 2, name="Copy", id="9"))
    assert find_best_rotation([first, duplicate]).rotation_id == "9"


def test_find_best_rotation_empty():
    assert find_best_rotation([]) is None
