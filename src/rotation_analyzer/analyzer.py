"""
Rotation Analyzer

Runs the calendar generator, weekend classifier and staffing solver for a
rotation configuration and assembles a single AnalysisResult.
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence
from dataclasses import dataclass
import logging

from .calendar_generator import (
    CalendarDay, DayStatus, count_statuses, generate_rotation_calendar,
    sanitize_count, year_end
)
from .weekend_classifier import WeekendAggregate, WeekendPolicy, classify_weekends
from .staffing_solver import (
    CoveragePolicy, StaffingResult, VacationSandwich, clamp_nights, solve
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RotationConfig:
    """A work/rest rotation as entered by the user"""
    work_days: int
    rest_days: int
    nights_per_cycle: int = 0
    name: str = ""
    id: str = ""

    @property
    def label(self) -> str:
        return self.name or f"{self.work_days}-{self.rest_days}"


@dataclass(frozen=True)
class AnalysisResult:
    """Everything derived from one rotation for one year"""
    rotation_id: str
    rotation_name: str
    pattern: str
    cycle_length: int
    work_days: int
    transitional_days: int
    rest_days: int
    total_rest_days: int
    total_nights: int
    weekend_stats: WeekendAggregate
    vacation: VacationSandwich
    staffing: StaffingResult


def format_pattern(work_days: int, rest_days: int, nights_per_cycle: int) -> str:
    """Canonical pattern string, e.g. '6 (2N) - T - 2' for six work days and three rest days"""
    pattern = f"{work_days} ({nights_per_cycle}N)"
    if rest_days > 0:
        pattern += f" - T - {rest_days - 1}"
    return pattern


class ShiftRotationAnalyzer:
    """Analyzes rotations for one target year and cycle start date"""

    def __init__(self, year: int, start_date: date,
                 coverage_policy: Optional[CoveragePolicy] = None,
                 weekend_policy: WeekendPolicy = WeekendPolicy.INCLUDE_TRANSITIONAL):
        self.year = year
        self.start_date = start_date
        self.coverage_policy = coverage_policy or CoveragePolicy()
        self.weekend_policy = weekend_policy

    @property
    def end_date(self) -> Optional[date]:
        try:
            return year_end(self.year)
        except (ValueError, TypeError):
            return None

    def generate_rotation_calendar(self, work_days, rest_days) -> Sequence[CalendarDay]:
        return generate_rotation_calendar(work_days, rest_days, self.start_date, self.year)

    def count_full_weekends(self, calendar_days: Sequence[CalendarDay]) -> WeekendAggregate:
        """Classify the weekends in [start_date, Dec 31], whether or not the calendar is empty"""
        end_date = self.end_date
        if end_date is None:
            return classify_weekends((), policy=self.weekend_policy)
        return classify_weekends(calendar_days, self.start_date, end_date, policy=self.weekend_policy)

    def analyze_rotation(self, config: RotationConfig) -> AnalysisResult:
        """Run the full pipeline for one rotation"""
        work_days = sanitize_count(config.work_days)
        rest_days = sanitize_count(config.rest_days)
        nights = clamp_nights(config.nights_per_cycle, work_days)
        cycle_length = work_days + rest_days

        logger.info(f"Analyzing rotation '{config.label}' ({work_days}-{rest_days}) for {self.year}")

        calendar_days = self.generate_rotation_calendar(work_days, rest_days)
        weekend_stats = self.count_full_weekends(calendar_days)

        counts = count_statuses(calendar_days)
        work_count = counts[DayStatus.WORK]
        transitional_count = counts[DayStatus.TRANSITIONAL]
        rest_count = counts[DayStatus.REST]

        solution = solve(config, work_count, cycle_length, self.coverage_policy)

        return AnalysisResult(
            rotation_id=config.id,
            rotation_name=config.label,
            pattern=format_pattern(work_days, rest_days, nights),
            cycle_length=cycle_length,
            work_days=work_count,
            transitional_days=transitional_count,
            rest_days=rest_count,
            total_rest_days=transitional_count + rest_count,
            total_nights=solution.total_nights,
            weekend_stats=weekend_stats,
            vacation=solution.vacation,
            staffing=solution.staffing
        )

    def analyze_rotations(self, configs: Iterable[RotationConfig]) -> List[AnalysisResult]:
        return [self.analyze_rotation(config) for config in configs]


def analyze(config: RotationConfig, year: int, start_date: date,
            coverage_policy: Optional[CoveragePolicy] = None,
            weekend_policy: WeekendPolicy = WeekendPolicy.INCLUDE_TRANSITIONAL) -> AnalysisResult:
    """Analyze a single rotation for a year"""
    analyzer = ShiftRotationAnalyzer(year, start_date, coverage_policy, weekend_policy)
    return analyzer.analyze_rotation(config)


def find_best_rotation(results: Sequence[AnalysisResult]) -> Optional[AnalysisResult]:
    """Result with the most full weekends off; on a tie the later result wins"""
    best = None
    for result in results:
        if best is None or result.weekend_stats.full_weekends >= best.weekend_stats.full_weekends:
            best = result
    return best
