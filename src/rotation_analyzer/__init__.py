"""
Shift Rotation Analyzer

Computes work, transitional and rest days, full weekends off, vacation
leverage and required headcount for repeating work/rest rotations.
"""

__version__ = "1.0.0"
__author__ = "Shift Scheduler Team"

from .analyzer import (
    AnalysisResult, RotationConfig, ShiftRotationAnalyzer, analyze, find_best_rotation
)
from .calendar_generator import CalendarDay, DayStatus, generate_rotation_calendar
from .staffing_solver import (
    CoveragePolicy, LimitingFactor, StaffingResult, VacationSandwich, solve
)
from .weekend_classifier import (
    WeekendAggregate, WeekendPolicy, WeekendRecord, WeekendType, classify_weekends
)
