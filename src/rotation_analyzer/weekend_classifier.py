"""
Weekend Classifier for Rotation Analysis

Scans every Saturday/Sunday pair of a generated rotation calendar and counts
how many of them are fully off duty.
"""

from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple
from dataclasses import dataclass
from enum import Enum
import logging

from .calendar_generator import CalendarDay, DayStatus

logger = logging.getLogger(__name__)

SATURDAY = 5  # date.weekday()


class WeekendType(Enum):
    CLEAN = "Clean (R+R)"
    TRANSITIONAL_SATURDAY = "Transitional (T+R)"
    TRANSITIONAL_SUNDAY = "Transitional (R+T)"
    TRANSITIONAL_DOUBLE = "Transitional (T+T)"

    @property
    def is_transitional(self) -> bool:
        return self is not WeekendType.CLEAN


class WeekendPolicy(Enum):
    """Which weekend types count as a full weekend off"""
    INCLUDE_TRANSITIONAL = "include_transitional"
    CLEAN_ONLY = "clean_only"


# (saturday, sunday) -> type; pairs not listed contain a work day
WEEKEND_TYPES: Dict[Tuple[DayStatus, DayStatus], WeekendType] = {
    (DayStatus.REST, DayStatus.REST): WeekendType.CLEAN,
    (DayStatus.TRANSITIONAL, DayStatus.REST): WeekendType.TRANSITIONAL_SATURDAY,
    (DayStatus.REST, DayStatus.TRANSITIONAL): WeekendType.TRANSITIONAL_SUNDAY,
    (DayStatus.TRANSITIONAL, DayStatus.TRANSITIONAL): WeekendType.TRANSITIONAL_DOUBLE,
}


@dataclass(frozen=True)
class WeekendRecord:
    """A single Saturday/Sunday pair inside the analysed range"""
    saturday: date
    saturday_status: DayStatus
    sunday_status: DayStatus
    weekend_type: Optional[WeekendType]
    is_full: bool

    @property
    def sunday(self) -> date:
        return self.saturday + timedelta(days=1)


@dataclass(frozen=True)
class WeekendAggregate:
    """Weekend counts for one rotation calendar"""
    total_weekends: int
    full_weekends: int
    clean_weekends: int
    transitional_weekends: int
    details: Tuple[WeekendRecord, ...]


def classify_pair(saturday_status: DayStatus, sunday_status: DayStatus,
                  policy: WeekendPolicy = WeekendPolicy.INCLUDE_TRANSITIONAL
                  ) -> Tuple[Optional[WeekendType], bool]:
    """Return the weekend type (None when a work day is involved) and whether it is full"""
    weekend_type = WEEKEND_TYPES.get((saturday_status, sunday_status))
    if weekend_type is None:
        return None, False
    if policy is WeekendPolicy.CLEAN_ONLY:
        return weekend_type, weekend_type is WeekendType.CLEAN
    return weekend_type, True


def classify_weekends(calendar_days: Iterable[CalendarDay],
                      start_date: Optional[date] = None,
                      end_date: Optional[date] = None,
                      policy: WeekendPolicy = WeekendPolicy.INCLUDE_TRANSITIONAL) -> WeekendAggregate:
    """
    Classify every weekend of a rotation calendar.

    Args:
        calendar_days: Output of the calendar generator
        start_date: First day of the scanned range (defaults to first calendar day)
        end_date: Last day of the scanned range (defaults to last calendar day)
        policy: Whether transitional weekends count as full

    Dates without a calendar entry are treated as work days, so missing data
    never turns into a weekend off.
    """
    date_status: Dict[date, DayStatus] = {day.date: day.status for day in calendar_days}

    if start_date is None and date_status:
        start_date = min(date_status)
    if end_date is None and date_status:
        end_date = max(date_status)
    if start_date is None or end_date is None or start_date > end_date:
        return WeekendAggregate(0, 0, 0, 0, ())

    # Offset of the first Saturday, and how many Sundays after it stay in range
    first_offset = (SATURDAY - start_date.weekday()) % 7
    span = (end_date - start_date).days - first_offset
    num_weekends = (span - 1) // 7 + 1 if span >= 1 else 0

    weekends = []
    for week in range(num_weekends):
        saturday = start_date + timedelta(days=first_offset + 7 * week)
        sunday = saturday + timedelta(days=1)

        sat_status = date_status.get(saturday, DayStatus.WORK)
        sun_status = date_status.get(sunday, DayStatus.WORK)
        weekend_type, is_full = classify_pair(sat_status, sun_status, policy)

        weekends.append(WeekendRecord(
            saturday=saturday,
            saturday_status=sat_status,
            sunday_status=sun_status,
            weekend_type=weekend_type,
            is_full=is_full
        ))

    full_weekends = [w for w in weekends if w.is_full]
    clean_weekends = [w for w in full_weekends if w.weekend_type is WeekendType.CLEAN]
    transitional_weekends = [w for w in full_weekends if w.weekend_type.is_transitional]

    logger.debug(
        f"Classified {len(weekends)} weekends: {len(full_weekends)} full "
        f"({len(clean_weekends)} clean, {len(transitional_weekends)} transitional)"
    )

    return WeekendAggregate(
        total_weekends=len(weekends),
        full_weekends=len(full_weekends),
        clean_weekends=len(clean_weekends),
        transitional_weekends=len(transitional_weekends),
        details=tuple(weekends)
    )
