"""
Calendar Generator for Rotation Analysis

Expands a work/rest rotation into a day-by-day status sequence running from
the cycle start date through the end of the target year.
"""

from datetime import date, timedelta, MINYEAR, MAXYEAR
from typing import Any, Dict, Iterable, List, Tuple
from dataclasses import dataclass
from enum import Enum
import math
import logging

logger = logging.getLogger(__name__)


class DayStatus(Enum):
    WORK = "work"
    TRANSITIONAL = "transitional"
    REST = "rest"

    @property
    def code(self) -> str:
        """Single letter used in tables and pattern strings"""
        return _STATUS_CODES[self]


_STATUS_CODES = {
    DayStatus.WORK: "W",
    DayStatus.TRANSITIONAL: "T",
    DayStatus.REST: "R",
}


@dataclass(frozen=True)
class CalendarDay:
    """One calendar date and the rotation status assigned to it"""
    date: date
    status: DayStatus


def sanitize_count(value: Any) -> int:
    """
    Normalize a day count coming from user input.

    Negative, NaN, infinite and non-numeric values become 0. Fractional
    values are floored.
    """
    if isinstance(value, bool) or value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or math.isinf(number) or number <= 0:
        return 0
    return int(math.floor(number))


def build_cycle_template(work_days: int, rest_days: int) -> Tuple[DayStatus, ...]:
    """Build one repetition of the rotation from already sanitized counts"""
    template: List[DayStatus] = [DayStatus.WORK] * work_days
    if rest_days > 0:
        template.append(DayStatus.TRANSITIONAL)
        template.extend([DayStatus.REST] * (rest_days - 1))
    return tuple(template)


def year_end(year: int) -> date:
    return date(year, 12, 31)


def generate_rotation_calendar(work_days: Any, rest_days: Any,
                               start_date: date, year: int) -> Tuple[CalendarDay, ...]:
    """
    Generate the rotation calendar for a year.

    Args:
        work_days: Consecutive days worked per cycle
        rest_days: Total rest days per cycle, transitional day included
        start_date: First day of the first cycle
        year: Target year; the calendar always ends on its December 31st

    Returns:
        One CalendarDay per date in [start_date, Dec 31 of year]. Empty when
        the cycle has no days or start_date falls after the year end.
    """
    safe_work_days = sanitize_count(work_days)
    safe_rest_days = sanitize_count(rest_days)

    template = build_cycle_template(safe_work_days, safe_rest_days)
    cycle_length = len(template)
    if cycle_length == 0:
        logger.debug("Empty rotation cycle, no days to assign")
        return ()

    if not isinstance(year, int) or not MINYEAR <= year <= MAXYEAR:
        logger.warning(f"Year {year} is outside the supported calendar range")
        return ()

    end_date = year_end(year)
    if start_date > end_date:
        return ()

    num_days = (end_date - start_date).days + 1
    calendar_days = tuple(
        CalendarDay(start_date + timedelta(days=offset), template[offset % cycle_length])
        for offset in range(num_days)
    )

    logger.debug(
        f"Generated {num_days} days for rotation {safe_work_days}-{safe_rest_days} "
        f"starting {start_date.isoformat()}"
    )
    return calendar_days


def count_statuses(calendar_days: Iterable[CalendarDay]) -> Dict[DayStatus, int]:
    """Count days per status; every status is present in the result"""
    counts = {status: 0 for status in DayStatus}
    for day in calendar_days:
        counts[day.status] += 1
    return counts
