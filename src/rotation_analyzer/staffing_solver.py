"""
Staffing and Vacation Solver for Rotation Analysis

Derives the vacation sandwich of a rotation and the minimum headcount needed
to keep a fixed set of daily posts covered all year round.
"""

from typing import Any, Optional
from dataclasses import dataclass
from enum import Enum
import math
import logging

from .calendar_generator import sanitize_count

logger = logging.getLogger(__name__)

CALENDAR_DAYS = 365


class LimitingFactor(Enum):
    VOLUME = "volume"
    NIGHT_COVERAGE = "nights"
    UNACHIEVABLE = "impossible"


@dataclass(frozen=True)
class CoveragePolicy:
    """Posts to cover every day and the leave/contingency assumptions per person"""
    day_posts: int = 12
    night_posts: int = 4
    guard_posts: int = 0
    vacation_shifts: float = 24  # leave budget in shifts, not calendar days
    backup_factor: float = 1.0  # e.g. 1.05 for 5% sickness cover
    calendar_days: int = CALENDAR_DAYS

    @property
    def total_posts(self) -> int:
        return self.day_posts + self.night_posts + self.guard_posts


@dataclass(frozen=True)
class VacationSandwich:
    """Consecutive days off when one whole work block is taken as vacation"""
    prev: int
    vac: int
    post: int
    total: int
    factor: float


@dataclass(frozen=True)
class StaffingResult:
    """Minimum headcount and the constraint that determines it"""
    required_headcount: int
    limiting_factor: LimitingFactor
    min_staff_for_volume: float
    min_staff_for_nights: float
    effective_work_days: float
    effective_nights: float

    @property
    def is_achievable(self) -> bool:
        return self.limiting_factor is not LimitingFactor.UNACHIEVABLE


@dataclass(frozen=True)
class SolverOutput:
    vacation: VacationSandwich
    staffing: StaffingResult
    total_nights: int


def _sanitize_amount(value: Any) -> float:
    """Non-negative finite float, 0.0 for anything else"""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def _sanitize_policy(policy: CoveragePolicy) -> CoveragePolicy:
    backup_factor = _sanitize_amount(policy.backup_factor)
    return CoveragePolicy(
        day_posts=sanitize_count(policy.day_posts),
        night_posts=sanitize_count(policy.night_posts),
        guard_posts=sanitize_count(policy.guard_posts),
        vacation_shifts=_sanitize_amount(policy.vacation_shifts),
        backup_factor=backup_factor if backup_factor >= 1.0 else 1.0,
        calendar_days=sanitize_count(policy.calendar_days)
    )


def clamp_nights(nights_per_cycle: Any, work_days: int) -> int:
    """Nights per cycle limited to [0, work_days]"""
    nights = sanitize_count(nights_per_cycle)
    if nights > work_days:
        logger.warning(f"Nights per cycle ({nights}) exceed work days ({work_days}), clamping")
        return work_days
    return nights


def compute_vacation_sandwich(work_days: Any, rest_days: Any) -> VacationSandwich:
    """
    Days off obtained by requesting one full work block as vacation.

    The rest block before and the rest block after the vacation join it,
    e.g. a 6-3 rotation gives 3 + 6 + 3 = 12 days off for 6 days of leave.
    """
    vac = sanitize_count(work_days)
    prev = post = sanitize_count(rest_days)
    total = prev + vac + post
    factor = total / vac if vac > 0 else 0.0
    return VacationSandwich(prev=prev, vac=vac, post=post, total=total, factor=factor)


def compute_staffing(work_days: Any, nights_per_cycle: Any, cycle_length: Any,
                     policy: Optional[CoveragePolicy] = None) -> StaffingResult:
    """
    Compute the headcount needed to cover the posts of a coverage policy.

    Two constraints are evaluated: total shift volume and night shift volume.
    Each is the annual demand divided by what one person effectively works
    in a year after vacation, scaled by the backup factor. The larger one
    wins and is rounded up. A rotation without nights can never cover night
    posts; that case is reported as UNACHIEVABLE with a headcount of 0.
    """
    policy = _sanitize_policy(policy or CoveragePolicy())
    work_days = sanitize_count(work_days)
    nights = clamp_nights(nights_per_cycle, work_days)
    cycle_length = sanitize_count(cycle_length)
    days = policy.calendar_days

    # Annual demand in shifts
    demand_total_shifts = policy.total_posts * days
    demand_night_shifts = policy.night_posts * days

    # Per person capacity
    cycles_per_year = days / cycle_length if cycle_length > 0 else 0.0
    gross_work_days = cycles_per_year * work_days
    gross_nights = cycles_per_year * nights

    effective_work_days = max(0.0, gross_work_days - policy.vacation_shifts)
    # Vacation erodes nights in proportion to the share of nights among work days
    night_ratio = nights / work_days if work_days > 0 else 0.0
    effective_nights = max(0.0, gross_nights - policy.vacation_shifts * night_ratio)

    min_staff_for_volume = 0.0
    if effective_work_days > 0:
        min_staff_for_volume = demand_total_shifts / effective_work_days * policy.backup_factor

    if demand_night_shifts > 0 and (nights == 0 or effective_nights <= 0):
        logger.debug(f"Rotation with {nights} nights per cycle cannot cover night posts")
        return StaffingResult(
            required_headcount=0,
            limiting_factor=LimitingFactor.UNACHIEVABLE,
            min_staff_for_volume=min_staff_for_volume,
            min_staff_for_nights=0.0,
            effective_work_days=effective_work_days,
            effective_nights=effective_nights
        )

    min_staff_for_nights = 0.0
    if demand_night_shifts > 0:
        min_staff_for_nights = demand_night_shifts / effective_nights * policy.backup_factor

    if min_staff_for_nights > min_staff_for_volume:
        limiting_factor = LimitingFactor.NIGHT_COVERAGE
        required_headcount = math.ceil(min_staff_for_nights)
    else:
        limiting_factor = LimitingFactor.VOLUME
        required_headcount = math.ceil(min_staff_for_volume)

    return StaffingResult(
        required_headcount=required_headcount,
        limiting_factor=limiting_factor,
        min_staff_for_volume=min_staff_for_volume,
        min_staff_for_nights=min_staff_for_nights,
        effective_work_days=effective_work_days,
        effective_nights=effective_nights
    )


def estimate_total_nights(work_day_count: int, work_days: int, nights_per_cycle: int) -> int:
    """Nights worked over the generated calendar, assuming the night share of each block"""
    if work_days <= 0:
        return 0
    # round half up
    return int(math.floor(work_day_count * nights_per_cycle / work_days + 0.5))


def solve(config, work_day_count: int, cycle_length: int,
          policy: Optional[CoveragePolicy] = None) -> SolverOutput:
    """
    Run the vacation and staffing calculations for one rotation.

    Args:
        config: RotationConfig being analysed
        work_day_count: Work days in the generated calendar
        cycle_length: Days per rotation cycle
        policy: Coverage policy, defaults to CoveragePolicy()
    """
    work_days = sanitize_count(config.work_days)
    nights = clamp_nights(config.nights_per_cycle, work_days)

    vacation = compute_vacation_sandwich(work_days, config.rest_days)
    staffing = compute_staffing(work_days, nights, cycle_length, policy)
    total_nights = estimate_total_nights(sanitize_count(work_day_count), work_days, nights)

    logger.debug(
        f"Solved {work_days}-{sanitize_count(config.rest_days)}: headcount "
        f"{staffing.required_headcount} ({staffing.limiting_factor.value})"
    )
    return SolverOutput(vacation=vacation, staffing=staffing, total_nights=total_nights)
