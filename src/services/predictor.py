"""
Cycle prediction calculator.

Pure date arithmetic over a user's cycle profile: period days, predicted
periods, fertile window, current phase and the next expected period. Every
function returns None when the profile is unknown so callers can render an
unknown state instead of handling an exception.

Typical usage:
    profile = repository.get_profile(user_id)
    phase = current_phase(profile)
    days_left = days_until_next_period(profile)
"""
from datetime import date, timedelta
from typing import Iterable, Optional

from src.models.period import PeriodInterval
from src.models.phase import CyclePhase
from src.models.profile import CycleProfile
from src.services.constants import (
    FERTILE_WINDOW_START_DAY,
    FERTILE_WINDOW_END_DAY,
    OVULATION_OFFSET_DAYS,
    OVULATION_PHASE_START_DAY,
    LUTEAL_PHASE_START_DAY
)


def day_in_cycle(target_date: date, profile: Optional[CycleProfile]) -> Optional[int]:
    """
    Zero-based position of target_date within its cycle.

    Python's % is floored, so dates before last_period_start still map
    into [0, cycle_length).
    """
    if profile is None:
        return None
    days_since = (target_date - profile.last_period_start).days
    return days_since % profile.cycle_length


def is_period_day(
    target_date: date,
    profile: Optional[CycleProfile],
    period_logs: Iterable[PeriodInterval] = ()
) -> Optional[bool]:
    """
    Check whether target_date is a known period day.

    A date counts if it falls inside any logged interval or inside the
    period declared at onboarding, both ranges inclusive of their end.

    Args:
        target_date: Date to check
        profile: User's cycle profile
        period_logs: Logged period intervals

    Returns:
        True/False, or None when the profile is unknown
    """
    if profile is None:
        return None

    for log in period_logs:
        if log.contains(target_date, profile.period_length):
            return True

    declared_end = profile.last_period_start + timedelta(days=profile.period_length)
    return profile.last_period_start <= target_date <= declared_end


def is_predicted_period(
    target_date: date,
    profile: Optional[CycleProfile],
    today: Optional[date] = None
) -> Optional[bool]:
    """Check whether a future date falls on a predicted period day."""
    if profile is None:
        return None
    if today is None:
        today = date.today()
    if target_date <= today:
        return False
    return day_in_cycle(target_date, profile) < profile.period_length


def is_fertile_window(target_date: date, profile: Optional[CycleProfile]) -> Optional[bool]:
    """Check whether target_date is within the fixed day 10-17 fertile window."""
    if profile is None:
        return None
    day = day_in_cycle(target_date, profile)
    return FERTILE_WINDOW_START_DAY <= day <= FERTILE_WINDOW_END_DAY


def next_period_date(
    profile: Optional[CycleProfile],
    today: Optional[date] = None
) -> Optional[date]:
    """
    First predicted period start strictly after today.

    Equivalent to adding cycle_length to last_period_start until the
    result passes today. An anchor already in the future is returned as is.

    Example:
        >>> profile = CycleProfile(cycle_length=28, period_length=5,
        ...                        last_period_start=date(2024, 1, 1))
        >>> next_period_date(profile, date(2024, 1, 20))
        datetime.date(2024, 1, 29)
    """
    if profile is None:
        return None
    if today is None:
        today = date.today()

    elapsed = (today - profile.last_period_start).days
    if elapsed < 0:
        return profile.last_period_start
    cycles_elapsed = elapsed // profile.cycle_length + 1
    return profile.last_period_start + timedelta(days=cycles_elapsed * profile.cycle_length)


def days_until_next_period(
    profile: Optional[CycleProfile],
    today: Optional[date] = None
) -> Optional[int]:
    """Whole days from today to the next predicted period."""
    if profile is None:
        return None
    if today is None:
        today = date.today()
    return (next_period_date(profile, today) - today).days


def ovulation_date(
    profile: Optional[CycleProfile],
    today: Optional[date] = None
) -> Optional[date]:
    """
    Estimated ovulation: 14 days before the next predicted period.

    This offset is independent of the fertile window bounds, so for short
    or long cycles the estimate can land outside days 10-17.
    """
    next_date = next_period_date(profile, today)
    if next_date is None:
        return None
    return next_date - timedelta(days=OVULATION_OFFSET_DAYS)


def phase_for_day(day: int, period_length: int) -> CyclePhase:
    """
    Map a zero-based day in cycle to its phase.

    Args:
        day: Day in cycle, 0 <= day < cycle_length
        period_length: Declared period length

    Returns:
        The phase containing that day
    """
    if day < period_length:
        return CyclePhase.MENSTRUAL
    elif day < OVULATION_PHASE_START_DAY:
        return CyclePhase.FOLLICULAR
    elif day < LUTEAL_PHASE_START_DAY:
        return CyclePhase.OVULATION
    return CyclePhase.LUTEAL


def current_phase(
    profile: Optional[CycleProfile],
    today: Optional[date] = None
) -> Optional[CyclePhase]:
    """Phase of the cycle that today falls in."""
    if profile is None:
        return None
    if today is None:
        today = date.today()
    return phase_for_day(day_in_cycle(today, profile), profile.period_length)
