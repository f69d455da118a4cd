"""
Service module for building the calendar month view.

Each day of the month gets the predictor flags plus a single display state,
resolved with the precedence period > predicted > fertile.

Typical usage:
    month = build_month(2024, 1, profile, period_logs)
    for day in month.days:
        print(day.date, day.display_state)
"""
import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from src.models.period import PeriodInterval
from src.models.profile import CycleProfile
from src.services.predictor import (
    is_period_day,
    is_predicted_period,
    is_fertile_window,
    next_period_date,
    days_until_next_period
)


@dataclass
class CalendarDay:
    """Prediction flags for one calendar day."""
    date: date
    is_today: bool = False
    is_period: bool = False
    is_predicted: bool = False
    is_fertile: bool = False

    @property
    def display_state(self) -> str:
        if self.is_period:
            return "period"
        if self.is_predicted:
            return "predicted"
        if self.is_fertile:
            return "fertile"
        return "none"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "is_today": self.is_today,
            "is_period": self.is_period,
            "is_predicted": self.is_predicted,
            "is_fertile": self.is_fertile,
            "display_state": self.display_state
        }


@dataclass
class CalendarMonth:
    """A month grid with the next-period countdown."""
    year: int
    month: int
    leading_blanks: int
    days: List[CalendarDay] = field(default_factory=list)
    next_period_date: Optional[date] = None
    days_until_next_period: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "leading_blanks": self.leading_blanks,
            "days": [day.to_dict() for day in self.days],
            "next_period_date": self.next_period_date.isoformat() if self.next_period_date else None,
            "days_until_next_period": self.days_until_next_period
        }


def first_weekday_sunday_based(year: int, month: int) -> int:
    """Weekday of the first of the month with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


def build_month(
    year: int,
    month: int,
    profile: Optional[CycleProfile],
    period_logs: Sequence[PeriodInterval] = (),
    today: Optional[date] = None
) -> CalendarMonth:
    """
    Build the month view for the calendar screen.

    Args:
        year: Calendar year
        month: Calendar month (1-12)
        profile: User's cycle profile, None before onboarding
        period_logs: Logged period intervals
        today: Reference date, defaults to the current date

    Returns:
        CalendarMonth with one CalendarDay per day of the month

    Raises:
        ValueError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")
    if today is None:
        today = date.today()

    _, days_in_month = calendar.monthrange(year, month)
    result = CalendarMonth(
        year=year,
        month=month,
        leading_blanks=first_weekday_sunday_based(year, month),
        next_period_date=next_period_date(profile, today),
        days_until_next_period=days_until_next_period(profile, today)
    )

    for day_number in range(1, days_in_month + 1):
        current = date(year, month, day_number)
        result.days.append(CalendarDay(
            date=current,
            is_today=current == today,
            is_period=bool(is_period_day(current, profile, period_logs)),
            is_predicted=bool(is_predicted_period(current, profile, today)),
            is_fertile=bool(is_fertile_window(current, profile))
        ))

    return result
