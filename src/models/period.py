"""
Logged menstrual period model.
"""
from datetime import date, timedelta
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PeriodInterval(BaseModel):
    """
    One logged menstrual episode.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    symptoms: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_end_after_start(self) -> "PeriodInterval":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")
        return self

    def effective_end(self, period_length: int) -> date:
        """Return the logged end date, or start_date + period_length when open."""
        if self.end_date is not None:
            return self.end_date
        return self.start_date + timedelta(days=period_length)

    def contains(self, target_date: date, period_length: int) -> bool:
        """Check whether target_date falls within the inclusive interval."""
        return self.start_date <= target_date <= self.effective_end(period_length)
