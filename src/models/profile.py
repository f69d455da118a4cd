"""
Cycle profile model created during onboarding.
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_CYCLE_LENGTH = 21
MAX_CYCLE_LENGTH = 35
MIN_PERIOD_LENGTH = 2
MAX_PERIOD_LENGTH = 10


class CycleProfile(BaseModel):
    """
    A user's declared cycle parameters.

    The profile is the anchor for every prediction: the predictor assumes a
    validated instance, so range checks and the period/cycle invariant are
    enforced here rather than in the calculations.
    """
    model_config = ConfigDict(frozen=True)

    cycle_length: int = Field(..., ge=MIN_CYCLE_LENGTH, le=MAX_CYCLE_LENGTH)
    period_length: int = Field(..., ge=MIN_PERIOD_LENGTH, le=MAX_PERIOD_LENGTH)
    last_period_start: date
    setup_date: Optional[date] = None

    @model_validator(mode="after")
    def check_period_shorter_than_cycle(self) -> "CycleProfile":
        if self.period_length >= self.cycle_length:
            raise ValueError("period_length must be shorter than cycle_length")
        return self
