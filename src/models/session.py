"""
Per-request session context.
"""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from src.models.profile import CycleProfile


@dataclass
class SessionContext:
    """
    Explicit state for one request, built by the handler and passed down.

    Attributes:
        user_id: Authenticated user identifier
        profile: The user's cycle profile, None until onboarding is done
        today: Reference date for predictions
    """
    user_id: str
    profile: Optional[CycleProfile] = None
    today: date = field(default_factory=date.today)

    @property
    def onboarding_complete(self) -> bool:
        return self.profile is not None
