"""
Lambda handlers package for AWS Lambda functions.
"""
from .calendar import handler as calendar_handler
from .onboarding import handler as onboarding_handler
from .periods import handler as periods_handler
from .settings import handler as settings_handler
from .statistics import handler as statistics_handler
from .symptoms import handler as symptoms_handler

__all__ = [
    "calendar_handler",
    "onboarding_handler",
    "periods_handler",
    "settings_handler",
    "statistics_handler",
    "symptoms_handler"
]
