"""
Statistics calculation service for symptom logs and cycle predictions.

This module aggregates logged symptoms and moods and combines them with the
predictor output into the summary shown on the statistics screen.
"""
from collections import Counter
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from aws_lambda_powertools import Logger

from src.models.profile import CycleProfile
from src.models.symptom import Mood, SymptomEntry
from src.services.constants import COMMON_SYMPTOMS_LIMIT
from src.services.predictor import (
    current_phase,
    next_period_date,
    ovulation_date,
    days_until_next_period
)
from src.utils.logging import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)


def most_common_symptoms(
    entries: Sequence[SymptomEntry],
    limit: int = COMMON_SYMPTOMS_LIMIT
) -> List[Tuple[str, int]]:
    """
    Count symptom tags across entries.

    Args:
        entries: Symptom logs to analyze
        limit: Maximum number of symptoms to return

    Returns:
        List of (symptom, count) ordered by count, most frequent first.
        Ties keep the order in which symptoms were first seen.
    """
    counts = Counter()
    for entry in entries:
        counts.update(sorted(entry.symptoms))
    return counts.most_common(limit)


def most_common_mood(entries: Sequence[SymptomEntry]) -> Optional[Mood]:
    """Most frequently logged mood, or None when no mood was logged."""
    counts = Counter(entry.mood for entry in entries if entry.mood is not None)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def format_symptom_name(symptom: str) -> str:
    """Turn a symptom tag like 'back_pain' into 'Back Pain'."""
    return " ".join(word[:1].upper() + word[1:] for word in symptom.split("_"))


def build_cycle_summary(
    profile: Optional[CycleProfile],
    entries: Sequence[SymptomEntry],
    today: Optional[date] = None
) -> Dict[str, Any]:
    """
    Build the statistics screen summary.

    Args:
        profile: User's cycle profile, None before onboarding
        entries: Symptom logs
        today: Reference date, defaults to the current date

    Returns:
        Dictionary containing:
        - current_phase / phase_description: Phase for today ("unknown" without profile)
        - next_period_date, ovulation_date, days_until_next_period: Predictions
        - cycle_length, period_length: Profile values
        - common_symptoms: Top symptoms with display names and counts
        - common_mood: Most frequent mood
        - entries_logged: Number of symptom logs
    """
    if today is None:
        today = date.today()

    phase = current_phase(profile, today)
    next_date = next_period_date(profile, today)
    ovulation = ovulation_date(profile, today)
    mood = most_common_mood(entries)

    summary = {
        "current_phase": phase.value if phase else "unknown",
        "phase_description": phase.description if phase else "",
        "next_period_date": next_date.isoformat() if next_date else None,
        "ovulation_date": ovulation.isoformat() if ovulation else None,
        "days_until_next_period": days_until_next_period(profile, today),
        "cycle_length": profile.cycle_length if profile else None,
        "period_length": profile.period_length if profile else None,
        "common_symptoms": [
            {"symptom": symptom, "name": format_symptom_name(symptom), "count": count}
            for symptom, count in most_common_symptoms(entries)
        ],
        "common_mood": mood.value if mood else None,
        "entries_logged": len(entries)
    }

    logger.debug("Cycle summary built", extra={
        "current_phase": summary["current_phase"],
        "entries_logged": summary["entries_logged"]
    })
    return summary
