"""
Symptom log model definition.
"""
from datetime import date
from enum import Enum
from typing import FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FlowLevel(str, Enum):
    """Menstrual flow intensity."""
    SPOTTING = "spotting"
    LIGHT = "light"
    MEDIUM = "medium"
    HEAVY = "heavy"


class Mood(str, Enum):
    """Self-reported mood."""
    HAPPY = "happy"
    NEUTRAL = "neutral"
    SAD = "sad"
    ANXIOUS = "anxious"
    IRRITABLE = "irritable"


class SymptomEntry(BaseModel):
    """
    A single day's symptom log.

    Several entries may exist for the same date; each save is kept.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    date: date
    flow: Optional[FlowLevel] = None
    mood: Optional[Mood] = None
    symptoms: FrozenSet[str] = Field(default_factory=frozenset)
    notes: Optional[str] = None

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None
