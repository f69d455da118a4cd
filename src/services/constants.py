"""
Constants and shared data for cycle-related services.
"""
from typing import List

# Fixed heuristics, not derived from the profile
FERTILE_WINDOW_START_DAY = 10
FERTILE_WINDOW_END_DAY = 17
OVULATION_OFFSET_DAYS = 14

# Phase boundaries as zero-based day in cycle
OVULATION_PHASE_START_DAY = 14
LUTEAL_PHASE_START_DAY = 17

KNOWN_SYMPTOMS: List[str] = [
    "cramps",
    "headache",
    "bloating",
    "fatigue",
    "breast_tenderness",
    "acne",
    "cravings",
    "back_pain",
]

COMMON_SYMPTOMS_LIMIT = 5
