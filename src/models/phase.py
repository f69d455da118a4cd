"""
Phase model definition for menstrual cycle phases.
"""
from enum import Enum


class CyclePhase(str, Enum):
    """
    Menstrual cycle phases as shown on the statistics screen.
    """
    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATION = "ovulation"
    LUTEAL = "luteal"

    @property
    def label(self) -> str:
        """Human readable phase name."""
        return self.value.title()

    @property
    def description(self) -> str:
        """Short guidance text for the phase."""
        return PHASE_DESCRIPTIONS[self]


PHASE_DESCRIPTIONS = {
    CyclePhase.MENSTRUAL: "Your period is here. Focus on rest and taking care of yourself.",
    CyclePhase.FOLLICULAR: "Energy levels are rising. A good time to start new projects.",
    CyclePhase.OVULATION: "Peak of the fertile window. You may feel more energetic.",
    CyclePhase.LUTEAL: "Energy may dip. Listen to what your body needs.",
}
