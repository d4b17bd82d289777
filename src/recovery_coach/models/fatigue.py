"""Muscle fatigue data model."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional, Tuple

from .muscles import MuscleGroup


class FatigueLevel(IntEnum):
    """
    Ten-step muscle fatigue scale.

    Level 0 means no training in the window; 1 is fully recovered and 10
    overtrained.
    """
    NO_DATA = 0
    FULLY_RECOVERED = 1
    WELL_RESTED = 2
    LIGHT_FATIGUE = 3
    MILD_FATIGUE = 4
    MODERATE_FATIGUE = 5
    NOTABLE_FATIGUE = 6
    HIGH_FATIGUE = 7
    VERY_HIGH_FATIGUE = 8
    EXTREME_FATIGUE = 9
    OVERTRAINED = 10

    @classmethod
    def from_score(cls, score: float) -> "FatigueLevel":
        """
        Map a raw stimulus score (decayed set-equivalents) to a level.

        Non-finite or negative scores map to NO_DATA.
        """
        if not math.isfinite(score) or score < 0:
            return cls.NO_DATA
        for upper, level in FATIGUE_THRESHOLDS:
            if score < upper:
                return level
        return cls.OVERTRAINED

    @property
    def is_training_recommended(self) -> bool:
        return self <= FatigueLevel.MILD_FATIGUE

    @property
    def is_rest_advised(self) -> bool:
        return self >= FatigueLevel.VERY_HIGH_FATIGUE

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title()


# Exclusive upper bound of each level; anything above the last bound is
# OVERTRAINED.
FATIGUE_THRESHOLDS: Tuple[Tuple[float, FatigueLevel], ...] = (
    (0.5, FatigueLevel.FULLY_RECOVERED),
    (1.5, FatigueLevel.WELL_RESTED),
    (3.0, FatigueLevel.LIGHT_FATIGUE),
    (5.0, FatigueLevel.MILD_FATIGUE),
    (7.5, FatigueLevel.MODERATE_FATIGUE),
    (10.0, FatigueLevel.NOTABLE_FATIGUE),
    (13.0, FatigueLevel.HIGH_FATIGUE),
    (16.0, FatigueLevel.VERY_HIGH_FATIGUE),
    (20.0, FatigueLevel.EXTREME_FATIGUE),
)


@dataclass(frozen=True)
class RecoveryModifiers:
    """
    Multiplicative recovery scalars, 1.0 = neutral.

    Values above 1.0 speed up fatigue decay, values below slow it down.
    """
    sleep_modifier: float = 1.0
    readiness_modifier: float = 1.0

    @property
    def combined(self) -> float:
        return self.sleep_modifier * self.readiness_modifier

    def to_dict(self) -> dict:
        return {
            "sleep_modifier": round(self.sleep_modifier, 3),
            "readiness_modifier": round(self.readiness_modifier, 3),
        }


@dataclass(frozen=True)
class WorkoutContribution:
    """One event's share of a muscle's fatigue."""
    date: datetime
    label: Optional[str]
    engagement: str          # "primary" | "secondary"
    raw_load: float          # set-equivalents before decay
    decayed_load: float

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "label": self.label,
            "engagement": self.engagement,
            "raw_load": round(self.raw_load, 2),
            "decayed_load": round(self.decayed_load, 3),
        }


@dataclass(frozen=True)
class FatigueBreakdown:
    """How a muscle's score was reached, newest contribution first."""
    contributions: Tuple[WorkoutContribution, ...] = ()
    effective_half_life_hours: float = 0.0
    modifiers: RecoveryModifiers = field(default_factory=RecoveryModifiers)

    def to_dict(self) -> dict:
        return {
            "contributions": [c.to_dict() for c in self.contributions],
            "effective_half_life_hours": round(self.effective_half_life_hours, 2),
            "modifiers": self.modifiers.to_dict(),
        }


@dataclass(frozen=True)
class MuscleFatigueState:
    """Fatigue snapshot for one muscle group, recomputed from scratch."""
    muscle: MuscleGroup
    level: FatigueLevel
    raw_score: float
    last_trained_date: Optional[datetime] = None
    weekly_volume: float = 0.0
    breakdown: FatigueBreakdown = field(default_factory=FatigueBreakdown)

    @property
    def has_data(self) -> bool:
        return self.level is not FatigueLevel.NO_DATA

    def hours_since_trained(self, as_of: datetime) -> Optional[float]:
        if self.last_trained_date is None:
            return None
        return max(0.0, (as_of - self.last_trained_date).total_seconds() / 3600.0)

    def to_dict(self) -> dict:
        return {
            "muscle": self.muscle.value,
            "level": int(self.level),
            "level_name": self.level.label,
            "raw_score": round(self.raw_score, 3),
            "last_trained_date": self.last_trained_date.isoformat() if self.last_trained_date else None,
            "weekly_volume": self.weekly_volume,
            "breakdown": self.breakdown.to_dict(),
        }
