"""Training load data model."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class LoadSource(str, Enum):
    """Where a workout's load value came from (chosen by priority)."""
    EFFORT = "effort"   # wearable effort score
    RPE = "rpe"         # user-entered perceived exertion
    TRIMP = "trimp"     # heart-rate-reserve based impulse


@dataclass(frozen=True)
class TrainingLoad:
    """Load contribution of a single workout."""
    value: float
    source: LoadSource

    def to_dict(self) -> dict:
        return {"value": round(self.value, 2), "source": self.source.value}


@dataclass(frozen=True)
class DailyTrainingLoad:
    """
    Summed load for one calendar day.

    ``source`` is the source of the first qualifying workout of the day;
    ``None`` on gap-filled days without workouts.
    """
    date: date
    load: float
    source: Optional[LoadSource] = None
    workout_count: int = 0

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "load": round(self.load, 2),
            "source": self.source.value if self.source else None,
            "workout_count": self.workout_count,
        }
