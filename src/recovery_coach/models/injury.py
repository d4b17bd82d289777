"""Injury history data model."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Optional, Tuple

from .muscles import BodyPart, BodySide, MuscleGroup


class InjurySeverity(IntEnum):
    """Three-step injury severity."""
    MINOR = 1      # train with caution
    MODERATE = 2   # avoid the affected area
    SEVERE = 3     # no exercise for the affected area


@dataclass(frozen=True)
class InjuryInfo:
    """Injury snapshot; an injury without ``end_date`` is still active."""
    id: str
    body_part: BodyPart
    severity: InjurySeverity
    start_date: datetime
    end_date: Optional[datetime] = None
    body_side: Optional[BodySide] = None
    memo: str = ""

    @property
    def is_active(self) -> bool:
        return self.end_date is None

    def duration_days(self, as_of: datetime) -> int:
        """Whole days from start to end (or to ``as_of`` while active)."""
        end = self.end_date or as_of
        return max(0, (end - self.start_date).days)

    @property
    def affected_muscle_groups(self) -> Tuple[MuscleGroup, ...]:
        return self.body_part.affected_muscle_groups


@dataclass(frozen=True)
class BodyPartFrequency:
    body_part: BodyPart
    count: int


@dataclass(frozen=True)
class InjuryStatistics:
    """Aggregate view over an injury history."""
    total_count: int
    active_count: int
    frequency_by_body_part: Tuple[BodyPartFrequency, ...] = ()
    average_recovery_days: Optional[float] = None  # ended injuries only
    longest_recovery_days: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "total_count": self.total_count,
            "active_count": self.active_count,
            "frequency_by_body_part": [
                {"body_part": f.body_part.value, "count": f.count}
                for f in self.frequency_by_body_part
            ],
            "average_recovery_days": self.average_recovery_days,
            "longest_recovery_days": self.longest_recovery_days,
        }


@dataclass(frozen=True)
class InjuryVolumeComparison:
    """Distinct training days before, during and after one injury."""
    injury_id: str
    body_part: BodyPart
    severity: InjurySeverity
    pre_injury_count: int
    during_injury_count: int
    post_injury_count: Optional[int] = None  # None while the injury is active

    def to_dict(self) -> dict:
        return {
            "injury_id": self.injury_id,
            "body_part": self.body_part.value,
            "severity": int(self.severity),
            "pre_injury_count": self.pre_injury_count,
            "during_injury_count": self.during_injury_count,
            "post_injury_count": self.post_injury_count,
        }


@dataclass(frozen=True)
class InjuryConflict:
    """An active injury overlapping the muscles of an exercise."""
    injury: InjuryInfo
    conflicting_muscles: Tuple[MuscleGroup, ...] = field(default_factory=tuple)

    @property
    def severity(self) -> InjurySeverity:
        return self.injury.severity
