"""Wearable-derived snapshots: workouts, HRV samples, sleep summaries."""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from .muscles import MuscleGroup


class WorkoutActivityType(str, Enum):
    """Wearable workout activity types the engines know about."""
    RUNNING = "running"
    WALKING = "walking"
    CYCLING = "cycling"
    SWIMMING = "swimming"
    HIKING = "hiking"
    ELLIPTICAL = "elliptical"
    ROWING = "rowing"
    STAIR_CLIMBING = "stairClimbing"
    JUMP_ROPE = "jumpRope"
    HAND_CYCLING = "handCycling"
    TRADITIONAL_STRENGTH_TRAINING = "traditionalStrengthTraining"
    FUNCTIONAL_STRENGTH_TRAINING = "functionalStrengthTraining"
    CORE_TRAINING = "coreTraining"
    HIGH_INTENSITY_INTERVAL_TRAINING = "highIntensityIntervalTraining"
    MIXED_CARDIO = "mixedCardio"
    CROSS_TRAINING = "crossTraining"
    YOGA = "yoga"
    PILATES = "pilates"
    FLEXIBILITY = "flexibility"
    DANCE = "dance"
    BOXING = "boxing"
    CLIMBING = "climbing"
    SOCCER = "soccer"
    BASKETBALL = "basketball"
    TENNIS = "tennis"
    CROSS_COUNTRY_SKIING = "crossCountrySkiing"
    DOWNHILL_SKIING = "downhillSkiing"
    PADDLE_SPORTS = "paddleSports"
    SWIM_BIKE_RUN = "swimBikeRun"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "WorkoutActivityType":
        """Map a raw type name to a member, falling back to OTHER."""
        if not raw:
            return cls.OTHER
        try:
            return cls(raw)
        except ValueError:
            return cls.OTHER

    @property
    def is_distance_based(self) -> bool:
        """Whether this activity primarily measures distance."""
        return self in _DISTANCE_BASED

    @property
    def muscle_targets(self) -> Tuple[Tuple[MuscleGroup, ...], Tuple[MuscleGroup, ...]]:
        """(primary, secondary) muscles worked; both empty when unmapped."""
        return _ACTIVITY_MUSCLES.get(self, ((), ()))


_DISTANCE_BASED = frozenset({
    WorkoutActivityType.RUNNING,
    WorkoutActivityType.WALKING,
    WorkoutActivityType.CYCLING,
    WorkoutActivityType.SWIMMING,
    WorkoutActivityType.HIKING,
    WorkoutActivityType.ELLIPTICAL,
    WorkoutActivityType.ROWING,
    WorkoutActivityType.HAND_CYCLING,
    WorkoutActivityType.CROSS_COUNTRY_SKIING,
    WorkoutActivityType.DOWNHILL_SKIING,
    WorkoutActivityType.PADDLE_SPORTS,
    WorkoutActivityType.SWIM_BIKE_RUN,
})

M = MuscleGroup

# Strength sessions recorded by the wearable carry no exercise detail, so
# they stay unmapped; the local strength log is the source for those.
_ACTIVITY_MUSCLES: Dict[WorkoutActivityType, Tuple[Tuple[MuscleGroup, ...], Tuple[MuscleGroup, ...]]] = {
    WorkoutActivityType.RUNNING: ((M.QUADRICEPS, M.HAMSTRINGS, M.CALVES, M.GLUTES), (M.CORE,)),
    WorkoutActivityType.WALKING: ((M.CALVES,), (M.QUADRICEPS, M.GLUTES)),
    WorkoutActivityType.CYCLING: ((M.QUADRICEPS, M.GLUTES), (M.HAMSTRINGS, M.CALVES)),
    WorkoutActivityType.SWIMMING: ((M.LATS, M.SHOULDERS, M.BACK), (M.CHEST, M.TRICEPS, M.CORE)),
    WorkoutActivityType.HIKING: ((M.QUADRICEPS, M.GLUTES, M.CALVES), (M.HAMSTRINGS, M.CORE)),
    WorkoutActivityType.ELLIPTICAL: ((M.QUADRICEPS, M.GLUTES), (M.HAMSTRINGS, M.CALVES)),
    WorkoutActivityType.ROWING: ((M.BACK, M.LATS), (M.BICEPS, M.QUADRICEPS, M.HAMSTRINGS, M.CORE)),
    WorkoutActivityType.STAIR_CLIMBING: ((M.QUADRICEPS, M.GLUTES, M.CALVES), (M.HAMSTRINGS,)),
    WorkoutActivityType.JUMP_ROPE: ((M.CALVES,), (M.QUADRICEPS, M.SHOULDERS)),
    WorkoutActivityType.HAND_CYCLING: ((M.SHOULDERS, M.TRICEPS), (M.BICEPS, M.CHEST)),
    WorkoutActivityType.CORE_TRAINING: ((M.CORE,), ()),
    WorkoutActivityType.HIGH_INTENSITY_INTERVAL_TRAINING: ((M.QUADRICEPS, M.GLUTES), (M.CORE, M.SHOULDERS)),
    WorkoutActivityType.CROSS_TRAINING: ((M.QUADRICEPS, M.GLUTES, M.CORE), (M.SHOULDERS,)),
    WorkoutActivityType.YOGA: ((M.CORE,), (M.HAMSTRINGS, M.SHOULDERS)),
    WorkoutActivityType.PILATES: ((M.CORE,), (M.GLUTES,)),
    WorkoutActivityType.DANCE: ((M.CALVES, M.QUADRICEPS), (M.GLUTES, M.CORE)),
    WorkoutActivityType.BOXING: ((M.SHOULDERS, M.CORE), (M.TRICEPS, M.BACK)),
    WorkoutActivityType.CLIMBING: ((M.FOREARMS, M.LATS, M.BACK), (M.BICEPS, M.CORE)),
    WorkoutActivityType.SOCCER: ((M.QUADRICEPS, M.HAMSTRINGS, M.CALVES), (M.GLUTES, M.CORE)),
    WorkoutActivityType.BASKETBALL: ((M.QUADRICEPS, M.CALVES), (M.GLUTES, M.CORE)),
    WorkoutActivityType.TENNIS: ((M.SHOULDERS, M.FOREARMS), (M.CORE, M.QUADRICEPS)),
    WorkoutActivityType.CROSS_COUNTRY_SKIING: ((M.QUADRICEPS, M.LATS), (M.TRICEPS, M.GLUTES, M.CORE)),
    WorkoutActivityType.DOWNHILL_SKIING: ((M.QUADRICEPS, M.GLUTES), (M.CORE, M.HAMSTRINGS)),
    WorkoutActivityType.PADDLE_SPORTS: ((M.BACK, M.LATS, M.SHOULDERS), (M.BICEPS, M.CORE)),
    WorkoutActivityType.SWIM_BIKE_RUN: ((M.QUADRICEPS, M.GLUTES, M.CALVES, M.HAMSTRINGS), (M.LATS, M.CORE)),
}

del M


@dataclass(frozen=True)
class WorkoutSummary:
    """
    Wearable workout summary.

    Units: duration in seconds, distance in meters, average pace in
    seconds per kilometer, elevation in meters.
    """
    id: str
    activity_type: WorkoutActivityType
    date: datetime
    duration: float
    distance: Optional[float] = None
    calories: Optional[float] = None
    average_pace: Optional[float] = None
    elevation_ascended: Optional[float] = None
    heart_rate_avg: Optional[float] = None
    heart_rate_max: Optional[float] = None
    effort_score: Optional[float] = None   # 1-10, wearable estimate or user rating
    rpe: Optional[int] = None              # user-entered perceived exertion
    is_from_this_app: bool = False

    @property
    def duration_minutes(self) -> float:
        return self.duration / 60.0

    @property
    def pace_seconds_per_km(self) -> Optional[float]:
        """
        Reported pace, or pace derived from duration and distance.

        A zero distance with a recorded duration yields infinity so the
        value is rejected downstream rather than silently dropped.
        """
        if self.average_pace is not None:
            return self.average_pace
        if self.distance is None:
            return None
        if self.distance <= 0:
            return math.inf
        return self.duration / (self.distance / 1000.0)


@dataclass(frozen=True)
class HRVSample:
    """Single heart-rate-variability reading (SDNN/RMSSD, ms)."""
    value: float
    date: datetime


@dataclass(frozen=True)
class SleepSummary:
    """Last night's sleep, already aggregated from stage intervals."""
    date: date
    total_minutes: Optional[float] = None
    deep_ratio: Optional[float] = None
    rem_ratio: Optional[float] = None
    stage_minutes: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "total_minutes": self.total_minutes,
            "deep_ratio": self.deep_ratio,
            "rem_ratio": self.rem_ratio,
            "stage_minutes": dict(self.stage_minutes),
        }

    @classmethod
    def from_stages(cls, day: date, intervals) -> "SleepSummary":
        """
        Aggregate stage intervals into totals and deep/REM ratios.

        Awake and in-bed time does not count as sleep.
        """
        minutes: Dict[str, float] = {}
        for interval in intervals:
            length = interval.minutes
            if not math.isfinite(length) or length <= 0:
                continue
            minutes[interval.stage.value] = minutes.get(interval.stage.value, 0.0) + length

        asleep = sum(v for k, v in minutes.items() if k not in _NOT_ASLEEP)
        if asleep <= 0:
            return cls(date=day, stage_minutes=minutes)

        return cls(
            date=day,
            total_minutes=asleep,
            deep_ratio=minutes.get(SleepStage.DEEP.value, 0.0) / asleep,
            rem_ratio=minutes.get(SleepStage.REM.value, 0.0) / asleep,
            stage_minutes=minutes,
        )


class SleepStage(str, Enum):
    """Sleep stages reported by the wearable."""
    IN_BED = "inBed"
    AWAKE = "awake"
    CORE = "core"
    DEEP = "deep"
    REM = "rem"
    UNSPECIFIED = "unspecified"


_NOT_ASLEEP = frozenset({SleepStage.IN_BED.value, SleepStage.AWAKE.value})


@dataclass(frozen=True)
class SleepStageInterval:
    """One contiguous interval spent in a sleep stage."""
    stage: SleepStage
    start: datetime
    end: datetime

    @property
    def minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60.0
