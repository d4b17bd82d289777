"""Exercise catalog entries, local exercise logs and normalized events."""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import FrozenSet, Optional, Tuple

from .muscles import Equipment, ExerciseCategory, ExerciseInputType, MuscleGroup


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    One entry of the exercise catalog.

    Read-only reference data: the catalog is owned by the exercise library,
    the engines only look definitions up.
    """
    id: str
    name: str
    category: ExerciseCategory
    primary_muscles: Tuple[MuscleGroup, ...]
    secondary_muscles: Tuple[MuscleGroup, ...] = ()
    equipment: Equipment = Equipment.OTHER
    met_value: float = 3.5
    input_type: ExerciseInputType = ExerciseInputType.SETS_REPS_WEIGHT
    localized_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.localized_name or self.name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "localized_name": self.localized_name,
            "category": self.category.value,
            "input_type": self.input_type.value,
            "primary_muscles": [m.value for m in self.primary_muscles],
            "secondary_muscles": [m.value for m in self.secondary_muscles],
            "equipment": self.equipment.value,
            "met_value": self.met_value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseDefinition":
        return cls(
            id=data["id"],
            name=data["name"],
            localized_name=data.get("localized_name") or data.get("localizedName"),
            category=ExerciseCategory(data["category"]),
            input_type=ExerciseInputType(
                data.get("input_type") or data.get("inputType") or ExerciseInputType.SETS_REPS_WEIGHT.value
            ),
            primary_muscles=tuple(
                MuscleGroup(m) for m in data.get("primary_muscles", data.get("primaryMuscles", []))
            ),
            secondary_muscles=tuple(
                MuscleGroup(m) for m in data.get("secondary_muscles", data.get("secondaryMuscles", []))
            ),
            equipment=Equipment(data.get("equipment", Equipment.OTHER.value)),
            met_value=float(data.get("met_value", data.get("metValue", 3.5))),
        )


@dataclass(frozen=True)
class CompletedSet:
    """A single logged set."""
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    duration_seconds: Optional[float] = None
    is_completed: bool = True


@dataclass(frozen=True)
class ExerciseRecordSnapshot:
    """
    Point-in-time copy of a locally logged exercise record.

    Muscle lists may be empty for records written before muscle annotation
    existed; the normalizer backfills them from the exercise library.
    """
    id: str
    date: datetime
    exercise_definition_id: Optional[str] = None
    exercise_name: Optional[str] = None
    primary_muscles: Tuple[MuscleGroup, ...] = ()
    secondary_muscles: Tuple[MuscleGroup, ...] = ()
    sets: Tuple[CompletedSet, ...] = ()
    duration_minutes: Optional[float] = None  # cardio-style logs
    distance_km: Optional[float] = None
    is_from_health_kit: bool = False           # mirrored wearable workout

    @property
    def completed_set_count(self) -> int:
        return sum(1 for s in self.sets if s.is_completed)

    @property
    def total_volume_kg(self) -> float:
        """Sum of weight x reps over completed sets."""
        total = 0.0
        for s in self.sets:
            if s.is_completed and s.weight_kg and s.reps:
                total += s.weight_kg * s.reps
        return total


@dataclass(frozen=True)
class MuscleTargets:
    """Primary and secondary muscle attribution of one event."""
    primary: FrozenSet[MuscleGroup] = frozenset()
    secondary: FrozenSet[MuscleGroup] = frozenset()

    @property
    def is_empty(self) -> bool:
        return not self.primary and not self.secondary

    @property
    def all(self) -> FrozenSet[MuscleGroup]:
        return self.primary | self.secondary

    def engagement(self, muscle: MuscleGroup) -> Optional[str]:
        """Return 'primary', 'secondary' or None for a muscle."""
        if muscle in self.primary:
            return "primary"
        if muscle in self.secondary:
            return "secondary"
        return None

    @classmethod
    def of(cls, primary=(), secondary=()) -> "MuscleTargets":
        primary_set = frozenset(primary)
        # A muscle listed as both counts as primary only.
        return cls(primary=primary_set, secondary=frozenset(secondary) - primary_set)


class EventSource:
    """Origin labels for normalized events."""
    LOCAL = "local"
    WEARABLE = "wearable"


@dataclass(frozen=True)
class ExerciseEvent:
    """
    Normalized unit of training history.

    Built fresh from snapshots on every recompute; never persisted.
    """
    date: datetime
    muscle_groups: MuscleTargets
    set_count: int = 0
    duration_minutes: Optional[float] = None
    distance_km: Optional[float] = None
    source: str = EventSource.LOCAL
    source_id: Optional[str] = None
    label: Optional[str] = None  # exercise or activity name

    def __post_init__(self):
        if self.set_count < 0:
            object.__setattr__(self, "set_count", 0)
        if not _is_valid_amount(self.duration_minutes):
            object.__setattr__(self, "duration_minutes", None)
        if not _is_valid_amount(self.distance_km):
            object.__setattr__(self, "distance_km", None)

    @property
    def is_attributed(self) -> bool:
        """Whether the event can feed per-muscle fatigue."""
        return not self.muscle_groups.is_empty

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "primary_muscles": sorted(m.value for m in self.muscle_groups.primary),
            "secondary_muscles": sorted(m.value for m in self.muscle_groups.secondary),
            "set_count": self.set_count,
            "duration_minutes": self.duration_minutes,
            "distance_km": self.distance_km,
            "source": self.source,
            "source_id": self.source_id,
            "label": self.label,
        }


def _is_valid_amount(value: Optional[float]) -> bool:
    return value is None or (math.isfinite(value) and value >= 0)
