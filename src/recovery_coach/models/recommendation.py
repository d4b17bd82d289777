"""Workout suggestion data model."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from .exercise import ExerciseDefinition
from .muscles import MuscleGroup


class SuggestionRationale(str, Enum):
    """Why a suggestion looks the way it does."""
    RECOVERED_MUSCLES = "recovered_muscles"          # focus muscles have recovered
    NO_TRAINING_HISTORY = "no_training_history"      # nothing logged in the window
    ALL_MUSCLES_FATIGUED = "all_muscles_fatigued"    # rest day
    NO_MATCHING_EXERCISES = "no_matching_exercises"  # library has nothing to offer


@dataclass(frozen=True)
class ActiveRecoverySuggestion:
    """Light activity proposed on rest days."""
    id: str
    title: str
    duration: str

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title, "duration": self.duration}


DEFAULT_ACTIVE_RECOVERY: Tuple[ActiveRecoverySuggestion, ...] = (
    ActiveRecoverySuggestion(id="walking", title="Light Walking", duration="20-30 min"),
    ActiveRecoverySuggestion(id="stretching", title="Stretching", duration="10 min"),
    ActiveRecoverySuggestion(id="yoga", title="Yoga Flow", duration="15 min"),
)


@dataclass(frozen=True)
class SuggestedExercise:
    """One recommended exercise with its prescription."""
    definition: ExerciseDefinition
    suggested_sets: int
    target_muscle: MuscleGroup
    reason: str
    alternatives: Tuple[ExerciseDefinition, ...] = ()

    @property
    def id(self) -> str:
        return self.definition.id

    def to_dict(self) -> dict:
        return {
            "id": self.definition.id,
            "name": self.definition.display_name,
            "suggested_sets": self.suggested_sets,
            "target_muscle": self.target_muscle.value,
            "reason": self.reason,
            "alternatives": [a.id for a in self.alternatives],
        }


@dataclass(frozen=True)
class NextReadyMuscle:
    """The muscle group expected to become trainable first."""
    muscle: MuscleGroup
    ready_date: datetime


@dataclass(frozen=True)
class WorkoutSuggestion:
    """
    Recommendation result.

    An empty ``exercises`` tuple means "no suggestion available", never a
    failure.
    """
    exercises: Tuple[SuggestedExercise, ...]
    targeted_muscles: FrozenSet[MuscleGroup]
    rationale: SuggestionRationale
    focus_order: Tuple[MuscleGroup, ...] = ()
    active_recovery: Tuple[ActiveRecoverySuggestion, ...] = ()
    next_ready: Optional[NextReadyMuscle] = None

    @property
    def is_empty(self) -> bool:
        return not self.exercises

    @property
    def is_rest_day(self) -> bool:
        return self.rationale is SuggestionRationale.ALL_MUSCLES_FATIGUED

    @property
    def definitions(self) -> Tuple[ExerciseDefinition, ...]:
        return tuple(e.definition for e in self.exercises)

    def to_dict(self) -> dict:
        return {
            "exercises": [e.to_dict() for e in self.exercises],
            "targeted_muscles": [m.value for m in sorted(self.targeted_muscles, key=lambda m: m.order)],
            "focus_order": [m.value for m in self.focus_order],
            "rationale": self.rationale.value,
            "active_recovery": [a.to_dict() for a in self.active_recovery],
            "next_ready": {
                "muscle": self.next_ready.muscle.value,
                "ready_date": self.next_ready.ready_date.isoformat(),
            } if self.next_ready else None,
        }

    @classmethod
    def empty(cls, rationale: SuggestionRationale, **kwargs) -> "WorkoutSuggestion":
        return cls(exercises=(), targeted_muscles=frozenset(), rationale=rationale, **kwargs)
