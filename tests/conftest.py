"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta

import pytest

from recovery_coach.models.exercise import (
    CompletedSet,
    ExerciseDefinition,
    ExerciseEvent,
    ExerciseRecordSnapshot,
    MuscleTargets,
)
from recovery_coach.models.muscles import Equipment, ExerciseCategory, MuscleGroup
from recovery_coach.services.exercise_library import ExerciseLibrary


AS_OF = datetime(2024, 5, 1, 18, 0, 0)


@pytest.fixture
def as_of():
    """Fixed evaluation instant."""
    return AS_OF


@pytest.fixture
def definitions():
    """Small exercise catalog covering a few muscle groups."""
    return [
        ExerciseDefinition(
            id="bench",
            name="Bench Press",
            category=ExerciseCategory.STRENGTH,
            primary_muscles=(MuscleGroup.CHEST,),
            secondary_muscles=(MuscleGroup.TRICEPS, MuscleGroup.SHOULDERS),
            equipment=Equipment.BARBELL,
        ),
        ExerciseDefinition(
            id="push-up",
            name="Push-Up",
            category=ExerciseCategory.BODYWEIGHT,
            primary_muscles=(MuscleGroup.CHEST,),
            secondary_muscles=(MuscleGroup.TRICEPS,),
            equipment=Equipment.BODYWEIGHT,
        ),
        ExerciseDefinition(
            id="squat",
            name="Back Squat",
            category=ExerciseCategory.STRENGTH,
            primary_muscles=(MuscleGroup.QUADRICEPS, MuscleGroup.GLUTES),
            secondary_muscles=(MuscleGroup.HAMSTRINGS,),
            equipment=Equipment.BARBELL,
        ),
        ExerciseDefinition(
            id="row",
            name="Barbell Row",
            category=ExerciseCategory.STRENGTH,
            primary_muscles=(MuscleGroup.BACK, MuscleGroup.LATS),
            secondary_muscles=(MuscleGroup.BICEPS,),
            equipment=Equipment.BARBELL,
        ),
        ExerciseDefinition(
            id="curl",
            name="Barbell Curl",
            category=ExerciseCategory.STRENGTH,
            primary_muscles=(MuscleGroup.BICEPS,),
            secondary_muscles=(MuscleGroup.FOREARMS,),
            equipment=Equipment.BARBELL,
        ),
        ExerciseDefinition(
            id="treadmill",
            name="Treadmill Run",
            category=ExerciseCategory.CARDIO,
            primary_muscles=(MuscleGroup.QUADRICEPS, MuscleGroup.CALVES),
            equipment=Equipment.MACHINE,
        ),
    ]


@pytest.fixture
def library(definitions):
    """In-memory exercise library built from the fixture catalog."""
    return ExerciseLibrary(definitions)


@pytest.fixture
def make_event():
    """Factory for strength events relative to AS_OF."""

    def _make(primary=(MuscleGroup.CHEST,), secondary=(), sets=3, hours_ago=24.0, label=None):
        return ExerciseEvent(
            date=AS_OF - timedelta(hours=hours_ago),
            muscle_groups=MuscleTargets.of(primary, secondary),
            set_count=sets,
            label=label,
        )

    return _make


@pytest.fixture
def make_record():
    """Factory for local exercise records relative to AS_OF."""

    def _make(record_id="r1", definition_id=None, primary=(), secondary=(), sets=3, days_ago=1):
        return ExerciseRecordSnapshot(
            id=record_id,
            date=AS_OF - timedelta(days=days_ago),
            exercise_definition_id=definition_id,
            primary_muscles=tuple(primary),
            secondary_muscles=tuple(secondary),
            sets=tuple(CompletedSet(weight_kg=60.0, reps=8) for _ in range(sets)),
        )

    return _make
