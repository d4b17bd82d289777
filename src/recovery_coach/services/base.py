"""
Collaborator protocols.

The engines depend on these narrow interfaces only; concrete catalogs and
data sources are passed in explicitly by the caller.
"""

from datetime import date, datetime
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ..models.exercise import ExerciseDefinition, ExerciseRecordSnapshot
from ..models.health import HRVSample, SleepSummary, WorkoutSummary
from ..models.muscles import Equipment, ExerciseCategory, MuscleGroup


@runtime_checkable
class ExerciseLibraryQuerying(Protocol):
    """Read-only lookup over the exercise catalog."""

    def all_exercises(self) -> Sequence[ExerciseDefinition]:
        ...

    def by_id(self, exercise_id: str) -> Optional[ExerciseDefinition]:
        ...

    def search(self, query: str) -> List[ExerciseDefinition]:
        ...

    def for_muscle(self, muscle: MuscleGroup) -> List[ExerciseDefinition]:
        ...

    def for_category(self, category: ExerciseCategory) -> List[ExerciseDefinition]:
        ...

    def for_equipment(self, equipment: Equipment) -> List[ExerciseDefinition]:
        ...


@runtime_checkable
class HealthDataQuerying(Protocol):
    """Pre-authorized wearable health queries."""

    async def fetch_hrv_samples(self, start: datetime, end: datetime) -> List[HRVSample]:
        """HRV samples with timestamps in [start, end]."""
        ...

    async def fetch_resting_heart_rate(self, day: date) -> Optional[float]:
        """Resting heart rate for one calendar day."""
        ...

    async def fetch_sleep_summary(self, day: date) -> Optional[SleepSummary]:
        """Sleep of the night ending on ``day``."""
        ...

    async def fetch_workouts(self, start: datetime, end: datetime) -> List[WorkoutSummary]:
        """Workout summaries that started in [start, end]."""
        ...


@runtime_checkable
class ExerciseRecordSupplying(Protocol):
    """Already-materialized local exercise records."""

    async def fetch_records(self, start: datetime, end: datetime) -> List[ExerciseRecordSnapshot]:
        """Records dated in [start, end]."""
        ...
