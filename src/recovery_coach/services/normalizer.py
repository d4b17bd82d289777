"""
Snapshot normalization.

Turns locally logged exercise records and wearable workout summaries into
a single date-ordered list of ExerciseEvent.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from ..models.exercise import (
    EventSource,
    ExerciseEvent,
    ExerciseRecordSnapshot,
    MuscleTargets,
)
from ..models.health import WorkoutSummary
from .base import ExerciseLibraryQuerying

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VolumeSummary:
    """Generic volume over a window, attributed or not."""
    days: int
    session_count: int
    total_sets: int
    total_duration_minutes: float
    unattributed_count: int

    def to_dict(self) -> dict:
        return {
            "days": self.days,
            "session_count": self.session_count,
            "total_sets": self.total_sets,
            "total_duration_minutes": round(self.total_duration_minutes, 1),
            "unattributed_count": self.unattributed_count,
        }


class SnapshotNormalizer:
    """
    Builds the unified exercise event timeline.

    Local records missing muscle annotation are backfilled from the
    exercise library. Wearable workouts recorded by this app, or whose
    activity type has no muscle mapping, are dropped. Records mirrored from
    the wearable are dropped whenever wearable workouts are supplied, so a
    session is never counted twice. Never raises.
    """

    def __init__(self, library: ExerciseLibraryQuerying):
        self.library = library

    def normalize(
        self,
        records: Iterable[ExerciseRecordSnapshot] = (),
        workouts: Iterable[WorkoutSummary] = (),
    ) -> List[ExerciseEvent]:
        workouts = list(workouts)
        events: List[ExerciseEvent] = []

        for record in records:
            # The wearable summary already covers a mirrored session.
            if record.is_from_health_kit and workouts:
                logger.debug(f"Skipping mirrored record {record.id}")
                continue
            events.append(self.event_from_record(record))

        for workout in workouts:
            event = self.event_from_workout(workout)
            if event is not None:
                events.append(event)

        events.sort(key=lambda e: e.date)
        return events

    def event_from_record(self, record: ExerciseRecordSnapshot) -> ExerciseEvent:
        primary = record.primary_muscles
        secondary = record.secondary_muscles
        label = record.exercise_name

        if not primary and not secondary and record.exercise_definition_id:
            definition = self.library.by_id(record.exercise_definition_id)
            if definition is None:
                logger.debug(
                    f"No definition for '{record.exercise_definition_id}', "
                    f"record {record.id} left unattributed"
                )
            else:
                primary = definition.primary_muscles
                secondary = definition.secondary_muscles
                label = label or definition.name

        return ExerciseEvent(
            date=record.date,
            muscle_groups=MuscleTargets.of(primary, secondary),
            set_count=record.completed_set_count,
            duration_minutes=record.duration_minutes,
            distance_km=record.distance_km,
            source=EventSource.LOCAL,
            source_id=record.id,
            label=label,
        )

    def event_from_workout(self, workout: WorkoutSummary) -> Optional[ExerciseEvent]:
        """Cardio event for a wearable workout, or None when it must be skipped."""
        if workout.is_from_this_app:
            return None

        primary, secondary = workout.activity_type.muscle_targets
        if not primary and not secondary:
            return None

        distance_km = None
        if workout.distance is not None:
            distance_km = workout.distance / 1000.0

        return ExerciseEvent(
            date=workout.date,
            muscle_groups=MuscleTargets.of(primary, secondary),
            set_count=0,
            duration_minutes=workout.duration_minutes,
            distance_km=distance_km,
            source=EventSource.WEARABLE,
            source_id=workout.id,
            label=workout.activity_type.value,
        )


def summarize_volume(events: Iterable[ExerciseEvent], as_of: datetime, days: int = 7) -> VolumeSummary:
    """
    Count sessions, sets and minutes in the ``days`` before ``as_of``.

    Events without muscle attribution are counted here even though the
    fatigue engine ignores them.
    """
    start = as_of - timedelta(days=days)
    sessions = 0
    sets = 0
    minutes = 0.0
    unattributed = 0

    for event in events:
        if not start <= event.date <= as_of:
            continue
        sessions += 1
        sets += event.set_count
        minutes += event.duration_minutes or 0.0
        if not event.is_attributed:
            unattributed += 1

    return VolumeSummary(
        days=days,
        session_count=sessions,
        total_sets=sets,
        total_duration_minutes=minutes,
        unattributed_count=unattributed,
    )
