"""Tests for snapshot normalization."""

from datetime import timedelta

from recovery_coach.models.exercise import (
    CompletedSet,
    EventSource,
    ExerciseRecordSnapshot,
)
from recovery_coach.models.health import WorkoutActivityType, WorkoutSummary
from recovery_coach.models.muscles import MuscleGroup
from recovery_coach.services.normalizer import SnapshotNormalizer, summarize_volume


def make_workout(workout_id, as_of, activity=WorkoutActivityType.RUNNING, hours_ago=5,
                 duration=2400.0, distance=6000.0, **kwargs):
    return WorkoutSummary(
        id=workout_id,
        activity_type=activity,
        date=as_of - timedelta(hours=hours_ago),
        duration=duration,
        distance=distance,
        **kwargs,
    )


class TestRecordEvents:
    """Tests for local exercise records."""

    def test_annotated_record_kept_as_is(self, library, make_record):
        record = make_record(primary=(MuscleGroup.BICEPS,), secondary=(MuscleGroup.FOREARMS,), sets=4)

        event = SnapshotNormalizer(library).event_from_record(record)

        assert event.muscle_groups.primary == frozenset({MuscleGroup.BICEPS})
        assert event.muscle_groups.secondary == frozenset({MuscleGroup.FOREARMS})
        assert event.set_count == 4
        assert event.source == EventSource.LOCAL
        assert event.source_id == "r1"

    def test_backfill_from_library(self, library, make_record):
        """Test a record without muscles is backfilled by definition id."""
        record = make_record(definition_id="bench", sets=3)

        event = SnapshotNormalizer(library).event_from_record(record)

        assert event.muscle_groups.primary == frozenset({MuscleGroup.CHEST})
        assert event.muscle_groups.secondary == frozenset({MuscleGroup.TRICEPS, MuscleGroup.SHOULDERS})
        assert event.label == "Bench Press"

    def test_unknown_definition_left_unattributed(self, library, make_record):
        """Test a failed lookup keeps the event but without muscles."""
        record = make_record(definition_id="no-such-exercise")

        event = SnapshotNormalizer(library).event_from_record(record)

        assert not event.is_attributed
        assert event.set_count == 3

    def test_only_completed_sets_count(self, library, as_of):
        record = ExerciseRecordSnapshot(
            id="r1",
            date=as_of,
            primary_muscles=(MuscleGroup.CHEST,),
            sets=(
                CompletedSet(weight_kg=60, reps=8),
                CompletedSet(weight_kg=60, reps=8),
                CompletedSet(weight_kg=60, reps=3, is_completed=False),
            ),
        )

        event = SnapshotNormalizer(library).event_from_record(record)

        assert event.set_count == 2
        assert record.total_volume_kg == 960.0


class TestWorkoutEvents:
    """Tests for wearable workouts."""

    def test_cardio_workout_mapped(self, library, as_of):
        """Test a run becomes a zero-set event with its muscle mapping."""
        event = SnapshotNormalizer(library).event_from_workout(make_workout("w1", as_of))

        assert event.set_count == 0
        assert event.source == EventSource.WEARABLE
        assert event.duration_minutes == 40.0
        assert event.distance_km == 6.0
        assert MuscleGroup.QUADRICEPS in event.muscle_groups.primary
        assert MuscleGroup.CORE in event.muscle_groups.secondary
        assert event.label == "running"

    def test_own_workouts_skipped(self, library, as_of):
        """Test workouts this app wrote are not double counted."""
        workout = make_workout("w1", as_of, is_from_this_app=True)

        assert SnapshotNormalizer(library).event_from_workout(workout) is None

    def test_unmapped_activity_skipped(self, library, as_of):
        """Test activity types without a muscle mapping are dropped."""
        workout = make_workout("w1", as_of, activity=WorkoutActivityType.TRADITIONAL_STRENGTH_TRAINING)

        assert SnapshotNormalizer(library).event_from_workout(workout) is None


class TestNormalize:
    """Tests for the merged timeline."""

    def test_sorted_by_date(self, library, as_of, make_record):
        normalizer = SnapshotNormalizer(library)
        records = [make_record("r-new", "bench", days_ago=1), make_record("r-old", "squat", days_ago=3)]
        workouts = [
            make_workout("run", as_of, hours_ago=48),
            make_workout("mine", as_of, hours_ago=10, is_from_this_app=True),
        ]

        events = normalizer.normalize(records, workouts)

        assert [e.source_id for e in events] == ["r-old", "run", "r-new"]

    def test_mirrored_record_not_counted_twice(self, library, as_of):
        """Test a record mirrored from the wearable yields to the wearable workout."""
        mirrored = ExerciseRecordSnapshot(
            id="r-run",
            date=as_of - timedelta(hours=5),
            primary_muscles=(MuscleGroup.QUADRICEPS,),
            duration_minutes=40.0,
            is_from_health_kit=True,
        )

        events = SnapshotNormalizer(library).normalize([mirrored], [make_workout("run", as_of)])

        quad_events = [e for e in events if MuscleGroup.QUADRICEPS in e.muscle_groups.primary]
        assert [e.source_id for e in quad_events] == ["run"]

    def test_mirrored_record_kept_without_workouts(self, library, as_of):
        """Test the mirrored record stands in when no wearable workouts arrive."""
        mirrored = ExerciseRecordSnapshot(
            id="r-run",
            date=as_of - timedelta(hours=5),
            primary_muscles=(MuscleGroup.QUADRICEPS,),
            is_from_health_kit=True,
        )

        events = SnapshotNormalizer(library).normalize([mirrored], [])

        assert [e.source_id for e in events] == ["r-run"]

    def test_empty_inputs(self, library):
        assert SnapshotNormalizer(library).normalize() == []


class TestSummarizeVolume:
    """Tests for generic volume counts."""

    def test_counts_unattributed_events(self, library, as_of, make_record):
        """Test unattributed events show up in volume but are flagged."""
        normalizer = SnapshotNormalizer(library)
        events = normalizer.normalize(
            [
                make_record("a", "bench", sets=3, days_ago=1),
                make_record("b", "mystery", sets=2, days_ago=2),
                make_record("c", "bench", sets=5, days_ago=9),
            ],
            [make_workout("run", as_of, hours_ago=30)],
        )

        summary = summarize_volume(events, as_of, days=7)

        assert summary.session_count == 3
        assert summary.total_sets == 5
        assert summary.total_duration_minutes == 40.0
        assert summary.unattributed_count == 1
