"""Personal record detection.

This module handles:
- Sanity-gating raw workout metrics before they can become records
- Detecting which record types a workout improves
- Building record entries and folding them into a record book keyed by
  activity type
"""

import logging
import math
from typing import Dict, Iterable, List, Mapping, Optional

from ..models.health import WorkoutSummary
from ..models.personal_records import (
    PersonalRecord,
    PersonalRecordBook,
    PersonalRecordType,
)

logger = logging.getLogger(__name__)


# Exclusive upper bounds; values at or above are treated as corrupt.
PLAUSIBILITY_CEILINGS: Dict[PersonalRecordType, float] = {
    PersonalRecordType.FASTEST_PACE: 3_600.0,         # s/km
    PersonalRecordType.LONGEST_DISTANCE: 1_000_000.0,  # m
    PersonalRecordType.HIGHEST_CALORIES: 10_000.0,    # kcal
    PersonalRecordType.LONGEST_DURATION: 86_400.0,    # s
    PersonalRecordType.HIGHEST_ELEVATION: 20_000.0,   # m
}


def record_value(workout: WorkoutSummary, record_type: PersonalRecordType) -> Optional[float]:
    """
    The workout's value for a record type, or None when it is unusable.

    Values must be positive, finite and under the type's ceiling. Pace is
    only considered for distance-based activities.
    """
    if record_type is PersonalRecordType.FASTEST_PACE:
        if not workout.activity_type.is_distance_based:
            return None
        value = workout.pace_seconds_per_km
    elif record_type is PersonalRecordType.LONGEST_DISTANCE:
        value = workout.distance
    elif record_type is PersonalRecordType.HIGHEST_CALORIES:
        value = workout.calories
    elif record_type is PersonalRecordType.LONGEST_DURATION:
        value = workout.duration
    else:
        value = workout.elevation_ascended

    if value is None:
        return None
    if not math.isfinite(value) or value <= 0 or value >= PLAUSIBILITY_CEILINGS[record_type]:
        logger.debug(f"Rejected {record_type.value}={value} for workout {workout.id}")
        return None
    return float(value)


def detect_new_records(
    workout: WorkoutSummary,
    existing: Mapping[PersonalRecordType, PersonalRecord],
) -> List[PersonalRecordType]:
    """
    Record types the workout strictly improves, in enum order.

    A type without an existing record is always new.
    """
    new_types = []
    for record_type in PersonalRecordType:
        value = record_value(workout, record_type)
        if value is None:
            continue
        current = existing.get(record_type)
        if current is None or record_type.is_better(value, current.value):
            new_types.append(record_type)
    return new_types


def build_records(
    workout: WorkoutSummary,
    types: Iterable[PersonalRecordType],
) -> Dict[PersonalRecordType, PersonalRecord]:
    records = {}
    for record_type in types:
        value = record_value(workout, record_type)
        if value is None:
            continue
        records[record_type] = PersonalRecord(
            type=record_type,
            value=value,
            date=workout.date,
            workout_id=workout.id,
        )
    return records


def update_record_book(
    book: PersonalRecordBook,
    workout: WorkoutSummary,
) -> List[PersonalRecordType]:
    """
    Apply a workout to the record book in place.

    Returns:
        The record types the workout set
    """
    activity = workout.activity_type.value
    existing = book.get(activity, {})
    new_types = detect_new_records(workout, existing)
    if not new_types:
        return []

    updated = dict(existing)
    updated.update(build_records(workout, new_types))
    book[activity] = updated
    logger.info(f"Workout {workout.id} set {len(new_types)} new {activity} record(s)")
    return new_types


def build_record_book(workouts: Iterable[WorkoutSummary]) -> PersonalRecordBook:
    """Replay workouts oldest first into a fresh record book."""
    book: PersonalRecordBook = {}
    for workout in sorted(workouts, key=lambda w: w.date):
        update_record_book(book, workout)
    return book
