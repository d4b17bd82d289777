"""Services for fatigue, recommendation, records, load and injuries."""

from .base import ExerciseLibraryQuerying, ExerciseRecordSupplying, HealthDataQuerying
from .exercise_library import ExerciseLibrary
from .normalizer import SnapshotNormalizer, VolumeSummary, summarize_volume
from .recovery_modifiers import (
    ConditionStatus,
    HRVBaseline,
    RecoveryModifierCalculator,
    compute_hrv_baseline,
    daily_hrv_averages,
    rhr_delta,
)
from .muscle_fatigue import MuscleFatigueEngine, event_load, hours_until_trainable
from .workout_recommendation import (
    WorkoutRecommendationEngine,
    blocked_muscles,
    check_injury_conflicts,
)
from .personal_records import (
    build_record_book,
    build_records,
    detect_new_records,
    record_value,
    update_record_book,
)
from .training_load import (
    calculate_load,
    calculate_trimp,
    compute_load_value,
    daily_loads,
    estimate_max_hr,
    load_for_workout,
    select_load_source,
)
from .injury_statistics import InjuryStatisticsService

__all__ = [
    # Collaborator protocols
    "ExerciseLibraryQuerying",
    "ExerciseRecordSupplying",
    "HealthDataQuerying",
    "ExerciseLibrary",
    # Normalization
    "SnapshotNormalizer",
    "VolumeSummary",
    "summarize_volume",
    # Recovery modifiers
    "ConditionStatus",
    "HRVBaseline",
    "RecoveryModifierCalculator",
    "compute_hrv_baseline",
    "daily_hrv_averages",
    "rhr_delta",
    # Fatigue and recommendation
    "MuscleFatigueEngine",
    "event_load",
    "hours_until_trainable",
    "WorkoutRecommendationEngine",
    "blocked_muscles",
    "check_injury_conflicts",
    # Personal records
    "build_record_book",
    "build_records",
    "detect_new_records",
    "record_value",
    "update_record_book",
    # Training load
    "calculate_load",
    "calculate_trimp",
    "compute_load_value",
    "daily_loads",
    "estimate_max_hr",
    "load_for_workout",
    "select_load_source",
    # Injuries
    "InjuryStatisticsService",
]
