"""Data models for recovery-coach."""

from .muscles import (
    BodyPart,
    BodySide,
    Equipment,
    ExerciseCategory,
    ExerciseInputType,
    MuscleGroup,
)
from .exercise import (
    CompletedSet,
    EventSource,
    ExerciseDefinition,
    ExerciseEvent,
    ExerciseRecordSnapshot,
    MuscleTargets,
)
from .health import (
    HRVSample,
    SleepStage,
    SleepStageInterval,
    SleepSummary,
    WorkoutActivityType,
    WorkoutSummary,
)
from .fatigue import (
    FATIGUE_THRESHOLDS,
    FatigueBreakdown,
    FatigueLevel,
    MuscleFatigueState,
    RecoveryModifiers,
    WorkoutContribution,
)
from .recommendation import (
    DEFAULT_ACTIVE_RECOVERY,
    ActiveRecoverySuggestion,
    NextReadyMuscle,
    SuggestedExercise,
    SuggestionRationale,
    WorkoutSuggestion,
)
from .personal_records import (
    MilestoneDistance,
    PersonalRecord,
    PersonalRecordBook,
    PersonalRecordType,
)
from .training_load import DailyTrainingLoad, LoadSource, TrainingLoad
from .injury import (
    BodyPartFrequency,
    InjuryConflict,
    InjuryInfo,
    InjurySeverity,
    InjuryStatistics,
    InjuryVolumeComparison,
)

__all__ = [
    # Catalog enumerations
    "BodyPart",
    "BodySide",
    "Equipment",
    "ExerciseCategory",
    "ExerciseInputType",
    "MuscleGroup",
    # Exercise history
    "CompletedSet",
    "EventSource",
    "ExerciseDefinition",
    "ExerciseEvent",
    "ExerciseRecordSnapshot",
    "MuscleTargets",
    # Wearable data
    "HRVSample",
    "SleepStage",
    "SleepStageInterval",
    "SleepSummary",
    "WorkoutActivityType",
    "WorkoutSummary",
    # Fatigue
    "FATIGUE_THRESHOLDS",
    "FatigueBreakdown",
    "FatigueLevel",
    "MuscleFatigueState",
    "RecoveryModifiers",
    "WorkoutContribution",
    # Recommendation
    "DEFAULT_ACTIVE_RECOVERY",
    "ActiveRecoverySuggestion",
    "NextReadyMuscle",
    "SuggestedExercise",
    "SuggestionRationale",
    "WorkoutSuggestion",
    # Personal records
    "MilestoneDistance",
    "PersonalRecord",
    "PersonalRecordBook",
    "PersonalRecordType",
    # Training load
    "DailyTrainingLoad",
    "LoadSource",
    "TrainingLoad",
    # Injuries
    "BodyPartFrequency",
    "InjuryConflict",
    "InjuryInfo",
    "InjurySeverity",
    "InjuryStatistics",
    "InjuryVolumeComparison",
]
