"""Muscle, body-part and exercise catalog enumerations."""

from enum import Enum
from typing import Tuple


class MuscleGroup(str, Enum):
    """Muscle groups tracked by the fatigue model."""
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    CORE = "core"
    FOREARMS = "forearms"
    TRAPS = "traps"
    LATS = "lats"

    @property
    def order(self) -> int:
        """Declaration index, used as a stable tie-breaker."""
        return _MUSCLE_ORDER[self]


_MUSCLE_ORDER = {muscle: index for index, muscle in enumerate(MuscleGroup)}


class ExerciseCategory(str, Enum):
    """Exercise catalog categories."""
    STRENGTH = "strength"
    CARDIO = "cardio"
    HIIT = "hiit"
    FLEXIBILITY = "flexibility"
    BODYWEIGHT = "bodyweight"

    @property
    def order(self) -> int:
        return _CATEGORY_ORDER[self]


_CATEGORY_ORDER = {category: index for index, category in enumerate(ExerciseCategory)}


class ExerciseInputType(str, Enum):
    """How sets of an exercise are logged."""
    SETS_REPS_WEIGHT = "setsRepsWeight"
    SETS_REPS = "setsReps"
    DURATION_DISTANCE = "durationDistance"
    DURATION_INTENSITY = "durationIntensity"
    ROUNDS_BASED = "roundsBased"


class Equipment(str, Enum):
    """Equipment required by an exercise."""
    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    MACHINE = "machine"
    CABLE = "cable"
    BODYWEIGHT = "bodyweight"
    BAND = "band"
    KETTLEBELL = "kettlebell"
    OTHER = "other"


class BodySide(str, Enum):
    """Left/right distinction for lateral body parts."""
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


class BodyPart(str, Enum):
    """Body part an injury is logged against (joints and muscle regions)."""
    # Joints
    NECK = "neck"
    SHOULDER = "shoulder"
    ELBOW = "elbow"
    WRIST = "wrist"
    LOWER_BACK = "lowerBack"
    HIP = "hip"
    KNEE = "knee"
    ANKLE = "ankle"

    # Muscle regions
    CHEST = "chest"
    UPPER_BACK = "upperBack"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    CORE = "core"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"

    @property
    def order(self) -> int:
        return _BODY_PART_ORDER[self]

    @property
    def affected_muscle_groups(self) -> Tuple[MuscleGroup, ...]:
        """Muscle groups that should be spared while this part is injured."""
        return _AFFECTED_MUSCLES[self]

    @property
    def is_joint(self) -> bool:
        return self in _JOINTS


_BODY_PART_ORDER = {part: index for index, part in enumerate(BodyPart)}

_JOINTS = frozenset({
    BodyPart.NECK,
    BodyPart.SHOULDER,
    BodyPart.ELBOW,
    BodyPart.WRIST,
    BodyPart.LOWER_BACK,
    BodyPart.HIP,
    BodyPart.KNEE,
    BodyPart.ANKLE,
})

_AFFECTED_MUSCLES = {
    BodyPart.NECK: (MuscleGroup.TRAPS,),
    BodyPart.SHOULDER: (MuscleGroup.SHOULDERS, MuscleGroup.CHEST, MuscleGroup.TRAPS),
    BodyPart.ELBOW: (MuscleGroup.BICEPS, MuscleGroup.TRICEPS, MuscleGroup.FOREARMS),
    BodyPart.WRIST: (MuscleGroup.FOREARMS,),
    BodyPart.LOWER_BACK: (MuscleGroup.BACK, MuscleGroup.CORE),
    BodyPart.HIP: (MuscleGroup.GLUTES, MuscleGroup.HAMSTRINGS, MuscleGroup.QUADRICEPS),
    BodyPart.KNEE: (MuscleGroup.QUADRICEPS, MuscleGroup.HAMSTRINGS, MuscleGroup.CALVES),
    BodyPart.ANKLE: (MuscleGroup.CALVES,),
    BodyPart.CHEST: (MuscleGroup.CHEST,),
    BodyPart.UPPER_BACK: (MuscleGroup.BACK, MuscleGroup.LATS, MuscleGroup.TRAPS),
    BodyPart.BICEPS: (MuscleGroup.BICEPS,),
    BodyPart.TRICEPS: (MuscleGroup.TRICEPS,),
    BodyPart.FOREARMS: (MuscleGroup.FOREARMS,),
    BodyPart.CORE: (MuscleGroup.CORE,),
    BodyPart.QUADRICEPS: (MuscleGroup.QUADRICEPS,),
    BodyPart.HAMSTRINGS: (MuscleGroup.HAMSTRINGS,),
    BodyPart.GLUTES: (MuscleGroup.GLUTES,),
    BodyPart.CALVES: (MuscleGroup.CALVES,),
}
