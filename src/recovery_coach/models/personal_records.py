"""Personal record data models."""

from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def to_camel(string: str) -> str:
    """Convert snake_case to camelCase."""
    components = string.split("_")
    return components[0] + "".join(x.title() for x in components[1:])


class PersonalRecordType(str, Enum):
    """Metrics a personal record can be set on."""
    FASTEST_PACE = "fastestPace"            # seconds per km, lower wins
    LONGEST_DISTANCE = "longestDistance"    # meters
    HIGHEST_CALORIES = "highestCalories"    # kcal
    LONGEST_DURATION = "longestDuration"    # seconds
    HIGHEST_ELEVATION = "highestElevation"  # meters ascended

    @property
    def lower_is_better(self) -> bool:
        return self is PersonalRecordType.FASTEST_PACE

    def is_better(self, candidate: float, current: float) -> bool:
        """Strict improvement in this metric's direction."""
        if self.lower_is_better:
            return candidate < current
        return candidate > current


class PersonalRecord(BaseModel):
    """Best value for one (activity type, record type) pair."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    type: PersonalRecordType = Field(..., description="Record metric")
    value: float = Field(..., description="Record value in the metric's unit")
    date: datetime = Field(..., description="When the record was set")
    workout_id: str = Field(..., description="Workout that set the record")


# activity type -> record type -> record
PersonalRecordBook = Dict[str, Dict[PersonalRecordType, PersonalRecord]]


class MilestoneDistance(str, Enum):
    """Standard race distances used for milestone badges."""
    FIVE_K = "fiveK"
    TEN_K = "tenK"
    HALF_MARATHON = "halfMarathon"
    MARATHON = "marathon"

    @property
    def meters(self) -> float:
        return _MILESTONE_METERS[self]

    @classmethod
    def detect(cls, distance_m: Optional[float]) -> Optional["MilestoneDistance"]:
        """Highest milestone covered by a distance, if any."""
        if distance_m is None or not distance_m > 0 or distance_m == float("inf"):
            return None
        for milestone in (cls.MARATHON, cls.HALF_MARATHON, cls.TEN_K, cls.FIVE_K):
            if distance_m >= milestone.meters:
                return milestone
        return None


_MILESTONE_METERS = {
    MilestoneDistance.FIVE_K: 5_000.0,
    MilestoneDistance.TEN_K: 10_000.0,
    MilestoneDistance.HALF_MARATHON: 21_097.0,
    MilestoneDistance.MARATHON: 42_195.0,
}
