"""
JSON snapshot data source.

A snapshot bundle is a single JSON document holding everything the engines
consume: HRV samples, resting heart rates, sleep, wearable workouts, local
exercise records and injuries. Keys are camelCase; snake_case is accepted
too. Timezone-aware timestamps are converted to naive UTC so that every
comparison inside the engines is between naive datetimes.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Annotated, Dict, List, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ErrorCode, SnapshotFormatError
from ..models.exercise import CompletedSet, ExerciseRecordSnapshot
from ..models.health import (
    HRVSample,
    SleepStage,
    SleepStageInterval,
    SleepSummary,
    WorkoutActivityType,
    WorkoutSummary,
)
from ..models.injury import InjuryInfo, InjurySeverity
from ..models.muscles import BodyPart, BodySide, MuscleGroup
from ..models.personal_records import to_camel
from ..utils.dates import to_naive_utc

logger = logging.getLogger(__name__)


NaiveDatetime = Annotated[datetime, AfterValidator(to_naive_utc)]


class SnapshotModel(BaseModel):
    """Base model for snapshot sections."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class HRVSampleModel(SnapshotModel):
    value: float
    date: NaiveDatetime

    def to_domain(self) -> HRVSample:
        return HRVSample(value=self.value, date=self.date)


class SleepStageModel(SnapshotModel):
    stage: SleepStage
    start: NaiveDatetime
    end: NaiveDatetime


class SleepModel(SnapshotModel):
    """Sleep for the night ending on ``date``; totals or raw stages."""
    date: date
    total_minutes: Optional[float] = None
    deep_ratio: Optional[float] = None
    rem_ratio: Optional[float] = None
    stages: List[SleepStageModel] = Field(default_factory=list)

    def to_domain(self) -> SleepSummary:
        if self.total_minutes is None and self.stages:
            return SleepSummary.from_stages(
                self.date,
                [SleepStageInterval(stage=s.stage, start=s.start, end=s.end) for s in self.stages],
            )
        return SleepSummary(
            date=self.date,
            total_minutes=self.total_minutes,
            deep_ratio=self.deep_ratio,
            rem_ratio=self.rem_ratio,
        )


class WorkoutModel(SnapshotModel):
    id: str
    activity_type: str = WorkoutActivityType.OTHER.value
    date: NaiveDatetime
    duration: float = Field(..., description="Seconds")
    distance: Optional[float] = Field(default=None, description="Meters")
    calories: Optional[float] = None
    average_pace: Optional[float] = Field(default=None, description="Seconds per km")
    elevation_ascended: Optional[float] = None
    heart_rate_avg: Optional[float] = None
    heart_rate_max: Optional[float] = None
    effort_score: Optional[float] = None
    rpe: Optional[int] = None
    is_from_this_app: bool = False

    def to_domain(self) -> WorkoutSummary:
        return WorkoutSummary(
            id=self.id,
            activity_type=WorkoutActivityType.parse(self.activity_type),
            date=self.date,
            duration=self.duration,
            distance=self.distance,
            calories=self.calories,
            average_pace=self.average_pace,
            elevation_ascended=self.elevation_ascended,
            heart_rate_avg=self.heart_rate_avg,
            heart_rate_max=self.heart_rate_max,
            effort_score=self.effort_score,
            rpe=self.rpe,
            is_from_this_app=self.is_from_this_app,
        )


class CompletedSetModel(SnapshotModel):
    weight_kg: Optional[float] = None
    reps: Optional[int] = None
    duration_seconds: Optional[float] = None
    is_completed: bool = True


class ExerciseRecordModel(SnapshotModel):
    id: str
    date: NaiveDatetime
    exercise_definition_id: Optional[str] = None
    exercise_name: Optional[str] = None
    primary_muscles: List[MuscleGroup] = Field(default_factory=list)
    secondary_muscles: List[MuscleGroup] = Field(default_factory=list)
    sets: List[CompletedSetModel] = Field(default_factory=list)
    duration_minutes: Optional[float] = None
    distance_km: Optional[float] = None
    is_from_health_kit: bool = False

    def to_domain(self) -> ExerciseRecordSnapshot:
        return ExerciseRecordSnapshot(
            id=self.id,
            date=self.date,
            exercise_definition_id=self.exercise_definition_id,
            exercise_name=self.exercise_name,
            primary_muscles=tuple(self.primary_muscles),
            secondary_muscles=tuple(self.secondary_muscles),
            sets=tuple(CompletedSet(**s.model_dump()) for s in self.sets),
            duration_minutes=self.duration_minutes,
            distance_km=self.distance_km,
            is_from_health_kit=self.is_from_health_kit,
        )


class InjuryModel(SnapshotModel):
    id: str
    body_part: BodyPart
    severity: InjurySeverity
    start_date: NaiveDatetime
    end_date: Optional[NaiveDatetime] = None
    body_side: Optional[BodySide] = None
    memo: str = ""

    def to_domain(self) -> InjuryInfo:
        return InjuryInfo(
            id=self.id,
            body_part=self.body_part,
            severity=self.severity,
            start_date=self.start_date,
            end_date=self.end_date,
            body_side=self.body_side,
            memo=self.memo,
        )


class ProfileModel(SnapshotModel):
    age: Optional[int] = Field(default=None, ge=1, le=120)
    max_heart_rate: Optional[float] = None


class SnapshotBundle(SnapshotModel):
    """Top-level snapshot document."""
    as_of: Optional[NaiveDatetime] = None
    profile: ProfileModel = Field(default_factory=ProfileModel)
    hrv_samples: List[HRVSampleModel] = Field(default_factory=list)
    resting_heart_rates: Dict[date, float] = Field(default_factory=dict)
    sleep: List[SleepModel] = Field(default_factory=list)
    workouts: List[WorkoutModel] = Field(default_factory=list)
    exercise_records: List[ExerciseRecordModel] = Field(default_factory=list)
    injuries: List[InjuryModel] = Field(default_factory=list)


class JsonSnapshotSource:
    """
    Serves a snapshot bundle through the health-query and record-supplier
    interfaces.
    """

    name = "json_snapshot"

    def __init__(self, bundle: SnapshotBundle):
        self.bundle = bundle
        self._hrv = [s.to_domain() for s in bundle.hrv_samples]
        self._sleep = {s.date: s.to_domain() for s in bundle.sleep}
        self._workouts = [w.to_domain() for w in bundle.workouts]
        self._records = [r.to_domain() for r in bundle.exercise_records]
        self._injuries = [i.to_domain() for i in bundle.injuries]

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "JsonSnapshotSource":
        """
        Load and validate a snapshot file.

        Raises:
            SnapshotFormatError: If the file is missing, not JSON, or does
                not match the snapshot schema
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise SnapshotFormatError(
                "Snapshot file not found", path=str(path), code=ErrorCode.SNAPSHOT_NOT_FOUND
            ) from e
        except (OSError, json.JSONDecodeError) as e:
            raise SnapshotFormatError(f"Snapshot file unreadable: {e}", path=str(path)) from e
        return cls.from_dict(raw, path=str(path))

    @classmethod
    def from_dict(cls, data: dict, path: Optional[str] = None) -> "JsonSnapshotSource":
        try:
            bundle = SnapshotBundle.model_validate(data)
        except PydanticValidationError as e:
            raise SnapshotFormatError(
                f"Invalid snapshot: {e.error_count()} validation error(s)",
                path=path,
                details={"errors": [
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ]},
            ) from e

        logger.debug(
            f"Loaded snapshot: {len(bundle.workouts)} workouts, "
            f"{len(bundle.exercise_records)} records, {len(bundle.hrv_samples)} HRV samples"
        )
        return cls(bundle)

    @property
    def as_of(self) -> Optional[datetime]:
        return self.bundle.as_of

    @property
    def profile(self) -> ProfileModel:
        return self.bundle.profile

    # HealthDataQuerying

    async def fetch_hrv_samples(self, start: datetime, end: datetime) -> List[HRVSample]:
        return [s for s in self._hrv if start <= s.date <= end]

    async def fetch_resting_heart_rate(self, day: date) -> Optional[float]:
        return self.bundle.resting_heart_rates.get(day)

    async def fetch_sleep_summary(self, day: date) -> Optional[SleepSummary]:
        return self._sleep.get(day)

    async def fetch_workouts(self, start: datetime, end: datetime) -> List[WorkoutSummary]:
        return [w for w in self._workouts if start <= w.date <= end]

    # ExerciseRecordSupplying

    async def fetch_records(self, start: datetime, end: datetime) -> List[ExerciseRecordSnapshot]:
        return [r for r in self._records if start <= r.date <= end]

    # Synchronous accessors for the non-pipeline commands

    def all_workouts(self) -> List[WorkoutSummary]:
        return list(self._workouts)

    def all_records(self) -> List[ExerciseRecordSnapshot]:
        return list(self._records)

    def injuries(self) -> List[InjuryInfo]:
        return list(self._injuries)

    def resting_heart_rates(self) -> Dict[date, float]:
        return dict(self.bundle.resting_heart_rates)
