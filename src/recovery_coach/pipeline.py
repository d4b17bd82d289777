"""
Recovery pipeline: concurrent acquisition around the pure engines.

Every upstream fetch runs concurrently and is wrapped so that a failure
becomes the same neutral value as missing data. The report records which
sources failed:

- none failed: complete
- some failed: degraded, with an advisory message
- all failed: unavailable
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Iterable, List, Optional, Tuple

from .config import Settings, get_settings
from .models.exercise import ExerciseEvent
from .models.fatigue import MuscleFatigueState, RecoveryModifiers
from .models.injury import InjuryInfo
from .models.recommendation import WorkoutSuggestion
from .services.base import (
    ExerciseLibraryQuerying,
    ExerciseRecordSupplying,
    HealthDataQuerying,
)
from .services.exercise_library import ExerciseLibrary
from .services.muscle_fatigue import MuscleFatigueEngine
from .services.normalizer import SnapshotNormalizer
from .services.recovery_modifiers import (
    HRVBaseline,
    RecoveryModifierCalculator,
    compute_hrv_baseline,
    rhr_delta,
)
from .services.workout_recommendation import WorkoutRecommendationEngine
from .utils.dates import utc_now

logger = logging.getLogger(__name__)


class DataStatus(str, Enum):
    """How much upstream data the report is based on."""
    COMPLETE = "complete"
    DEGRADED = "degraded"
    UNAVAILABLE = "unavailable"


@dataclass
class RecoveryReport:
    """Everything one pipeline run produces."""
    as_of: datetime
    modifiers: RecoveryModifiers
    hrv_baseline: HRVBaseline
    fatigue_states: List[MuscleFatigueState]
    suggestion: WorkoutSuggestion
    event_count: int = 0
    status: DataStatus = DataStatus.COMPLETE
    failed_sources: List[str] = field(default_factory=list)
    advisory: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "as_of": self.as_of.isoformat(),
            "status": self.status.value,
            "failed_sources": list(self.failed_sources),
            "advisory": self.advisory,
            "modifiers": self.modifiers.to_dict(),
            "hrv_baseline": self.hrv_baseline.to_dict(),
            "event_count": self.event_count,
            "fatigue": [s.to_dict() for s in self.fatigue_states],
            "suggestion": self.suggestion.to_dict(),
        }


class RecoveryPipeline:
    """
    Fetches snapshots, then runs normalizer, modifiers, fatigue and
    recommendation in order.

    All collaborators are injected; nothing here reaches for a global.
    """

    SOURCES = (
        "hrv_samples",
        "resting_hr_today",
        "resting_hr_yesterday",
        "sleep",
        "workouts",
        "exercise_records",
    )

    def __init__(
        self,
        health: HealthDataQuerying,
        records: ExerciseRecordSupplying,
        library: ExerciseLibraryQuerying,
        fatigue_engine: Optional[MuscleFatigueEngine] = None,
        recommender: Optional[WorkoutRecommendationEngine] = None,
        modifier_calculator: Optional[RecoveryModifierCalculator] = None,
        hrv_history_days: int = 30,
        hrv_min_baseline_days: int = 7,
    ):
        self.health = health
        self.records = records
        self.library = library
        self.normalizer = SnapshotNormalizer(library)
        self.fatigue_engine = fatigue_engine or MuscleFatigueEngine()
        self.recommender = recommender or WorkoutRecommendationEngine()
        self.modifier_calculator = modifier_calculator or RecoveryModifierCalculator()
        self.hrv_history_days = hrv_history_days
        self.hrv_min_baseline_days = hrv_min_baseline_days

    @classmethod
    def from_settings(
        cls,
        health: HealthDataQuerying,
        records: ExerciseRecordSupplying,
        library: Optional[ExerciseLibraryQuerying] = None,
        settings: Optional[Settings] = None,
    ) -> "RecoveryPipeline":
        settings = settings or get_settings()
        if library is None:
            library = ExerciseLibrary.from_json(settings.resolved_library_path)

        return cls(
            health=health,
            records=records,
            library=library,
            fatigue_engine=MuscleFatigueEngine(
                lookback_days=settings.lookback_days,
                half_life_hours=settings.fatigue_half_life_hours,
                weekly_volume_days=settings.weekly_volume_days,
            ),
            recommender=WorkoutRecommendationEngine(
                focus_muscle_count=settings.focus_muscle_count,
                max_exercises=settings.max_suggested_exercises,
            ),
            hrv_history_days=settings.hrv_history_days,
            hrv_min_baseline_days=settings.hrv_min_baseline_days,
        )

    async def run(
        self,
        as_of: Optional[datetime] = None,
        injuries: Iterable[InjuryInfo] = (),
    ) -> RecoveryReport:
        as_of = as_of or utc_now()
        today = as_of.date()
        window_start = as_of - timedelta(days=self.fatigue_engine.lookback_days)
        hrv_start = as_of - timedelta(days=self.hrv_history_days)

        failures: List[str] = []

        async def safe(name: str, call: Awaitable[Any], default: Any) -> Any:
            try:
                result = await call
            except Exception as e:
                logger.warning(f"Fetch '{name}' failed, using neutral value: {e}")
                failures.append(name)
                return default
            return default if result is None else result

        hrv, rhr_today, rhr_yesterday, sleep, workouts, records = await asyncio.gather(
            safe("hrv_samples", self.health.fetch_hrv_samples(hrv_start, as_of), []),
            safe("resting_hr_today", self.health.fetch_resting_heart_rate(today), None),
            safe("resting_hr_yesterday", self.health.fetch_resting_heart_rate(today - timedelta(days=1)), None),
            safe("sleep", self.health.fetch_sleep_summary(today), None),
            safe("workouts", self.health.fetch_workouts(window_start, as_of), []),
            safe("exercise_records", self.records.fetch_records(window_start, as_of), []),
        )

        baseline = compute_hrv_baseline(
            hrv,
            today_rhr=rhr_today,
            yesterday_rhr=rhr_yesterday,
            min_days=self.hrv_min_baseline_days,
        )
        modifiers = self.modifier_calculator.modifiers(
            sleep=sleep,
            hrv_z_score=baseline.z_score,
            rhr_delta=rhr_delta(rhr_today, rhr_yesterday),
        )

        events: List[ExerciseEvent] = self.normalizer.normalize(records, workouts)
        states = self.fatigue_engine.compute(events, modifiers, as_of)
        suggestion = self.recommender.recommend(states, self.library, injuries=injuries, as_of=as_of)

        status, advisory = self._status(failures)
        return RecoveryReport(
            as_of=as_of,
            modifiers=modifiers,
            hrv_baseline=baseline,
            fatigue_states=states,
            suggestion=suggestion,
            event_count=len(events),
            status=status,
            failed_sources=sorted(failures, key=self.SOURCES.index),
            advisory=advisory,
        )

    def _status(self, failures: List[str]) -> Tuple[DataStatus, Optional[str]]:
        if not failures:
            return DataStatus.COMPLETE, None
        if len(failures) >= len(self.SOURCES):
            return DataStatus.UNAVAILABLE, "Health data is unavailable. Showing neutral defaults."
        return (
            DataStatus.DEGRADED,
            f"Some data could not be loaded ({len(failures)} of {len(self.SOURCES)} sources). "
            "Results may be less accurate.",
        )
