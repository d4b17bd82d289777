"""
Muscle Fatigue Engine.

Exponential-decay stimulus accumulation per muscle group:

    score(m) = sum over events e touching m of  load(e, m) * 0.5 ** (age_h(e) / H)

where ``load`` is the event's set count for primary muscles and half of it
for secondary muscles (at least 1 set-equivalent either way), and ``H`` is
the base half-life divided by sleep x readiness modifiers. Better recovery
shortens ``H`` so fatigue clears faster.

Only events inside the lookback window count. A muscle without any
qualifying event in the window is NO_DATA, distinct from FULLY_RECOVERED.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from ..models.exercise import ExerciseEvent
from ..models.fatigue import (
    FATIGUE_THRESHOLDS,
    FatigueBreakdown,
    FatigueLevel,
    MuscleFatigueState,
    RecoveryModifiers,
    WorkoutContribution,
)
from ..models.muscles import MuscleGroup
from ..utils.dates import utc_now

logger = logging.getLogger(__name__)


PRIMARY_WEIGHT = 1.0
SECONDARY_WEIGHT = 0.5
MIN_EVENT_LOAD = 1.0

# Highest score that still maps to a trainable level (MILD_FATIGUE).
TRAINABLE_SCORE_LIMIT = dict((level, upper) for upper, level in FATIGUE_THRESHOLDS)[
    FatigueLevel.MILD_FATIGUE
]


def event_load(event: ExerciseEvent, muscle: MuscleGroup) -> float:
    """Set-equivalent stimulus of one event on one muscle, 0 if not targeted."""
    engagement = event.muscle_groups.engagement(muscle)
    if engagement is None:
        return 0.0
    weight = PRIMARY_WEIGHT if engagement == "primary" else SECONDARY_WEIGHT
    return max(event.set_count * weight, MIN_EVENT_LOAD)


def weekly_set_volume(event: ExerciseEvent, muscle: MuscleGroup) -> int:
    """Whole sets credited to a muscle for weekly volume."""
    engagement = event.muscle_groups.engagement(muscle)
    if engagement == "primary":
        return event.set_count
    if engagement == "secondary":
        return max(event.set_count // 2, 1)
    return 0


class MuscleFatigueEngine:
    """
    Computes a fresh fatigue map from a normalized event timeline.

    Every call recomputes all muscles from scratch; the engine keeps no
    state between invocations.
    """

    def __init__(
        self,
        lookback_days: int = 14,
        half_life_hours: float = 24.0,
        weekly_volume_days: int = 7,
    ):
        self.lookback_days = lookback_days
        self.half_life_hours = half_life_hours
        self.weekly_volume_days = weekly_volume_days

    def effective_half_life(self, modifiers: RecoveryModifiers) -> float:
        combined = modifiers.combined
        if not math.isfinite(combined) or combined <= 0:
            logger.warning(f"Invalid combined recovery modifier {combined}, using neutral")
            combined = 1.0
        return self.half_life_hours / combined

    def compute(
        self,
        events: Iterable[ExerciseEvent],
        modifiers: Optional[RecoveryModifiers] = None,
        as_of: Optional[datetime] = None,
    ) -> List[MuscleFatigueState]:
        """
        Fatigue state for every muscle group, in MuscleGroup order.

        Args:
            events: Normalized events; unattributed and out-of-window events
                are ignored
            modifiers: Recovery modifiers (neutral when None)
            as_of: Evaluation instant (defaults to now)
        """
        modifiers = modifiers or RecoveryModifiers()
        as_of = as_of or utc_now()
        half_life = self.effective_half_life(modifiers)

        window_start = as_of - timedelta(days=self.lookback_days)
        volume_start = as_of - timedelta(days=self.weekly_volume_days)

        window_events = [
            e for e in events
            if e.is_attributed and window_start <= e.date <= as_of
        ]

        per_muscle: Dict[MuscleGroup, List[ExerciseEvent]] = {m: [] for m in MuscleGroup}
        for event in window_events:
            for muscle in event.muscle_groups.all:
                per_muscle[muscle].append(event)

        return [
            self._muscle_state(muscle, per_muscle[muscle], modifiers, half_life, as_of, volume_start)
            for muscle in MuscleGroup
        ]

    def _muscle_state(
        self,
        muscle: MuscleGroup,
        events: List[ExerciseEvent],
        modifiers: RecoveryModifiers,
        half_life: float,
        as_of: datetime,
        volume_start: datetime,
    ) -> MuscleFatigueState:
        if not events:
            return MuscleFatigueState(
                muscle=muscle,
                level=FatigueLevel.NO_DATA,
                raw_score=0.0,
                breakdown=FatigueBreakdown(effective_half_life_hours=half_life, modifiers=modifiers),
            )

        score = 0.0
        weekly_volume = 0
        contributions: List[WorkoutContribution] = []

        for event in sorted(events, key=lambda e: e.date, reverse=True):
            load = event_load(event, muscle)
            hours = (as_of - event.date).total_seconds() / 3600.0
            decayed = load * 0.5 ** (hours / half_life)
            score += decayed

            contributions.append(WorkoutContribution(
                date=event.date,
                label=event.label,
                engagement=event.muscle_groups.engagement(muscle),
                raw_load=load,
                decayed_load=decayed,
            ))
            if event.date >= volume_start:
                weekly_volume += weekly_set_volume(event, muscle)

        if not math.isfinite(score):
            logger.warning(f"Non-finite fatigue score for {muscle.value}, reporting no data")
            return MuscleFatigueState(
                muscle=muscle,
                level=FatigueLevel.NO_DATA,
                raw_score=0.0,
                breakdown=FatigueBreakdown(effective_half_life_hours=half_life, modifiers=modifiers),
            )

        return MuscleFatigueState(
            muscle=muscle,
            level=FatigueLevel.from_score(score),
            raw_score=score,
            last_trained_date=contributions[0].date,
            weekly_volume=float(weekly_volume),
            breakdown=FatigueBreakdown(
                contributions=tuple(contributions),
                effective_half_life_hours=half_life,
                modifiers=modifiers,
            ),
        )


def hours_until_trainable(state: MuscleFatigueState) -> float:
    """
    Hours until the muscle decays back to a trainable level.

    All contributions share one half-life, so the total score halves every
    ``effective_half_life_hours`` as long as no new training happens.
    """
    if state.level.is_training_recommended:
        return 0.0
    half_life = state.breakdown.effective_half_life_hours
    if half_life <= 0 or state.raw_score <= 0:
        return 0.0
    return half_life * math.log2(state.raw_score / TRAINABLE_SCORE_LIMIT)
