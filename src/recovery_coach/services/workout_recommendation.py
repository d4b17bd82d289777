"""
Workout Recommendation Engine.

Ranks muscle groups by fatigue (least fatigued first) and picks exercises
from the library that target the top-ranked groups. Output depends only on
the fatigue states, the library contents, the injuries and ``as_of``.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from ..models.exercise import ExerciseDefinition
from ..models.fatigue import FatigueLevel, MuscleFatigueState
from ..models.injury import InjuryConflict, InjuryInfo, InjurySeverity
from ..models.muscles import ExerciseCategory, MuscleGroup
from ..models.recommendation import (
    DEFAULT_ACTIVE_RECOVERY,
    NextReadyMuscle,
    SuggestedExercise,
    SuggestionRationale,
    WorkoutSuggestion,
)
from .base import ExerciseLibraryQuerying
from .muscle_fatigue import hours_until_trainable

logger = logging.getLogger(__name__)


def check_injury_conflicts(
    muscles: Iterable[MuscleGroup],
    injuries: Iterable[InjuryInfo],
) -> List[InjuryConflict]:
    """Active injuries whose affected muscles overlap ``muscles``."""
    muscle_set = set(muscles)
    if not muscle_set:
        return []

    conflicts = []
    for injury in injuries:
        if not injury.is_active:
            continue
        overlap = muscle_set.intersection(injury.affected_muscle_groups)
        if overlap:
            conflicts.append(InjuryConflict(
                injury=injury,
                conflicting_muscles=tuple(sorted(overlap, key=lambda m: m.value)),
            ))
    return conflicts


def blocked_muscles(injuries: Iterable[InjuryInfo]) -> Set[MuscleGroup]:
    """Muscles to avoid entirely: those hit by active moderate or severe injuries."""
    blocked: Set[MuscleGroup] = set()
    for injury in injuries:
        if injury.is_active and injury.severity >= InjurySeverity.MODERATE:
            blocked.update(injury.affected_muscle_groups)
    return blocked


class WorkoutRecommendationEngine:
    """
    Recovery-aware exercise selection.

    Algorithm:
    1. Rank muscles by fatigue level ascending (NO_DATA ranks with
       FULLY_RECOVERED), then raw score, then muscle order
    2. Keep muscles at MILD_FATIGUE or below that no active moderate or
       severe injury blocks, and take the top ``focus_muscle_count``
    3. Candidates are strength and bodyweight exercises whose primary
       muscles hit a focus muscle, ordered by focus rank, category, name
    4. One exercise per focus muscle, then fill up to ``max_exercises``
    """

    TRAINABLE_CATEGORIES = (ExerciseCategory.STRENGTH, ExerciseCategory.BODYWEIGHT)

    # Sets by target muscle level; anything not listed gets DEFAULT_SETS.
    SETS_BY_LEVEL = {
        FatigueLevel.NO_DATA: 4,
        FatigueLevel.FULLY_RECOVERED: 4,
        FatigueLevel.WELL_RESTED: 4,
        FatigueLevel.LIGHT_FATIGUE: 3,
        FatigueLevel.MILD_FATIGUE: 2,
    }
    DEFAULT_SETS = 2

    def __init__(
        self,
        focus_muscle_count: int = 3,
        max_exercises: int = 4,
        max_alternatives: int = 2,
    ):
        self.focus_muscle_count = focus_muscle_count
        self.max_exercises = max_exercises
        self.max_alternatives = max_alternatives

    def rank_muscles(self, states: Sequence[MuscleFatigueState]) -> List[MuscleFatigueState]:
        """Least fatigued first; NO_DATA is as eligible as FULLY_RECOVERED."""

        def sort_key(state: MuscleFatigueState) -> Tuple[int, float, int]:
            level = FatigueLevel.FULLY_RECOVERED if state.level is FatigueLevel.NO_DATA else state.level
            return (int(level), state.raw_score, state.muscle.order)

        return sorted(states, key=sort_key)

    def recommend(
        self,
        states: Iterable[MuscleFatigueState],
        library: ExerciseLibraryQuerying,
        injuries: Iterable[InjuryInfo] = (),
        as_of: Optional[datetime] = None,
    ) -> WorkoutSuggestion:
        """
        Build a suggestion from the fatigue map.

        Never raises: an empty ``exercises`` tuple means no suggestion is
        available, and ``rationale`` says why.
        """
        by_muscle = _complete_state_map(states)
        blocked = blocked_muscles(injuries)
        ranked = self.rank_muscles(list(by_muscle.values()))

        eligible = [
            s for s in ranked
            if s.level.is_training_recommended and s.muscle not in blocked
        ]
        if not eligible:
            logger.info("No trainable muscle group, suggesting a rest day")
            return WorkoutSuggestion.empty(
                SuggestionRationale.ALL_MUSCLES_FATIGUED,
                active_recovery=DEFAULT_ACTIVE_RECOVERY,
                next_ready=self._next_ready(ranked, blocked, as_of),
            )

        focus = [s.muscle for s in eligible[: self.focus_muscle_count]]
        candidates = self._candidates(library, focus, blocked)
        if not candidates:
            logger.info(f"No exercises in library for {[m.value for m in focus]}")
            return WorkoutSuggestion.empty(
                SuggestionRationale.NO_MATCHING_EXERCISES,
                focus_order=tuple(focus),
            )

        picks = self._select(candidates, focus)
        used_ids = {definition.id for definition, _ in picks}

        exercises = []
        for definition, muscle in picks:
            state = by_muscle[muscle]
            alternatives = tuple(
                c for c in candidates
                if muscle in c.primary_muscles and c.id not in used_ids
            )[: self.max_alternatives]
            exercises.append(SuggestedExercise(
                definition=definition,
                suggested_sets=self.SETS_BY_LEVEL.get(state.level, self.DEFAULT_SETS),
                target_muscle=muscle,
                reason=self._reason(state, as_of),
                alternatives=alternatives,
            ))

        has_history = any(s.has_data for s in by_muscle.values())
        return WorkoutSuggestion(
            exercises=tuple(exercises),
            targeted_muscles=frozenset(e.target_muscle for e in exercises),
            rationale=(
                SuggestionRationale.RECOVERED_MUSCLES if has_history
                else SuggestionRationale.NO_TRAINING_HISTORY
            ),
            focus_order=tuple(focus),
        )

    def _candidates(
        self,
        library: ExerciseLibraryQuerying,
        focus: List[MuscleGroup],
        blocked: Set[MuscleGroup],
    ) -> List[ExerciseDefinition]:
        rank = {muscle: index for index, muscle in enumerate(focus)}

        candidates = []
        for definition in library.all_exercises():
            if definition.category not in self.TRAINABLE_CATEGORIES:
                continue
            hit = [rank[m] for m in definition.primary_muscles if m in rank]
            if not hit:
                continue
            if blocked.intersection(definition.primary_muscles) or blocked.intersection(definition.secondary_muscles):
                continue
            candidates.append((min(hit), definition))

        candidates.sort(key=lambda item: (item[0], item[1].category.order, item[1].name, item[1].id))
        return [definition for _, definition in candidates]

    def _select(
        self,
        candidates: List[ExerciseDefinition],
        focus: List[MuscleGroup],
    ) -> List[Tuple[ExerciseDefinition, MuscleGroup]]:
        """One pick per focus muscle, then fill with the best remaining candidates."""
        picks: List[Tuple[ExerciseDefinition, MuscleGroup]] = []
        used: Set[str] = set()

        for muscle in focus:
            if len(picks) >= self.max_exercises:
                break
            for definition in candidates:
                if definition.id not in used and muscle in definition.primary_muscles:
                    picks.append((definition, muscle))
                    used.add(definition.id)
                    break

        for definition in candidates:
            if len(picks) >= self.max_exercises:
                break
            if definition.id in used:
                continue
            muscle = next(m for m in focus if m in definition.primary_muscles)
            picks.append((definition, muscle))
            used.add(definition.id)

        return picks

    def _reason(self, state: MuscleFatigueState, as_of: Optional[datetime]) -> str:
        name = state.muscle.value
        if not state.has_data:
            return f"No recent training for {name}"

        volume = int(state.weekly_volume)
        hours = state.hours_since_trained(as_of) if as_of else None
        if hours is not None and hours >= 72:
            return f"{int(hours // 24)} days since last trained, {volume} sets this week"
        if volume < 10:
            return f"Low weekly volume ({volume} sets), room for more"
        return "Recovered and ready for training"

    def _next_ready(
        self,
        ranked: List[MuscleFatigueState],
        blocked: Set[MuscleGroup],
        as_of: Optional[datetime],
    ) -> Optional[NextReadyMuscle]:
        """The muscle that decays back to a trainable level first."""
        if as_of is None:
            return None

        best: Optional[Tuple[float, MuscleFatigueState]] = None
        for state in ranked:
            if state.muscle in blocked:
                continue
            hours = hours_until_trainable(state)
            if not math.isfinite(hours):
                continue
            if best is None or hours < best[0]:
                best = (hours, state)

        if best is None:
            return None
        return NextReadyMuscle(
            muscle=best[1].muscle,
            ready_date=as_of + timedelta(hours=math.ceil(best[0])),
        )


def _complete_state_map(states: Iterable[MuscleFatigueState]) -> Dict[MuscleGroup, MuscleFatigueState]:
    """Index states by muscle, filling missing muscles with NO_DATA."""
    by_muscle = {state.muscle: state for state in states}
    for muscle in MuscleGroup:
        if muscle not in by_muscle:
            by_muscle[muscle] = MuscleFatigueState(muscle=muscle, level=FatigueLevel.NO_DATA, raw_score=0.0)
    return by_muscle
