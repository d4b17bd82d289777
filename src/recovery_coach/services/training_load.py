"""Training load calculations (effort, RPE, heart-rate-reserve TRIMP)."""

import logging
import math
from collections import OrderedDict
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Union

from ..models.health import WorkoutSummary
from ..models.training_load import DailyTrainingLoad, LoadSource, TrainingLoad
from ..utils.dates import utc_now

logger = logging.getLogger(__name__)


def estimate_max_hr(age: int) -> float:
    """Age-predicted maximum heart rate (220 - age)."""
    return float(220 - age)


def select_load_source(
    effort_score: Optional[float],
    rpe: Optional[int],
    duration_minutes: float,
    heart_rate_avg: Optional[float] = None,
    resting_hr: Optional[float] = None,
    max_hr: Optional[float] = None,
) -> Optional[LoadSource]:
    """
    Pick the load source by strict priority: effort, then RPE, then TRIMP.

    Returns None when the duration is unusable or no source qualifies.
    """
    if duration_minutes is None or not math.isfinite(duration_minutes) or duration_minutes <= 0:
        return None

    if effort_score is not None and math.isfinite(effort_score) and 0 < effort_score <= 10:
        return LoadSource.EFFORT
    if rpe is not None and isinstance(rpe, int) and 1 <= rpe <= 10:
        return LoadSource.RPE
    if heart_rate_avg is not None and resting_hr is not None and max_hr is not None:
        return LoadSource.TRIMP
    return None


def compute_load_value(
    source: LoadSource,
    duration_minutes: float,
    effort_score: Optional[float] = None,
    rpe: Optional[int] = None,
    heart_rate_avg: Optional[float] = None,
    resting_hr: Optional[float] = None,
    max_hr: Optional[float] = None,
) -> float:
    """
    Numeric load for an already selected source.

    Effort and RPE scale by hours. TRIMP is ``minutes * ratio ** 2`` with
    ``ratio = (avg - rest) / (max - rest)``; an inconsistent heart-rate
    ordering or a non-finite result gives 0.
    """
    if source is LoadSource.EFFORT:
        value = (effort_score if effort_score is not None else 5.0) * duration_minutes / 60.0
    elif source is LoadSource.RPE:
        value = float(rpe if rpe is not None else 5) * duration_minutes / 60.0
    else:
        value = calculate_trimp(duration_minutes, heart_rate_avg, resting_hr, max_hr)

    if not math.isfinite(value) or value < 0:
        return 0.0
    return value


def calculate_trimp(
    duration_min: float,
    avg_hr: Optional[float],
    rest_hr: Optional[float],
    max_hr: Optional[float],
) -> float:
    """
    Heart-rate-reserve training impulse.

    Args:
        duration_min: Duration of activity in minutes
        avg_hr: Average heart rate during activity
        rest_hr: Resting heart rate
        max_hr: Maximum heart rate

    Returns:
        Load value, 0.0 when the heart rates are missing or inconsistent
    """
    if avg_hr is None or rest_hr is None or max_hr is None:
        return 0.0
    if not (max_hr > rest_hr and rest_hr <= avg_hr <= max_hr):
        return 0.0

    ratio = (avg_hr - rest_hr) / (max_hr - rest_hr)
    result = duration_min * ratio * ratio
    if not math.isfinite(result):
        return 0.0
    return result


def calculate_load(
    effort_score: Optional[float],
    rpe: Optional[int],
    duration_minutes: float,
    heart_rate_avg: Optional[float] = None,
    resting_hr: Optional[float] = None,
    max_hr: Optional[float] = None,
) -> Optional[TrainingLoad]:
    """Source selection and value in one step; None if nothing qualifies."""
    source = select_load_source(effort_score, rpe, duration_minutes, heart_rate_avg, resting_hr, max_hr)
    if source is None:
        return None
    value = compute_load_value(
        source,
        duration_minutes,
        effort_score=effort_score,
        rpe=rpe,
        heart_rate_avg=heart_rate_avg,
        resting_hr=resting_hr,
        max_hr=max_hr,
    )
    return TrainingLoad(value=value, source=source)


def load_for_workout(
    workout: WorkoutSummary,
    resting_hr: Optional[float] = None,
    max_hr: Optional[float] = None,
) -> Optional[TrainingLoad]:
    return calculate_load(
        effort_score=workout.effort_score,
        rpe=workout.rpe,
        duration_minutes=workout.duration_minutes,
        heart_rate_avg=workout.heart_rate_avg,
        resting_hr=resting_hr,
        max_hr=max_hr,
    )


RestingHR = Union[None, float, Mapping[date, float]]


def daily_loads(
    workouts: Iterable[WorkoutSummary],
    resting_hr: RestingHR = None,
    max_hr: Optional[float] = None,
    as_of: Optional[datetime] = None,
    days: int = 28,
) -> List[DailyTrainingLoad]:
    """
    Per-day load series ending on ``as_of``, oldest day first.

    Days without workouts are filled with zero load. Same-day loads sum;
    the day's source is that of its earliest qualifying workout.

    Args:
        workouts: Workout summaries
        resting_hr: One resting heart rate for all days, or a per-day map
        max_hr: Maximum heart rate for TRIMP
        as_of: Last day of the series (defaults to now)
        days: Number of days in the series
    """
    end_day = (as_of or utc_now()).date()
    start_day = end_day - timedelta(days=days - 1)

    series: "OrderedDict[date, Dict]" = OrderedDict(
        (start_day + timedelta(days=i), {"load": 0.0, "source": None, "count": 0})
        for i in range(days)
    )

    for workout in sorted(workouts, key=lambda w: w.date):
        day = workout.date.date()
        bucket = series.get(day)
        if bucket is None:
            continue

        rest = resting_hr.get(day) if isinstance(resting_hr, Mapping) else resting_hr
        load = load_for_workout(workout, resting_hr=rest, max_hr=max_hr)
        if load is None:
            logger.debug(f"No load source for workout {workout.id}")
            continue

        bucket["load"] += load.value
        bucket["count"] += 1
        if bucket["source"] is None:
            bucket["source"] = load.source

    return [
        DailyTrainingLoad(date=day, load=b["load"], source=b["source"], workout_count=b["count"])
        for day, b in series.items()
    ]
