"""
Recovery modifier calculation.

Two independent multiplicative scalars feed the fatigue decay rate:

- sleep modifier from last night's duration and deep/REM share
- readiness modifier from the HRV z-score and the resting heart rate delta

Both return exactly 1.0 when their inputs are missing and are clamped to a
fixed range. Non-finite inputs are treated as missing.
"""

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.fatigue import RecoveryModifiers
from ..models.health import HRVSample, SleepSummary

logger = logging.getLogger(__name__)


def _finite(value: Optional[float]) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return value


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


class ConditionStatus(str, Enum):
    """Condition score bands."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    TIRED = "tired"
    WARNING = "warning"

    @classmethod
    def from_score(cls, score: int) -> "ConditionStatus":
        if score >= 80:
            return cls.EXCELLENT
        if score >= 60:
            return cls.GOOD
        if score >= 40:
            return cls.FAIR
        if score >= 20:
            return cls.TIRED
        return cls.WARNING


@dataclass(frozen=True)
class HRVBaseline:
    """
    Today's HRV relative to the personal ln-domain baseline.

    ``z_score`` is None until enough valid daily averages exist.
    """
    days_collected: int
    days_required: int
    today_average: Optional[float] = None
    ln_mean: Optional[float] = None
    ln_std: Optional[float] = None
    z_score: Optional[float] = None
    condition_score: Optional[int] = None

    @property
    def is_ready(self) -> bool:
        return self.z_score is not None

    @property
    def condition_status(self) -> Optional[ConditionStatus]:
        if self.condition_score is None:
            return None
        return ConditionStatus.from_score(self.condition_score)

    def to_dict(self) -> dict:
        return {
            "days_collected": self.days_collected,
            "days_required": self.days_required,
            "today_average": self.today_average,
            "ln_mean": self.ln_mean,
            "ln_std": self.ln_std,
            "z_score": round(self.z_score, 3) if self.z_score is not None else None,
            "condition_score": self.condition_score,
            "condition_status": self.condition_status.value if self.condition_status else None,
        }


def daily_hrv_averages(samples: Iterable[HRVSample]) -> List[Tuple[date, float]]:
    """Per-calendar-day mean HRV, newest day first."""
    grouped: Dict[date, List[float]] = defaultdict(list)
    for sample in samples:
        grouped[sample.date.date()].append(sample.value)

    averages = [(day, sum(values) / len(values)) for day, values in grouped.items()]
    averages.sort(key=lambda item: item[0], reverse=True)
    return averages


def compute_hrv_baseline(
    samples: Iterable[HRVSample],
    today_rhr: Optional[float] = None,
    yesterday_rhr: Optional[float] = None,
    min_days: int = 7,
) -> HRVBaseline:
    """
    Compute the ln-domain HRV z-score and 0-100 condition score.

    Daily averages that are non-positive or non-finite are discarded
    before counting days. The mean and standard deviation cover every
    valid day including today; the standard deviation is floored so that
    very stable users do not produce exploding scores.
    """
    averages = [
        (day, value) for day, value in daily_hrv_averages(samples)
        if math.isfinite(value) and value > 0
    ]
    if len(averages) < min_days:
        return HRVBaseline(days_collected=len(averages), days_required=min_days)

    today_value = averages[0][1]
    ln_values = [math.log(value) for _, value in averages]
    ln_mean = sum(ln_values) / len(ln_values)
    variance = sum((v - ln_mean) ** 2 for v in ln_values) / len(ln_values)
    ln_std = max(math.sqrt(variance), RecoveryModifierCalculator.MIN_LN_STD)

    z_score = (math.log(today_value) - ln_mean) / ln_std
    if not math.isfinite(z_score):
        logger.warning("Non-finite HRV z-score, treating baseline as unavailable")
        return HRVBaseline(days_collected=len(averages), days_required=min_days)

    raw = 50.0 + z_score * 25.0
    delta = rhr_delta(today_rhr, yesterday_rhr)
    if delta is not None:
        if delta > 2.0 and z_score < 0:
            raw -= delta * 2.0
        elif delta < -2.0 and z_score > 0:
            raw += abs(delta)

    return HRVBaseline(
        days_collected=len(averages),
        days_required=min_days,
        today_average=today_value,
        ln_mean=ln_mean,
        ln_std=ln_std,
        z_score=z_score,
        condition_score=int(round(_clamp(raw, 0.0, 100.0))),
    )


def rhr_delta(today: Optional[float], yesterday: Optional[float]) -> Optional[float]:
    """Today's resting heart rate minus yesterday's, None if either is unusable."""
    today = _finite(today)
    yesterday = _finite(yesterday)
    if today is None or yesterday is None or today <= 0 or yesterday <= 0:
        return None
    return today - yesterday


class RecoveryModifierCalculator:
    """Maps sleep and readiness signals to decay-rate scalars."""

    SLEEP_BOUNDS = (0.5, 1.25)
    READINESS_BOUNDS = (0.6, 1.2)
    MIN_LN_STD = 0.05

    # (minimum hours, base factor), checked top-down
    SLEEP_HOURS_FACTORS = (
        (8.0, 1.15),
        (7.0, 1.0),
        (6.0, 0.85),
        (5.0, 0.70),
    )
    SHORT_SLEEP_FACTOR = 0.55

    # (minimum z-score, modifier), checked top-down
    Z_SCORE_FACTORS = (
        (1.0, 1.15),
        (0.0, 1.05),
        (-0.5, 1.0),
        (-1.0, 0.85),
    )
    LOW_Z_SCORE_FACTOR = 0.70

    def sleep_modifier(
        self,
        total_minutes: Optional[float] = None,
        deep_ratio: Optional[float] = None,
        rem_ratio: Optional[float] = None,
    ) -> float:
        """
        Sleep-based modifier in [0.5, 1.25]; 1.0 without usable duration.

        Deep and REM shares each add 0.05 at 20% or more and subtract 0.05
        under 10%.
        """
        minutes = _finite(total_minutes)
        if minutes is None or not 0 <= minutes <= 1440:
            return 1.0

        hours = minutes / 60.0
        factor = self.SHORT_SLEEP_FACTOR
        for min_hours, value in self.SLEEP_HOURS_FACTORS:
            if hours >= min_hours:
                factor = value
                break

        for ratio in (deep_ratio, rem_ratio):
            ratio = _finite(ratio)
            if ratio is None or not 0 <= ratio <= 1:
                continue
            if ratio >= 0.20:
                factor += 0.05
            elif ratio < 0.10:
                factor -= 0.05

        return _clamp(factor, *self.SLEEP_BOUNDS)

    def readiness_modifier(
        self,
        hrv_z_score: Optional[float] = None,
        rhr_delta: Optional[float] = None,
    ) -> float:
        """Readiness modifier in [0.6, 1.2]; 1.0 without HRV or RHR signal."""
        z = _finite(hrv_z_score)
        delta = _finite(rhr_delta)

        if z is None:
            if delta is not None:
                if delta >= 5:
                    return 0.85
                if delta <= -2:
                    return 1.05
            return 1.0

        modifier = self.LOW_Z_SCORE_FACTOR
        for min_z, value in self.Z_SCORE_FACTORS:
            if z >= min_z:
                modifier = value
                break

        if delta is not None:
            if delta >= 5:
                modifier = min(modifier, 0.75)
            elif delta <= -2:
                modifier = min(modifier + 0.05, self.READINESS_BOUNDS[1])

        return _clamp(modifier, *self.READINESS_BOUNDS)

    def modifiers(
        self,
        sleep: Optional[SleepSummary] = None,
        hrv_z_score: Optional[float] = None,
        rhr_delta: Optional[float] = None,
    ) -> RecoveryModifiers:
        if sleep is None:
            sleep_mod = 1.0
        else:
            sleep_mod = self.sleep_modifier(sleep.total_minutes, sleep.deep_ratio, sleep.rem_ratio)

        readiness_mod = self.readiness_modifier(hrv_z_score, rhr_delta)
        logger.debug(f"Recovery modifiers: sleep={sleep_mod:.2f}, readiness={readiness_mod:.2f}")
        return RecoveryModifiers(sleep_modifier=sleep_mod, readiness_modifier=readiness_mod)
