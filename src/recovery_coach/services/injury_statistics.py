"""Injury history aggregation."""

import logging
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence, Set

from ..models.injury import (
    BodyPartFrequency,
    InjuryInfo,
    InjuryStatistics,
    InjuryVolumeComparison,
)
from ..utils.dates import utc_now

logger = logging.getLogger(__name__)


class InjuryStatisticsService:
    """
    Pure aggregation over injury snapshots.

    Volume windows count distinct calendar days that had at least one
    exercise:

        pre     [start - W, start)
        during  [start, end]
        post    (end, end + W]

    Active injuries use ``as_of`` as their end and have no post window.
    """

    def __init__(self, window_days: int = 14):
        self.window_days = window_days

    def compute_statistics(
        self,
        injuries: Sequence[InjuryInfo],
        as_of: Optional[datetime] = None,
    ) -> InjuryStatistics:
        as_of = as_of or utc_now()
        counts = Counter(injury.body_part for injury in injuries)
        frequency = sorted(
            (BodyPartFrequency(body_part=part, count=count) for part, count in counts.items()),
            key=lambda f: (-f.count, f.body_part.order),
        )

        recovery_days = [i.duration_days(as_of) for i in injuries if not i.is_active]
        average = sum(recovery_days) / len(recovery_days) if recovery_days else None

        return InjuryStatistics(
            total_count=len(injuries),
            active_count=sum(1 for i in injuries if i.is_active),
            frequency_by_body_part=tuple(frequency),
            average_recovery_days=average,
            longest_recovery_days=max(recovery_days) if recovery_days else None,
        )

    def compute_volume_comparisons(
        self,
        injuries: Iterable[InjuryInfo],
        exercise_dates: Iterable[datetime],
        window_days: Optional[int] = None,
        as_of: Optional[datetime] = None,
    ) -> List[InjuryVolumeComparison]:
        """
        Training-day counts around each injury, in input order.

        Returns an empty list for a non-positive window.
        """
        window = self.window_days if window_days is None else window_days
        if window <= 0:
            logger.debug(f"Non-positive comparison window {window}, skipping")
            return []

        today = (as_of or utc_now()).date()
        training_days = {d.date() if isinstance(d, datetime) else d for d in exercise_dates}
        span = timedelta(days=window)

        comparisons = []
        for injury in injuries:
            start = injury.start_date.date()
            end = injury.end_date.date() if injury.end_date else today

            post = None
            if not injury.is_active:
                post = _count_days(training_days, lambda d: end < d <= end + span)

            comparisons.append(InjuryVolumeComparison(
                injury_id=injury.id,
                body_part=injury.body_part,
                severity=injury.severity,
                pre_injury_count=_count_days(training_days, lambda d: start - span <= d < start),
                during_injury_count=_count_days(training_days, lambda d: start <= d <= end),
                post_injury_count=post,
            ))
        return comparisons


def _count_days(days: Set[date], predicate) -> int:
    return sum(1 for d in days if predicate(d))
