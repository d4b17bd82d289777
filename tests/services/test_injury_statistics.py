"""Tests for the InjuryStatisticsService."""

from datetime import datetime, timedelta

import pytest

from recovery_coach.models.injury import InjuryInfo, InjurySeverity
from recovery_coach.models.muscles import BodyPart
from recovery_coach.services.injury_statistics import InjuryStatisticsService


DAY0 = datetime(2024, 3, 1, 9, 0)


def day(offset, hour=9):
    return DAY0.replace(hour=hour) + timedelta(days=offset)


def make_injury(injury_id, body_part=BodyPart.KNEE, start=0, end=None, severity=InjurySeverity.MODERATE):
    return InjuryInfo(
        id=injury_id,
        body_part=body_part,
        severity=severity,
        start_date=day(start),
        end_date=day(end) if end is not None else None,
    )


@pytest.fixture
def service():
    return InjuryStatisticsService(window_days=14)


class TestComputeStatistics:
    """Tests for aggregate injury statistics."""

    def test_empty_history(self, service):
        stats = service.compute_statistics([], as_of=day(30))

        assert stats.total_count == 0
        assert stats.active_count == 0
        assert stats.frequency_by_body_part == ()
        assert stats.average_recovery_days is None
        assert stats.longest_recovery_days is None

    def test_frequency_ordering(self, service):
        """Test body parts are ordered by count, then body part order."""
        injuries = [
            make_injury("a", BodyPart.ANKLE, 0, 5),
            make_injury("b", BodyPart.KNEE, 10, 20),
            make_injury("c", BodyPart.SHOULDER, 30, 33),
            make_injury("d", BodyPart.KNEE, 40),
        ]

        stats = service.compute_statistics(injuries, as_of=day(50))

        assert [(f.body_part, f.count) for f in stats.frequency_by_body_part] == [
            (BodyPart.KNEE, 2),
            (BodyPart.SHOULDER, 1),
            (BodyPart.ANKLE, 1),
        ]

    def test_recovery_days_from_ended_injuries_only(self, service):
        """Test active injuries do not count toward recovery averages."""
        injuries = [
            make_injury("a", start=0, end=4),
            make_injury("b", start=10, end=20),
            make_injury("c", start=30),
        ]

        stats = service.compute_statistics(injuries, as_of=day(60))

        assert stats.total_count == 3
        assert stats.active_count == 1
        assert stats.average_recovery_days == pytest.approx(7.0)
        assert stats.longest_recovery_days == 10


class TestVolumeComparisons:
    """Tests for training-day counts around injuries."""

    def test_pre_during_post_windows(self):
        """Test each window counts only its own days."""
        service = InjuryStatisticsService(window_days=7)
        injury = make_injury("knee", start=0, end=10)
        dates = [day(-20), day(-5), day(5), day(12), day(20)]

        [comparison] = service.compute_volume_comparisons([injury], dates, as_of=day(30))

        assert comparison.pre_injury_count == 1
        assert comparison.during_injury_count == 1
        assert comparison.post_injury_count == 1

    def test_default_window_reaches_day_twenty(self, service):
        """Test with a 14-day window, end + 10 days still lands in the post window."""
        injury = make_injury("knee", start=0, end=10)
        dates = [day(-20), day(-5), day(5), day(12), day(20)]

        [comparison] = service.compute_volume_comparisons([injury], dates, as_of=day(30))

        assert comparison.pre_injury_count == 1
        assert comparison.during_injury_count == 1
        assert comparison.post_injury_count == 2

    def test_distinct_days_counted_once(self, service):
        """Test several sessions on one day count as one training day."""
        injury = make_injury("knee", start=0, end=10)
        dates = [day(3, 7), day(3, 18), day(3, 21)]

        [comparison] = service.compute_volume_comparisons([injury], dates, as_of=day(30))

        assert comparison.during_injury_count == 1

    def test_boundaries(self):
        """Test start belongs to during, end + window belongs to post."""
        service = InjuryStatisticsService(window_days=7)
        injury = make_injury("knee", start=0, end=10)
        dates = [day(-7), day(0), day(10), day(17), day(18)]

        [comparison] = service.compute_volume_comparisons([injury], dates, as_of=day(30))

        assert comparison.pre_injury_count == 1
        assert comparison.during_injury_count == 2
        assert comparison.post_injury_count == 1

    def test_active_injury_has_no_post_window(self, service):
        """Test an active injury runs until as_of and has no post count."""
        injury = make_injury("knee", start=0)
        dates = [day(2), day(8), day(15)]

        [comparison] = service.compute_volume_comparisons([injury], dates, as_of=day(10))

        assert comparison.during_injury_count == 2
        assert comparison.post_injury_count is None

    @pytest.mark.parametrize("window", [0, -3])
    def test_non_positive_window(self, service, window):
        """Test a non-positive window gives no comparisons."""
        injury = make_injury("knee", start=0, end=10)

        assert service.compute_volume_comparisons([injury], [day(1)], window_days=window) == []

    def test_input_order_preserved(self, service):
        injuries = [make_injury("second", start=20, end=25), make_injury("first", start=0, end=5)]

        comparisons = service.compute_volume_comparisons(injuries, [], as_of=day(40))

        assert [c.injury_id for c in comparisons] == ["second", "first"]
        assert all(c.pre_injury_count == 0 for c in comparisons)
