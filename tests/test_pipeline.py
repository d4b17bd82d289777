"""Tests for the RecoveryPipeline."""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest

from recovery_coach.config import Settings
from recovery_coach.exceptions import DataSourceError
from recovery_coach.models.fatigue import FatigueLevel
from recovery_coach.models.health import HRVSample, SleepSummary
from recovery_coach.models.injury import InjuryInfo, InjurySeverity
from recovery_coach.models.muscles import BodyPart, MuscleGroup
from recovery_coach.models.recommendation import SuggestionRationale
from recovery_coach.pipeline import DataStatus, RecoveryPipeline


@pytest.fixture
def health(as_of):
    """Health source with a week of HRV, resting HR and a good night."""
    mock = AsyncMock()
    mock.fetch_hrv_samples.return_value = [
        HRVSample(value=v, date=as_of - timedelta(days=7 - i, hours=10))
        for i, v in enumerate([45, 47, 46, 48, 44, 46, 47, 60])
    ]
    mock.fetch_resting_heart_rate.side_effect = lambda day: 52.0 if day == as_of.date() else 53.0
    mock.fetch_sleep_summary.return_value = SleepSummary(
        date=as_of.date(), total_minutes=480, deep_ratio=0.15, rem_ratio=0.15
    )
    mock.fetch_workouts.return_value = []
    return mock


@pytest.fixture
def records(make_record):
    mock = AsyncMock()
    mock.fetch_records.return_value = [
        make_record("r1", "bench", sets=4, days_ago=1),
        make_record("r2", "squat", sets=5, days_ago=2),
    ]
    return mock


@pytest.fixture
def pipeline(health, records, library):
    return RecoveryPipeline(health=health, records=records, library=library)


def state_for(report, muscle):
    return next(s for s in report.fatigue_states if s.muscle == muscle)


class TestRecoveryPipeline:
    """Tests for an end-to-end run."""

    @pytest.mark.asyncio
    async def test_complete_run(self, pipeline, as_of):
        """Test all sources succeed."""
        report = await pipeline.run(as_of=as_of)

        assert report.status == DataStatus.COMPLETE
        assert report.failed_sources == []
        assert report.advisory is None
        assert report.event_count == 2
        assert report.hrv_baseline.is_ready
        assert report.modifiers.sleep_modifier == pytest.approx(1.15)
        assert state_for(report, MuscleGroup.CHEST).has_data
        assert not state_for(report, MuscleGroup.BICEPS).has_data

    @pytest.mark.asyncio
    async def test_recommendation_avoids_trained_muscles(self, pipeline, as_of):
        """Test the suggestion skips the freshly trained chest."""
        report = await pipeline.run(as_of=as_of)

        assert report.suggestion.rationale == SuggestionRationale.RECOVERED_MUSCLES
        assert MuscleGroup.CHEST not in report.suggestion.focus_order

    @pytest.mark.asyncio
    async def test_fetch_windows(self, pipeline, health, records, as_of):
        """Test fetches cover the lookback window ending at as_of."""
        await pipeline.run(as_of=as_of)

        health.fetch_workouts.assert_awaited_once_with(as_of - timedelta(days=14), as_of)
        records.fetch_records.assert_awaited_once_with(as_of - timedelta(days=14), as_of)
        health.fetch_hrv_samples.assert_awaited_once_with(as_of - timedelta(days=30), as_of)
        health.fetch_sleep_summary.assert_awaited_once_with(as_of.date())

    @pytest.mark.asyncio
    async def test_single_failure_is_degraded(self, pipeline, health, as_of):
        """Test one failing source gives a degraded report with neutral sleep."""
        health.fetch_sleep_summary.side_effect = DataSourceError("sleep", "timeout")

        report = await pipeline.run(as_of=as_of)

        assert report.status == DataStatus.DEGRADED
        assert report.failed_sources == ["sleep"]
        assert "1 of 6" in report.advisory
        assert report.modifiers.sleep_modifier == 1.0
        assert report.event_count == 2

    @pytest.mark.asyncio
    async def test_failed_records_keep_other_sources(self, pipeline, records, as_of):
        records.fetch_records.side_effect = RuntimeError("database locked")

        report = await pipeline.run(as_of=as_of)

        assert report.failed_sources == ["exercise_records"]
        assert report.event_count == 0
        assert report.hrv_baseline.is_ready

    @pytest.mark.asyncio
    async def test_all_failures_unavailable(self, pipeline, health, records, as_of):
        """Test every source failing gives neutral defaults, not an error."""
        for method in (
            health.fetch_hrv_samples,
            health.fetch_resting_heart_rate,
            health.fetch_sleep_summary,
            health.fetch_workouts,
            records.fetch_records,
        ):
            method.side_effect = DataSourceError("health", "offline")

        report = await pipeline.run(as_of=as_of)

        assert report.status == DataStatus.UNAVAILABLE
        assert report.failed_sources == list(RecoveryPipeline.SOURCES)
        assert report.modifiers.combined == 1.0
        assert all(s.level == FatigueLevel.NO_DATA for s in report.fatigue_states)
        assert report.suggestion.rationale == SuggestionRationale.NO_TRAINING_HISTORY

    @pytest.mark.asyncio
    async def test_none_results_are_neutral(self, pipeline, health, records, as_of):
        """Test sources returning None behave like empty data."""
        health.fetch_hrv_samples.return_value = None
        records.fetch_records.return_value = None

        report = await pipeline.run(as_of=as_of)

        assert report.status == DataStatus.COMPLETE
        assert report.event_count == 0
        assert not report.hrv_baseline.is_ready

    @pytest.mark.asyncio
    async def test_injuries_passed_to_recommender(self, pipeline, as_of):
        injuries = [InjuryInfo(
            id="inj-1",
            body_part=BodyPart.UPPER_BACK,
            severity=InjurySeverity.SEVERE,
            start_date=as_of - timedelta(days=3),
        )]

        report = await pipeline.run(as_of=as_of, injuries=injuries)

        assert MuscleGroup.BACK not in report.suggestion.focus_order
        assert MuscleGroup.LATS not in report.suggestion.focus_order

    @pytest.mark.asyncio
    async def test_report_to_dict(self, pipeline, as_of):
        data = (await pipeline.run(as_of=as_of)).to_dict()

        assert data["status"] == "complete"
        assert len(data["fatigue"]) == len(MuscleGroup)
        assert "suggestion" in data


class TestFromSettings:
    """Tests for settings-driven construction."""

    def test_engines_use_settings(self, health, records, library):
        settings = Settings(lookback_days=7, fatigue_half_life_hours=36.0, focus_muscle_count=2)

        pipeline = RecoveryPipeline.from_settings(health, records, library=library, settings=settings)

        assert pipeline.fatigue_engine.lookback_days == 7
        assert pipeline.fatigue_engine.half_life_hours == 36.0
        assert pipeline.recommender.focus_muscle_count == 2

    def test_default_library_loaded(self, health, records):
        pipeline = RecoveryPipeline.from_settings(health, records, settings=Settings())

        assert len(pipeline.library.all_exercises()) > 0
