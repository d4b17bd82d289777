"""Tests for the command line interface."""

import json
from datetime import datetime
from io import StringIO
from unittest.mock import patch

import pytest
from rich.console import Console

from recovery_coach import cli
from recovery_coach.config import Settings
from recovery_coach.exceptions import ValidationError


SNAPSHOT = {
    "asOf": "2024-05-01T18:00:00",
    "profile": {"age": 40},
    "restingHeartRates": {"2024-04-28": 50, "2024-04-30": 55},
    "workouts": [
        {
            "id": "run-1",
            "activityType": "running",
            "date": "2024-04-30T07:00:00",
            "duration": 1800,
            "distance": 5200,
            "calories": 380,
            "rpe": 6,
        },
        {
            "id": "ride-1",
            "activityType": "cycling",
            "date": "2024-04-28T09:00:00",
            "duration": 3600,
            "distance": 30000,
            "heartRateAvg": 135,
        },
    ],
    "exerciseRecords": [
        {
            "id": "rec-1",
            "date": "2024-05-01T16:00:00",
            "exerciseDefinitionId": "barbell-bench-press",
            "sets": [{"weightKg": 80, "reps": 5}] * 20,
        },
    ],
    "injuries": [
        {"id": "inj-1", "bodyPart": "knee", "severity": 1, "startDate": "2024-04-10T00:00:00", "endDate": "2024-04-20T00:00:00"},
    ],
}


@pytest.fixture
def snapshot_path(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps(SNAPSHOT))
    return path


@pytest.fixture
def output():
    """Swap the CLI console for one writing to a buffer."""
    buffer = StringIO()
    test_console = Console(file=buffer, width=200, color_system=None)
    with patch.object(cli, "console", test_console), \
            patch.object(cli, "get_settings", return_value=Settings()), \
            patch.object(cli, "configure_logging"):
        yield buffer


def run_json(output, *argv):
    cli.main(list(argv) + ["--json"])
    return json.loads(output.getvalue())


class TestParseAsOf:
    """Tests for --as-of parsing."""

    def test_end_of_day(self):
        parsed = cli.parse_as_of("2024-05-01")

        assert (parsed.hour, parsed.minute, parsed.second) == (23, 59, 59)

    def test_none(self):
        assert cli.parse_as_of(None) is None

    def test_invalid(self):
        with pytest.raises(ValidationError):
            cli.parse_as_of("05/01/2024")


class TestCommands:
    """Smoke tests for each subcommand."""

    def test_fatigue_json(self, output, snapshot_path):
        data = run_json(output, "fatigue", "--snapshot", str(snapshot_path))

        chest = next(s for s in data["fatigue"] if s["muscle"] == "chest")
        assert data["status"] == "complete"
        assert data["event_count"] == 3
        assert chest["level"] >= 8

    def test_fatigue_table(self, output, snapshot_path):
        cli.main(["fatigue", "--snapshot", str(snapshot_path)])

        text = output.getvalue()
        assert "Muscle Fatigue" in text
        assert "chest" in text

    def test_recommend_json(self, output, snapshot_path):
        """Test the freshly trained chest is not suggested."""
        data = run_json(output, "recommend", "--snapshot", str(snapshot_path))

        assert data["exercises"]
        assert "chest" not in data["targeted_muscles"]
        assert data["rationale"] == "recovered_muscles"

    def test_recommend_table(self, output, snapshot_path):
        cli.main(["recommend", "--snapshot", str(snapshot_path)])

        assert "Focus:" in output.getvalue()

    def test_load_json(self, output, snapshot_path):
        data = run_json(output, "load", "--snapshot", str(snapshot_path), "--days", "7")

        assert len(data) == 7
        assert data[-1]["date"] == "2024-05-01"
        by_date = {d["date"]: d for d in data}
        assert by_date["2024-04-30"]["source"] == "rpe"
        assert by_date["2024-04-29"]["source"] is None

    def test_load_trimp_from_profile_age(self, output, snapshot_path):
        """Test max HR is estimated from the profile age for TRIMP."""
        data = run_json(output, "load", "--snapshot", str(snapshot_path), "--days", "7")

        ride = {d["date"]: d for d in data}["2024-04-28"]
        assert ride["source"] == "trimp"
        assert ride["load"] == pytest.approx(60 * (85 / 130) ** 2, abs=0.01)

    def test_load_max_hr_override(self, output, snapshot_path):
        """Test --max-hr wins over the profile; an average above it gives zero."""
        data = run_json(output, "load", "--snapshot", str(snapshot_path), "--days", "7", "--max-hr", "130")

        ride = {d["date"]: d for d in data}["2024-04-28"]
        assert ride["source"] == "trimp"
        assert ride["load"] == 0.0

    def test_records_json(self, output, snapshot_path):
        data = run_json(output, "records", "--snapshot", str(snapshot_path))

        assert set(data) == {"running", "cycling"}
        assert data["running"]["longestDistance"]["value"] == 5200.0
        assert data["running"]["longestDistance"]["workoutId"] == "run-1"

    def test_records_table_shows_milestones(self, output, snapshot_path):
        cli.main(["records", "--snapshot", str(snapshot_path)])

        text = output.getvalue()
        assert "Personal Records" in text
        assert "fiveK" in text

    def test_injuries_json(self, output, snapshot_path):
        data = run_json(output, "injuries", "--snapshot", str(snapshot_path), "--window", "14")

        stats = data["statistics"]
        [comparison] = data["volume_comparisons"]
        assert stats["total_count"] == 1
        assert stats["longest_recovery_days"] == 10
        assert comparison["post_injury_count"] == 3
        assert comparison["during_injury_count"] == 0

    def test_as_of_override(self, output, snapshot_path):
        """Test --as-of moves the evaluation to the end of that day."""
        data = run_json(output, "fatigue", "--snapshot", str(snapshot_path), "--as-of", "2024-04-29")

        assert data["as_of"] == "2024-04-29T23:59:59"
        assert data["event_count"] == 1

    def test_fallback_clock_matches_utc_timestamps(self, output, tmp_path):
        """Test a session stamped with an offset counts when the snapshot has no asOf."""
        path = tmp_path / "aware.json"
        path.write_text(json.dumps({
            "exerciseRecords": [{
                "id": "rec-1",
                "date": "2024-05-01T15:00:00-05:00",
                "exerciseDefinitionId": "barbell-bench-press",
                "sets": [{"weightKg": 80, "reps": 5}] * 4,
            }],
        }))

        with patch.object(cli, "utc_now", return_value=datetime(2024, 5, 1, 21, 0)):
            data = run_json(output, "fatigue", "--snapshot", str(path))

        chest = next(s for s in data["fatigue"] if s["muscle"] == "chest")
        assert data["as_of"] == "2024-05-01T21:00:00"
        assert data["event_count"] == 1
        assert chest["level"] > 0
        assert chest["last_trained_date"] == "2024-05-01T20:00:00"


class TestErrors:
    """Tests for error handling at the entry point."""

    def test_missing_snapshot_exits(self, output, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["fatigue", "--snapshot", str(tmp_path / "missing.json")])

        assert exc_info.value.code == 1
        assert "Snapshot file not found" in output.getvalue()

    def test_bad_as_of_exits(self, output, snapshot_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["fatigue", "--snapshot", str(snapshot_path), "--as-of", "yesterday"])

        assert exc_info.value.code == 1

    def test_no_command_prints_help(self, output, capsys):
        cli.main([])

        assert "recovery-coach" in capsys.readouterr().out
