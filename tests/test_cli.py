import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from groom_advisor.cli import app

runner = CliRunner()

DAY = {
    "hasAssistant": False,
    "totalDriveMinutes": 40,
    "appointments": [
        {"id": "a1", "status": "COMPLETED", "startAt": "2025-03-04T08:00:00", "serviceMinutes": 60, "price": 80, "pet": {"weight": 14}},
        {"id": "a2", "status": "COMPLETED", "startAt": "2025-03-04T09:30:00", "serviceMinutes": 60, "price": 120, "pet": {"weight": 95}},
        {"id": "a3", "status": "SCHEDULED", "startAt": "2025-03-04T11:25:00", "serviceMinutes": 60, "price": 90, "pet": {"weight": 30}},
        {"id": "a4", "status": "CANCELLED", "startAt": "2025-03-04T13:00:00", "serviceMinutes": 60, "pet": {"weight": 30}},
    ],
    "breaks": [{"taken": True, "takenAt": "2025-03-04T07:30:00", "durationMinutes": 10}],
}


def _write(tmp_path: Path, payload: dict) -> Path:
    path = tmp_path / "schedule.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_size_command() -> None:
    result = runner.invoke(app, ["size", "--weight-lbs", "95"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["size"] == "giant"
    assert payload["energy_cost"] == 3.0
    assert payload["energy_cost_with_assistant"] == 2.4


def test_break_command(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    result = runner.invoke(app, ["break", "--schedule", str(path), "--now", "2025-03-04T11:00:00"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["suggestion"]["should_suggest"] is True
    assert payload["suggestion"]["trigger"] == "afterLargeDog"
    assert payload["suggestion"]["suggested_duration_minutes"] == 15
    assert payload["stats"]["breaks_taken_today"] == 1


def test_today_command(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    result = runner.invoke(app, ["today", "--schedule", str(path), "--now", "2025-03-04T11:00:00"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["workload"]["dogs_scheduled"] == 3
    assert payload["workload"]["dogs_completed"] == 2
    assert payload["workload"]["total_energy_load"] == 5.5
    assert payload["workload"]["day_status"] == "in-progress"
    assert payload["workload"]["avg_drive_minutes_between_stops"] == 20
    assert payload["headline"]["headline_key"] == "calmDay"
    assert payload["estimated_finish"] == "12:25 PM"
    assert payload["route_efficiency"]["rating_key"] == "good"
    assert payload["wellness"].startswith("One break today")
    assert payload["large_dogs_comparison"].startswith("Most groomers limit large dogs")
    assert payload["drive_time_comparison"] == "Drive times are right where they should be."
    assert payload["revenue_band"] == "light"
    assert payload["finish_band"] == "early"
    assert payload["timing"] == {"buffer_minutes": 15, "remaining_service_minutes": 60}


def test_today_assistant_flag_overrides_file(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    result = runner.invoke(
        app, ["today", "--schedule", str(path), "--now", "2025-03-04T11:00:00", "--assistant"]
    )
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["has_assistant"] is True
    assert payload["workload"]["total_energy_load"] == 4.4
    assert payload["timing"] == {"buffer_minutes": 12, "remaining_service_minutes": 45}


def test_week_and_insights_commands(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    week = runner.invoke(app, ["week", "--schedule", str(path)])
    assert week.exit_code == 0, week.output
    summary = json.loads(week.output)
    assert summary["dogs_groomed"] == 2
    assert summary["headline_key"] == "balancedWeek"
    assert summary["comparison"] == "Steady week - consistent and controlled."
    assert summary["revenue_band"] == "light"

    insights = runner.invoke(app, ["insights", "--schedule", str(path)])
    assert insights.exit_code == 0, insights.output
    payload = json.loads(insights.output)
    assert payload["averages"]["cancellation_rate"] == pytest.approx(100 / 3)
    assert payload["insights"]["dogs_per_day"]["comparison_label"] == "Lighter than typical"


def test_slots_command(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    result = runner.invoke(app, ["slots", "--schedule", str(path)])
    assert result.exit_code == 0, result.output
    slots = json.loads(result.output)["slots"]
    assert [s["break_type"] for s in slots] == ["short", "short"]


def test_missing_schedule_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["today", "--schedule", str(tmp_path / "missing.json")])
    assert result.exit_code != 0


def test_schedule_from_environment(tmp_path: Path) -> None:
    path = _write(tmp_path, DAY)
    result = runner.invoke(app, ["slots"], env={"GROOM_SCHEDULE_PATH": str(path)})
    assert result.exit_code == 0, result.output


def test_break_uses_schedule_offset_for_naive_now(tmp_path: Path) -> None:
    aware = {
        "appointments": [
            {"id": "a1", "status": "COMPLETED", "startAt": "2025-03-04T08:00:00Z", "serviceMinutes": 60, "pet": {"weight": 95}},
            {"id": "a2", "status": "SCHEDULED", "startAt": "2025-03-04T11:25:00Z", "serviceMinutes": 60},
        ],
        "breaks": [{"taken": True, "takenAt": "2025-03-04T07:30:00Z", "durationMinutes": 10}],
    }
    path = _write(tmp_path, aware)
    result = runner.invoke(app, ["break", "--schedule", str(path), "--now", "2025-03-04T11:00:00"])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["suggestion"]["trigger"] == "afterLargeDog"


def test_mixed_offsets_exit_cleanly(tmp_path: Path) -> None:
    mixed = dict(DAY, breaks=[{"taken": True, "takenAt": "2025-03-04T07:30:00Z", "durationMinutes": 10}])
    path = _write(tmp_path, mixed)
    result = runner.invoke(app, ["today", "--schedule", str(path), "--now", "2025-03-04T11:00:00"])
    assert result.exit_code != 0
    assert "UTC offset" in result.output


def test_non_finite_service_minutes_exit_cleanly(tmp_path: Path) -> None:
    broken = {"appointments": [{"id": "a1", "startAt": "2025-03-04T08:00:00", "serviceMinutes": "inf"}]}
    path = _write(tmp_path, broken)
    result = runner.invoke(app, ["slots", "--schedule", str(path)])
    assert result.exit_code != 0
    assert not isinstance(result.exception, OverflowError)
