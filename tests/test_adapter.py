"""Tests for the workspace layer — validation, loading and the file-backed adapter."""

import json

import pytest
import yaml

from studyplan.adapter import run_rolling_planning, run_study_planning, run_weekly_analysis
from studyplan.fileio import read_json, write_json_atomic
from studyplan.preferences import load_pomodoro_minutes, load_preferences, validate_preferences
from studyplan.sessions import load_completed_sessions, load_schedule, validate_completed_session
from studyplan.tasks import find_task, load_tasks, validate_task
from studyplan.workspace import current_day_index, get_user_timezone, workspace_root


# ── Validation ────────────────────────────────────────────────


def test_validate_task():
    assert validate_task({"id": "a", "name": "A", "estimated_hours": 2}) == []
    errors = validate_task({"estimated_hours": -1, "urgency": "high", "deadline_day_index": 9})
    assert "Missing required field: id" in errors
    assert "estimated_hours must be >= 0" in errors
    assert "urgency must be numeric" in errors
    assert "deadline_day_index must be 0-6" in errors


def test_validate_preferences():
    assert validate_preferences({}) == []
    errors = validate_preferences({
        "wake_time": "23:00",
        "sleep_time": "07:00",
        "max_consecutive_pomodoros": 0,
        "unavailable_slots": [{"day": "mon", "start": "10:00", "end": "09:00", "type": "busy"}],
    })
    assert "wake_time must be before sleep_time" in errors
    assert "max_consecutive_pomodoros must be an integer >= 1" in errors
    assert "unavailable_slots[0]: start must be before end" in errors
    assert "unavailable_slots[0]: Invalid slot type: busy" in errors


def test_validate_preferences_camel_case_keys():
    slots = [{"dayOfWeek": 0, "startMinutes": 540, "endMinutes": 600, "type": "unavailable"}]
    assert validate_preferences({"wakeTimeMinutes": 420, "unavailableSlots": slots}) == []

    errors = validate_preferences({
        "wakeTimeMinutes": 1300,
        "sleepTimeMinutes": 100,
        "maxConsecutivePomodoros": 0,
        "unavailableSlots": [{"dayOfWeek": 0, "startMinutes": 600, "endMinutes": 540}],
    })
    assert "wake_time must be before sleep_time" in errors
    assert "max_consecutive_pomodoros must be an integer >= 1" in errors
    assert "unavailable_slots[0]: start must be before end" in errors


def test_camel_case_preferences_file(workspace):
    path = workspace / "preferences.yaml"
    path.write_text(yaml.dump({
        "wakeTimeMinutes": 420,
        "sleepTimeMinutes": 1200,
        "unavailableSlots": [{"dayOfWeek": 1, "startMinutes": 540, "endMinutes": 600}],
    }), encoding="utf-8")
    prefs = load_preferences(workspace)
    assert prefs.wake_time_minutes == 420
    assert prefs.unavailable_slots[0].start_minutes == 540

    path.write_text(yaml.dump({"wakeTimeMinutes": 1300, "sleepTimeMinutes": 100}), encoding="utf-8")
    with pytest.raises(ValueError, match="wake_time must be before sleep_time"):
        load_preferences(workspace)


def test_validate_completed_session():
    ok = {"taskId": "a", "durationMinutes": 25, "focusRating": 4, "dayOfWeek": 1, "timeOfDay": "night"}
    assert validate_completed_session(ok) == []
    bad = dict(ok, focusRating=7, timeOfDay="noon")
    assert validate_completed_session(bad) == ["focusRating must be within 0-5", "Invalid timeOfDay: noon"]


# ── Loading ───────────────────────────────────────────────────


def test_workspace_root_from_env(workspace):
    assert workspace_root() == workspace.resolve()


def test_timezone_and_day(workspace):
    assert str(get_user_timezone(workspace)) == "UTC"
    assert 0 <= current_day_index(workspace) <= 6


def test_load_workspace_files(workspace):
    prefs = load_preferences(workspace)
    assert prefs.wake_time_minutes == 480
    assert len(prefs.unavailable_slots) == 2
    assert load_pomodoro_minutes(workspace) == 25

    tasks = load_tasks(workspace)
    assert [t.id for t in tasks] == ["thesis", "reading"]
    assert find_task(tasks, "reading").estimated_hours == 2
    assert find_task(tasks, "missing") is None

    completed = load_completed_sessions(workspace)
    assert len(completed) == 3
    assert load_schedule(root=workspace).sessions == []


def test_invalid_tasks_file_raises(workspace):
    (workspace / "tasks.yaml").write_text(
        yaml.dump({"tasks": [{"id": "a", "name": "A"}, {"id": "a", "name": "B", "estimated_hours": -2}]}),
        encoding="utf-8",
    )
    with pytest.raises(ValueError, match="duplicate id a"):
        load_tasks(workspace)


def test_invalid_sessions_file_raises(workspace):
    (workspace / "sessions.json").write_text(
        json.dumps({"sessions": [{"taskId": "a", "focusRating": 9}]}), encoding="utf-8"
    )
    with pytest.raises(ValueError, match="Invalid sessions.json"):
        load_completed_sessions(workspace)


def test_write_json_atomic_replaces_and_cleans_up(tmp_path):
    target = tmp_path / "latest" / "schedule.json"
    write_json_atomic(target, {"sessions": [1]})
    write_json_atomic(target, {"sessions": [1, 2]})
    assert read_json(target) == {"sessions": [1, 2]}
    assert [p.name for p in target.parent.iterdir()] == ["schedule.json"]


def test_write_json_atomic_failure_keeps_old_file(tmp_path):
    target = tmp_path / "schedule.json"
    write_json_atomic(target, {"sessions": []})
    with pytest.raises(TypeError):
        write_json_atomic(target, {"bad": object()})
    assert read_json(target) == {"sessions": []}
    assert [p.name for p in tmp_path.iterdir()] == ["schedule.json"]


# ── Adapter ───────────────────────────────────────────────────


def test_run_study_planning_writes_schedule(workspace):
    proposal = run_study_planning(workspace, current_day=0)
    # thesis: 4h -> 10 sessions, reading: 2h -> 5 sessions
    assert len(proposal.sessions) == 15
    assert proposal.sessions[0].task_id == "thesis"

    data = read_json(workspace / "latest" / "schedule.json")
    assert len(data["sessions"]) == 15
    assert not (workspace / "latest" / "schedule_prev.json").exists()


def test_rolling_planning_uses_previous_schedule(workspace):
    first = run_study_planning(workspace, current_day=0)
    rolled = run_rolling_planning(workspace, current_day=2)

    # 50 minutes of thesis and 25 of reading already logged
    thesis = [s for s in rolled.sessions if s.task_id == "thesis"]
    reading = [s for s in rolled.sessions if s.task_id == "reading"]
    assert len(thesis) == 8
    assert len(reading) == 4

    prev = read_json(workspace / "latest" / "schedule_prev.json")
    assert len(prev["sessions"]) == len(first.sessions)


def test_run_weekly_analysis(workspace):
    run_study_planning(workspace, current_day=0)
    recs = run_weekly_analysis(workspace)
    assert recs[0].type == "suggest_max_consecutive_pomodoros"

    data = read_json(workspace / "latest" / "analysis.json")
    assert len(data["dailyMetrics"]) == 7
    assert data["weeklyMetrics"]["averageFocus"] == pytest.approx(11 / 3, abs=1e-3)
    assert len(data["recommendations"]) == len(recs)
