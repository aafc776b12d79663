"""Shared test fixtures for studyplan tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest
import yaml


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a temporary workspace with standard structure."""
    root = tmp_path / "workspace"
    (root / "latest").mkdir(parents=True)

    # Preferences
    preferences = {
        "timezone": "UTC",
        "wake_time": "08:00",
        "sleep_time": "22:00",
        "preferred_activity_time": "morning",
        "max_consecutive_pomodoros": 4,
        "pomodoro_minutes": 25,
        "unavailable_slots": [
            {"day": "mon", "start": "12:00", "end": "13:00", "type": "unavailable"},
            {"day": "tue", "start": "18:00", "end": "19:00", "type": "not_preferred"},
        ],
    }
    (root / "preferences.yaml").write_text(
        yaml.dump(preferences, default_flow_style=False), encoding="utf-8"
    )

    # Tasks
    tasks = {
        "tasks": [
            {
                "id": "thesis",
                "name": "Thesis chapter",
                "estimated_hours": 4,
                "urgency": 5,
                "deadline_day_index": 3,
            },
            {
                "id": "reading",
                "name": "Weekly reading",
                "estimated_hours": 2,
                "urgency": 2,
            },
        ],
    }
    (root / "tasks.yaml").write_text(
        yaml.dump(tasks, default_flow_style=False), encoding="utf-8"
    )

    # Completed sessions
    sessions = {
        "sessions": [
            {"taskId": "thesis", "durationMinutes": 25, "focusRating": 4,
             "dayOfWeek": 0, "timeOfDay": "dawn", "sequenceNumber": 0},
            {"taskId": "thesis", "durationMinutes": 25, "focusRating": 4,
             "dayOfWeek": 0, "timeOfDay": "dawn", "sequenceNumber": 1},
            {"taskId": "reading", "durationMinutes": 25, "focusRating": 3,
             "dayOfWeek": 1, "timeOfDay": "evening", "sequenceNumber": 0},
        ],
    }
    (root / "sessions.json").write_text(
        json.dumps(sessions, indent=2), encoding="utf-8"
    )

    # Set env var
    os.environ["STUDYPLAN_ROOT"] = str(root)
    yield root
    # Cleanup
    if "STUDYPLAN_ROOT" in os.environ:
        del os.environ["STUDYPLAN_ROOT"]
