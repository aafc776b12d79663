"""Completed-session log and schedule snapshots for studyplan.

sessions.json is a snapshot of the external event log; the engine only ever
sees it as an immutable list of CompletedSession records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from studyplan.fileio import read_json
from studyplan.models import (
    TIME_OF_DAY_BUCKETS,
    CompletedSession,
    ScheduleProposal,
    parse_day,
)
from studyplan.workspace import schedule_path, sessions_path


def validate_completed_session(session: dict[str, Any]) -> list[str]:
    """Validate one completed-session record and return list of errors."""
    errors = []
    if not session.get("taskId", session.get("task_id")):
        errors.append("Missing required field: taskId")

    duration = session.get("durationMinutes", session.get("duration_minutes", 0))
    if not isinstance(duration, (int, float)) or duration < 0:
        errors.append("durationMinutes must be a non-negative number")

    rating = session.get("focusRating", session.get("focus_rating", 0))
    if not isinstance(rating, (int, float)) or not 0 <= rating <= 5:
        errors.append("focusRating must be within 0-5")

    try:
        if not 0 <= parse_day(session.get("dayOfWeek", session.get("day_of_week", 0))) <= 6:
            errors.append("dayOfWeek must be 0-6")
    except (TypeError, ValueError):
        errors.append("Invalid dayOfWeek")

    time_of_day = session.get("timeOfDay", session.get("time_of_day", "morning"))
    if time_of_day not in TIME_OF_DAY_BUCKETS:
        errors.append(f"Invalid timeOfDay: {time_of_day}")
    return errors


def load_completed_sessions(root: Path | None = None) -> list[CompletedSession]:
    """Load sessions.json, raising ValueError listing every invalid record."""
    raw = read_json(sessions_path(root)).get("sessions") or []
    errors = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            errors.append(f"sessions[{i}]: expected an object")
            continue
        errors.extend(f"sessions[{i}]: {e}" for e in validate_completed_session(entry))
    if errors:
        raise ValueError("Invalid sessions.json: " + "; ".join(errors))
    return [CompletedSession.from_dict(entry) for entry in raw]


def load_schedule(path: Path | None = None, root: Path | None = None) -> ScheduleProposal:
    """Load a stored proposal; an absent file is an empty proposal."""
    if path is None:
        path = schedule_path(root)
    return ScheduleProposal.from_dict(read_json(path))
