"""User preference validation and loading for studyplan."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from studyplan.fileio import read_yaml
from studyplan.models import (
    SLOT_TYPES,
    TIME_OF_DAY_BUCKETS,
    UserPreferences,
    _get,
    parse_day,
    parse_minutes,
)
from studyplan.scheduler import DEFAULT_POMODORO_MINUTES
from studyplan.workspace import preferences_path


def _check_minutes(errors: list[str], label: str, value: Any) -> int | None:
    try:
        minutes = parse_minutes(value)
    except (TypeError, ValueError):
        errors.append(f"Invalid {label}: {value!r}")
        return None
    if not 0 <= minutes <= 1440:
        errors.append(f"{label} must be within 0-1440 minutes")
        return None
    return minutes


def validate_slot(slot: dict[str, Any]) -> list[str]:
    errors: list[str] = []
    raw_day = _get(slot, "day_of_week", "dayOfWeek", slot.get("day"))
    try:
        day = parse_day(raw_day)
        if not 0 <= day <= 6:
            errors.append("day must be 0-6")
    except (TypeError, ValueError):
        errors.append(f"Invalid day: {raw_day!r}")

    start = _check_minutes(errors, "start", _get(slot, "start_minutes", "startMinutes", slot.get("start")))
    end = _check_minutes(errors, "end", _get(slot, "end_minutes", "endMinutes", slot.get("end")))
    if start is not None and end is not None and start >= end:
        errors.append("start must be before end")

    slot_type = slot.get("type", "unavailable")
    if slot_type not in SLOT_TYPES:
        errors.append(f"Invalid slot type: {slot_type}")
    return errors


def validate_preferences(prefs: dict[str, Any]) -> list[str]:
    """Validate preferences.yaml content and return list of errors (empty if valid).

    Keys are looked up the same way UserPreferences.from_dict reads them, so
    snake_case, camelCase and the short wake_time/sleep_time forms all count.
    """
    errors: list[str] = []
    wake = _check_minutes(
        errors, "wake_time",
        _get(prefs, "wake_time_minutes", "wakeTimeMinutes", prefs.get("wake_time", 480)),
    )
    sleep = _check_minutes(
        errors, "sleep_time",
        _get(prefs, "sleep_time_minutes", "sleepTimeMinutes", prefs.get("sleep_time", 1320)),
    )
    if wake is not None and sleep is not None and wake >= sleep:
        errors.append("wake_time must be before sleep_time")

    activity = _get(prefs, "preferred_activity_time", "preferredActivityTime", "morning")
    if activity not in TIME_OF_DAY_BUCKETS:
        errors.append(f"Invalid preferred_activity_time: {activity}")

    max_consecutive = _get(prefs, "max_consecutive_pomodoros", "maxConsecutivePomodoros", 4)
    if not isinstance(max_consecutive, int) or max_consecutive < 1:
        errors.append("max_consecutive_pomodoros must be an integer >= 1")

    pomodoro = _get(prefs, "pomodoro_minutes", "pomodoroMinutes", DEFAULT_POMODORO_MINUTES)
    if not isinstance(pomodoro, int) or pomodoro < 1:
        errors.append("pomodoro_minutes must be an integer >= 1")

    for i, slot in enumerate(_get(prefs, "unavailable_slots", "unavailableSlots") or []):
        if not isinstance(slot, dict):
            errors.append(f"unavailable_slots[{i}]: expected a mapping")
            continue
        errors.extend(f"unavailable_slots[{i}]: {e}" for e in validate_slot(slot))

    return errors


def _read_checked(root: Path | None) -> dict[str, Any]:
    data = read_yaml(preferences_path(root))
    errors = validate_preferences(data)
    if errors:
        raise ValueError("Invalid preferences.yaml: " + "; ".join(errors))
    return data


def load_preferences(root: Path | None = None) -> UserPreferences:
    return UserPreferences.from_dict(_read_checked(root))


def load_pomodoro_minutes(root: Path | None = None) -> int:
    data = _read_checked(root)
    return int(_get(data, "pomodoro_minutes", "pomodoroMinutes", DEFAULT_POMODORO_MINUTES))
