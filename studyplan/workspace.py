"""Workspace root, timezone and path helpers for studyplan.

Layout under the root::

    preferences.yaml
    tasks.yaml
    sessions.json
    latest/schedule.json
    latest/schedule_prev.json
    latest/analysis.json
"""

from __future__ import annotations

import os
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from studyplan.fileio import read_yaml


def workspace_root() -> Path:
    return Path(
        os.environ.get("STUDYPLAN_ROOT", str(Path.home() / "studyplan"))
    ).expanduser().resolve()


def get_user_timezone(root: Path | None = None) -> ZoneInfo:
    """User's timezone from preferences.yaml, defaulting to UTC."""
    prefs = read_yaml(preferences_path(root))
    name = prefs.get("timezone")
    if name:
        try:
            return ZoneInfo(str(name))
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return ZoneInfo("UTC")


def current_day_index(root: Path | None = None) -> int:
    """Today's weekday in the user's timezone, Monday = 0."""
    return datetime.now(get_user_timezone(root)).weekday()


# ── Path helpers ──────────────────────────────────────────────

def preferences_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "preferences.yaml"


def tasks_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "tasks.yaml"


def sessions_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "sessions.json"


def schedule_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "latest" / "schedule.json"


def schedule_prev_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "latest" / "schedule_prev.json"


def analysis_path(root: Path | None = None) -> Path:
    if root is None:
        root = workspace_root()
    return root / "latest" / "analysis.json"
