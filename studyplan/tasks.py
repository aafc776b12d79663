"""Task validation and loading for studyplan."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from studyplan.fileio import read_yaml
from studyplan.models import Task, parse_day
from studyplan.workspace import tasks_path as _tasks_path


# ── Validation ────────────────────────────────────────────────


def validate_task(task: dict[str, Any]) -> list[str]:
    """Validate task schema and return list of errors (empty if valid)."""
    errors = []
    if "id" not in task:
        errors.append("Missing required field: id")
    if "name" not in task and "title" not in task:
        errors.append("Missing required field: name")

    hours = task.get("estimated_hours", task.get("estimatedHours", 0))
    if not isinstance(hours, (int, float)) or isinstance(hours, bool):
        errors.append("estimated_hours must be numeric")
    elif hours < 0:
        errors.append("estimated_hours must be >= 0")

    urgency = task.get("urgency", 0)
    if not isinstance(urgency, (int, float)) or isinstance(urgency, bool):
        errors.append("urgency must be numeric")

    deadline = task.get("deadline_day_index", task.get("deadlineDayIndex"))
    if deadline is not None:
        try:
            if not 0 <= parse_day(deadline) <= 6:
                errors.append("deadline_day_index must be 0-6")
        except (TypeError, ValueError):
            errors.append(f"Invalid deadline_day_index: {deadline!r}")

    return errors


# ── Loading ───────────────────────────────────────────────────


def load_tasks(root: Path | None = None) -> list[Task]:
    """Load tasks.yaml, raising ValueError listing every invalid entry."""
    data = read_yaml(_tasks_path(root))
    raw = data.get("tasks") or []

    errors = []
    seen: set[str] = set()
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            errors.append(f"tasks[{i}]: expected a mapping")
            continue
        errors.extend(f"tasks[{i}]: {e}" for e in validate_task(entry))
        task_id = str(entry.get("id", ""))
        if task_id in seen:
            errors.append(f"tasks[{i}]: duplicate id {task_id}")
        seen.add(task_id)
    if errors:
        raise ValueError("Invalid tasks.yaml: " + "; ".join(errors))

    return [Task.from_dict(entry) for entry in raw]


def find_task(tasks: list[Task], task_id: str) -> Task | None:
    for t in tasks:
        if t.id == task_id:
            return t
    return None
