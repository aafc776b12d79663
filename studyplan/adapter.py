"""File-backed adapter around the planning engine.

Loads preferences, tasks and completed sessions from the workspace, runs the
engine, and writes the results under latest/. The previous schedule is kept as
schedule_prev.json; the current schedule.json is the baseline for the next
rolling cycle.
"""

from __future__ import annotations

import logging
from pathlib import Path

from studyplan.fileio import read_json, write_json_atomic
from studyplan.metrics import calculate_week_daily_metrics, calculate_weekly_metrics
from studyplan.models import Recommendation, ScheduleProposal
from studyplan.preferences import load_pomodoro_minutes, load_preferences
from studyplan.recommendations import analyze
from studyplan.rolling import plan_rolling
from studyplan.scheduler import plan
from studyplan.sessions import load_completed_sessions, load_schedule
from studyplan.tasks import load_tasks
from studyplan.workspace import (
    analysis_path,
    current_day_index,
    schedule_path,
    schedule_prev_path,
    workspace_root,
)

logger = logging.getLogger(__name__)


def _write_schedule(proposal: ScheduleProposal, root: Path) -> None:
    sp = schedule_path(root)
    existing = read_json(sp)
    if existing:
        write_json_atomic(schedule_prev_path(root), existing)
    write_json_atomic(sp, proposal.to_dict())
    logger.info(
        "Wrote %d sessions (%.2fh planned) to %s",
        len(proposal.sessions), proposal.total_planned_hours, sp,
    )


def run_study_planning(root: Path | None = None, current_day: int | None = None) -> ScheduleProposal:
    """High-level: cold-start plan from workspace files, write schedule.json, return it."""
    if root is None:
        root = workspace_root()
    if current_day is None:
        current_day = current_day_index(root)

    preferences = load_preferences(root)
    tasks = load_tasks(root)

    proposal = plan(tasks, preferences, current_day, load_pomodoro_minutes(root))
    _write_schedule(proposal, root)
    return proposal


def run_rolling_planning(root: Path | None = None, current_day: int | None = None) -> ScheduleProposal:
    """High-level: re-plan from progress against the stored schedule."""
    if root is None:
        root = workspace_root()
    if current_day is None:
        current_day = current_day_index(root)

    preferences = load_preferences(root)
    tasks = load_tasks(root)
    completed = load_completed_sessions(root)
    previous = load_schedule(root=root).sessions

    weekly = calculate_weekly_metrics(tasks, previous, completed)
    proposal = plan_rolling(
        tasks,
        completed,
        previous,
        preferences,
        current_day,
        load_pomodoro_minutes(root),
        weekly,
    )
    _write_schedule(proposal, root)
    return proposal


def run_weekly_analysis(root: Path | None = None) -> list[Recommendation]:
    """High-level: metrics and recommendations for the stored schedule, written to analysis.json."""
    if root is None:
        root = workspace_root()

    preferences = load_preferences(root)
    tasks = load_tasks(root)
    completed = load_completed_sessions(root)
    scheduled = load_schedule(root=root).sessions

    weekly = calculate_weekly_metrics(tasks, scheduled, completed)
    daily = calculate_week_daily_metrics(scheduled, completed)
    recommendations = analyze(
        completed,
        weekly.task_performance,
        preferences.max_consecutive_pomodoros,
        weekly,
        daily,
    )

    write_json_atomic(analysis_path(root), {
        "weeklyMetrics": weekly.to_dict(),
        "dailyMetrics": [d.to_dict() for d in daily],
        "recommendations": [r.to_dict() for r in recommendations],
    })
    logger.info("Wrote %d recommendations to %s", len(recommendations), analysis_path(root))
    return recommendations
