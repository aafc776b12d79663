"""Rolling re-planning for studyplan.

Feeds the previous cycle's outcomes back into the next plan: logged hours
shrink the remaining task estimates, and the previous cycle's adherence and
focus shrink the usable capacity.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace

from studyplan.metrics import calculate_week_daily_metrics
from studyplan.models import (
    CompletedSession,
    ScheduledSession,
    ScheduleProposal,
    Task,
    UserPreferences,
    WeeklyMetrics,
)
from studyplan.scheduler import DEFAULT_POMODORO_MINUTES, generate_schedule_with_history

logger = logging.getLogger(__name__)


def hours_logged_by_task(completed_sessions: list[CompletedSession]) -> dict[str, float]:
    progress: dict[str, float] = defaultdict(float)
    for session in completed_sessions:
        progress[session.task_id] += session.duration_minutes / 60
    return dict(progress)


def apply_progress(tasks: list[Task], completed_sessions: list[CompletedSession]) -> list[Task]:
    """Copies of *tasks* with logged hours subtracted; finished tasks are dropped."""
    progress = hours_logged_by_task(completed_sessions)
    adjusted = []
    for task in tasks:
        remaining = max(0.0, task.estimated_hours - progress.get(task.id, 0.0))
        if remaining > 0:
            adjusted.append(replace(task, estimated_hours=remaining))
    return adjusted


def plan_rolling(
    remaining_tasks: list[Task],
    completed_sessions: list[CompletedSession],
    previous_scheduled_sessions: list[ScheduledSession] | None,
    preferences: UserPreferences,
    current_day: int,
    pomodoro_minutes: int = DEFAULT_POMODORO_MINUTES,
    weekly_metrics: WeeklyMetrics | None = None,
) -> ScheduleProposal:
    """Re-plan the next cycle from actual progress.

    The previous cycle's sessions are the planned baseline for the daily
    metrics; their adjustment factors, together with the weekly fatigue
    indicator, set the next cycle's capacity ceiling.
    """
    adjusted_tasks = apply_progress(remaining_tasks, completed_sessions)
    dropped = len(remaining_tasks) - len(adjusted_tasks)
    if dropped:
        logger.debug("Dropped %d satisfied tasks from rolling plan", dropped)

    daily_metrics = calculate_week_daily_metrics(
        previous_scheduled_sessions or [], completed_sessions, rolling=True
    )
    fatigue = weekly_metrics.fatigue_indicator if weekly_metrics is not None else 0.0

    return generate_schedule_with_history(
        adjusted_tasks,
        preferences,
        current_day,
        pomodoro_minutes,
        completed_sessions,
        daily_metrics,
        fatigue_indicator=fatigue,
    )
