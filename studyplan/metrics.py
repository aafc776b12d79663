"""Daily and weekly adherence/focus metrics for studyplan.

Compares planned ScheduledSessions against ground-truth CompletedSessions and
derives the adherence, focus and fatigue signals that drive the rolling
planner and the recommendation analyzer.
"""

from __future__ import annotations

from studyplan.availability import DAYS_PER_WEEK
from studyplan.models import (
    TIME_OF_DAY_BUCKETS,
    CompletedSession,
    DailyMetrics,
    ScheduledSession,
    Task,
    TaskPerformance,
    WeeklyMetrics,
)


# ── Constants ─────────────────────────────────────────────────

FATIGUED_ADHERENCE = 0.5
FATIGUED_FOCUS = 0.4
BEHIND_ADHERENCE = 0.75
OVERPERFORMING_ADHERENCE = 1.1
FOCUSED_WHILE_BEHIND = 0.6

ROLLING_ADHERENCE_CAP = 1.5
ROLLING_NEUTRAL_FOCUS = 0.8

ESTIMATION_ACCURACY_CAP = 2.0
FATIGUE_ADHERENCE_THRESHOLD = 0.6


# ── Day classification ────────────────────────────────────────


def classify_day(adherence_score: float, focus_score: float) -> str:
    """Day status; rules are evaluated in order and the first match wins."""
    if adherence_score < FATIGUED_ADHERENCE or focus_score < FATIGUED_FOCUS:
        return "fatigued"
    if adherence_score < BEHIND_ADHERENCE:
        return "behind"
    if adherence_score > OVERPERFORMING_ADHERENCE:
        return "overperforming"
    return "on_track"


def adjustment_factor_for(status: str, focus_score: float) -> float:
    if status == "fatigued":
        return 0.7
    if status == "behind" and focus_score > FOCUSED_WHILE_BEHIND:
        return 0.9
    return 1.0


def _day_totals(
    day_of_week: int,
    scheduled_sessions: list[ScheduledSession],
    completed_sessions: list[CompletedSession],
) -> tuple[float, float, float, int]:
    planned = sum(s.duration_minutes() for s in scheduled_sessions if s.day_of_week == day_of_week)
    day_done = [s for s in completed_sessions if s.day_of_week == day_of_week]
    actual = sum(s.duration_minutes for s in day_done)
    focus_sum = sum(s.focus_rating for s in day_done)
    return planned, actual, focus_sum, len(day_done)


def _build_daily(planned: float, actual: float, adherence: float, focus: float) -> DailyMetrics:
    status = classify_day(adherence, focus)
    return DailyMetrics(
        status=status,
        planned_minutes=planned,
        actual_minutes=actual,
        adherence_score=adherence,
        focus_score=focus,
        adjustment_factor=adjustment_factor_for(status, focus),
    )


# ── Daily metrics ─────────────────────────────────────────────


def calculate_daily_metrics(
    day_of_week: int,
    scheduled_sessions: list[ScheduledSession],
    completed_sessions: list[CompletedSession],
) -> DailyMetrics:
    """Metrics for one day. Nothing planned means zero adherence."""
    planned, actual, focus_sum, focus_count = _day_totals(
        day_of_week, scheduled_sessions, completed_sessions
    )
    adherence = actual / planned if planned > 0 else 0.0
    focus = focus_sum / (focus_count * 5) if focus_count else 0.0
    return _build_daily(planned, actual, adherence, focus)


def calculate_daily_metrics_for_rolling(
    day_of_week: int,
    previous_scheduled_sessions: list[ScheduledSession],
    completed_sessions: list[CompletedSession],
) -> DailyMetrics:
    """Metrics for one day of the previous cycle, as seen by the rolling planner.

    Ad-hoc work counts: when nothing was planned but work was done, the work
    itself becomes the plan (adherence 1.0). An idle unplanned day is also
    adherent, adherence is capped at 1.5, and a day without ratings gets a
    neutral focus score.
    """
    planned, actual, focus_sum, focus_count = _day_totals(
        day_of_week, previous_scheduled_sessions, completed_sessions
    )
    if planned == 0 and actual > 0:
        planned = actual

    adherence = min(actual / planned, ROLLING_ADHERENCE_CAP) if planned > 0 else 1.0
    focus = focus_sum / (focus_count * 5) if focus_count else ROLLING_NEUTRAL_FOCUS
    return _build_daily(planned, actual, adherence, focus)


def calculate_week_daily_metrics(
    scheduled_sessions: list[ScheduledSession],
    completed_sessions: list[CompletedSession],
    rolling: bool = False,
) -> list[DailyMetrics]:
    """DailyMetrics for all seven days, Monday (0) first."""
    calc = calculate_daily_metrics_for_rolling if rolling else calculate_daily_metrics
    return [calc(day, scheduled_sessions, completed_sessions) for day in range(DAYS_PER_WEEK)]


# ── Focus by time of day ──────────────────────────────────────


def focus_by_time_of_day(completed_sessions: list[CompletedSession]) -> dict[str, list[float]]:
    """Ratings grouped by bucket. Every bucket is present, possibly empty."""
    grouped: dict[str, list[float]] = {bucket: [] for bucket in TIME_OF_DAY_BUCKETS}
    for session in completed_sessions:
        if session.time_of_day in grouped:
            grouped[session.time_of_day].append(session.focus_rating)
    return grouped


def find_focus_extremes(completed_sessions: list[CompletedSession]) -> tuple[str | None, str | None]:
    """(best, worst) bucket by mean focus; first bucket wins ties, empty buckets skipped."""
    best: str | None = None
    worst: str | None = None
    max_avg = 0.0
    min_avg = 0.0
    for bucket, ratings in focus_by_time_of_day(completed_sessions).items():
        if not ratings:
            continue
        avg = sum(ratings) / len(ratings)
        if best is None or avg > max_avg:
            best, max_avg = bucket, avg
        if worst is None or avg < min_avg:
            worst, min_avg = bucket, avg
    return best, worst


# ── Weekly metrics ────────────────────────────────────────────


def calculate_task_performance(
    task: Task, completed_sessions: list[CompletedSession]
) -> TaskPerformance:
    task_sessions = [s for s in completed_sessions if s.task_id == task.id]
    actual_hours = sum(s.duration_minutes for s in task_sessions) / 60
    avg_focus = (
        sum(s.focus_rating for s in task_sessions) / len(task_sessions) if task_sessions else 0.0
    )
    efficiency = (
        (avg_focus / 5) * (task.estimated_hours / actual_hours) if actual_hours > 0 else 0.0
    )
    return TaskPerformance(
        task_id=task.id,
        estimated_hours=task.estimated_hours,
        actual_hours=actual_hours,
        average_focus=avg_focus,
        efficiency=efficiency,
    )


def calculate_weekly_metrics(
    tasks: list[Task],
    scheduled_sessions: list[ScheduledSession],
    completed_sessions: list[CompletedSession],
) -> WeeklyMetrics:
    """Aggregate a week of planned vs. completed work."""
    planned_hours = sum(s.duration_minutes() for s in scheduled_sessions) / 60
    actual_hours = sum(s.duration_minutes for s in completed_sessions) / 60

    estimation_accuracy = (
        min(actual_hours / planned_hours, ESTIMATION_ACCURACY_CAP) if planned_hours > 0 else 0.0
    )

    average_focus = (
        sum(s.focus_rating for s in completed_sessions) / len(completed_sessions)
        if completed_sessions else 0.0
    )

    best, worst = find_focus_extremes(completed_sessions)

    daily = calculate_week_daily_metrics(scheduled_sessions, completed_sessions)
    avg_adherence = sum(d.adherence_score for d in daily) / len(daily)
    fatigue = 1 - avg_adherence if avg_adherence < FATIGUE_ADHERENCE_THRESHOLD else 0.0

    return WeeklyMetrics(
        planned_hours=planned_hours,
        actual_hours=actual_hours,
        estimation_accuracy=estimation_accuracy,
        average_focus=average_focus,
        best_focus_time=best,
        worst_focus_time=worst,
        fatigue_indicator=fatigue,
        task_performance=[calculate_task_performance(t, completed_sessions) for t in tasks],
    )
