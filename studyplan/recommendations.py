"""Rule-based recommendations that tune future scheduling.

Rules:
- Consecutive-limit: find where focus drops off within a run of sessions
- Estimate correction: compare logged vs. estimated hours per task
- Load reduction: sustained fatigue or low focus on most days
"""

from __future__ import annotations

from collections import defaultdict

from studyplan.models import (
    CompletedSession,
    DailyMetrics,
    Recommendation,
    TaskPerformance,
    WeeklyMetrics,
)


FOCUS_DROP_RATIO = 0.75
MIN_CONFIDENT_SAMPLES = 10


def analyze_consecutive_sessions_pattern(
    completed_sessions: list[CompletedSession],
    current_max: int,
) -> Recommendation:
    """Suggest the run length at which average focus falls by 25% or more."""
    ratings_by_position: dict[int, list[float]] = defaultdict(list)
    for session in completed_sessions:
        if session.sequence_number is None:
            continue
        ratings_by_position[session.sequence_number].append(session.focus_rating)

    avg_by_position = {
        pos: sum(ratings) / len(ratings) for pos, ratings in ratings_by_position.items()
    }

    dropoff = current_max
    for i in range(1, current_max):
        if i in avg_by_position and i - 1 in avg_by_position:
            if avg_by_position[i] <= avg_by_position[i - 1] * FOCUS_DROP_RATIO:
                dropoff = i
                break

    return Recommendation(
        type="suggest_max_consecutive_pomodoros",
        value=max(1, min(dropoff, current_max)),
        confidence=0.8 if len(completed_sessions) >= MIN_CONFIDENT_SAMPLES else 0.5,
        reason="focus_pattern_analysis",
    )


def analyze_task_estimation_accuracy(
    task_performance: list[TaskPerformance],
) -> list[Recommendation]:
    """One estimate multiplier per task whose logged time clearly disagrees."""
    recommendations = []
    for perf in task_performance:
        if perf.actual_hours <= 0 or perf.estimated_hours <= 0:
            continue

        ratio = perf.actual_hours / perf.estimated_hours
        focus_factor = perf.average_focus / 5

        if focus_factor < 0.6:
            # distraction-driven overrun still widens the margin
            multiplier, confidence = ratio * 1.2, 0.7
        elif ratio > 1.2:
            multiplier, confidence = ratio, 0.8
        elif ratio < 0.8:
            multiplier, confidence = ratio, 0.6
        else:
            continue

        if multiplier == 1.0:
            continue
        recommendations.append(Recommendation(
            type="suggest_task_estimate_adjustment",
            value=multiplier,
            confidence=confidence,
            reason=perf.task_id,
        ))
    return recommendations


def analyze_load_reduction(
    weekly_metrics: WeeklyMetrics,
    daily_metrics: list[DailyMetrics],
) -> Recommendation | None:
    critical_fatigue = weekly_metrics.fatigue_indicator > 0.5
    low_focus = weekly_metrics.average_focus < 2.5
    struggling_days = sum(1 for m in daily_metrics if m.status in ("behind", "fatigued"))

    if not (critical_fatigue or (low_focus and struggling_days >= 4)):
        return None

    return Recommendation(
        type="suggest_load_reduction",
        value=0.7 + (weekly_metrics.average_focus / 5) * 0.15,
        confidence=0.9 if critical_fatigue else 0.7,
        reason="sustained_fatigue_pattern",
    )


def analyze(
    completed_sessions: list[CompletedSession],
    task_performance: list[TaskPerformance],
    current_max_consecutive: int,
    weekly_metrics: WeeklyMetrics,
    daily_metrics: list[DailyMetrics],
) -> list[Recommendation]:
    """Run all three heuristics and combine their output."""
    recommendations = [
        analyze_consecutive_sessions_pattern(completed_sessions, current_max_consecutive)
    ]
    recommendations.extend(analyze_task_estimation_accuracy(task_performance))

    load = analyze_load_reduction(weekly_metrics, daily_metrics)
    if load is not None:
        recommendations.append(load)
    return recommendations
