"""Weekly session scheduling engine for studyplan.

Generates a week of fixed-length pomodoro sessions using greedy allocation:
tasks are ordered by priority, free blocks by weight, and sessions are packed
into blocks until each task is satisfied or the capacity ceiling is reached.
"""

from __future__ import annotations

import logging
import math

from studyplan.availability import (
    DAYS_PER_WEEK,
    calculate_available_blocks,
    total_block_minutes,
)
from studyplan.capacity import apply_adjustment_factor_to_capacity
from studyplan.focus import build_focus_profile, weight_and_sort_blocks
from studyplan.metrics import find_focus_extremes
from studyplan.models import (
    CompletedSession,
    DailyMetrics,
    FocusProfile,
    ScheduledSession,
    ScheduleProposal,
    Task,
    UserPreferences,
    WeightedTimeBlock,
)

logger = logging.getLogger(__name__)


# ── Constants ─────────────────────────────────────────────────

DEFAULT_POMODORO_MINUTES = 25
BREAK_RATIO = 0.4
OVERDUE_BONUS = 10000
DEADLINE_WEIGHT = 500


# ── Priority Scoring ──────────────────────────────────────────


def calculate_task_priority(task: Task, current_day: int) -> float:
    """Compute composite priority score for scheduling.

    Components:
    - Urgency x 100
    - Deadline pressure: 500 / days_until_deadline, or a flat 10000 when the
      deadline is today or already past
    - Size: estimated hours x 10
    """
    score = task.urgency * 100

    if task.deadline_day_index is not None:
        days_until_deadline = task.deadline_day_index - current_day
        if days_until_deadline > 0:
            score += DEADLINE_WEIGHT / days_until_deadline
        else:
            score += OVERDUE_BONUS

    score += task.estimated_hours * 10
    return score


def sort_tasks_by_priority(tasks: list[Task], current_day: int) -> list[Task]:
    """Highest priority first; equal scores keep their input order."""
    return sorted(tasks, key=lambda t: calculate_task_priority(t, current_day), reverse=True)


# ── Breaks ────────────────────────────────────────────────────


def break_minutes_for(pomodoro_minutes: int) -> int:
    # half-up rounding
    return int(math.floor(pomodoro_minutes * BREAK_RATIO + 0.5))


def should_insert_break(
    consecutive_count: int,
    max_consecutive: int,
    block_remaining_minutes: int,
    pomodoro_minutes: int,
) -> tuple[bool, int]:
    """Return (insert, break_minutes) for the current position in a run."""
    if consecutive_count < max_consecutive:
        return False, 0

    break_minutes = break_minutes_for(pomodoro_minutes)
    if block_remaining_minutes >= break_minutes:
        return True, break_minutes
    return False, 0


def sessions_needed(task: Task, pomodoro_minutes: int) -> int:
    # round() strips float noise left by progress subtraction, e.g. 25.000000001
    task_minutes = round(task.estimated_hours * 60, 6)
    if task_minutes <= 0:
        return 0
    return math.ceil(task_minutes / pomodoro_minutes)


# ── Block preparation ─────────────────────────────────────────


def build_week_blocks(
    preferences: UserPreferences,
    pomodoro_minutes: int,
    focus_profile: FocusProfile,
    best_focus_time: str | None,
) -> list[list[WeightedTimeBlock]]:
    """Weighted, weight-sorted free blocks for each of the seven days."""
    week: list[list[WeightedTimeBlock]] = []
    for day in range(DAYS_PER_WEEK):
        raw = calculate_available_blocks(day, preferences, pomodoro_minutes)
        week.append(weight_and_sort_blocks(raw, focus_profile, best_focus_time))
    return week


# ── Packing ───────────────────────────────────────────────────


def pack_sessions(
    sorted_tasks: list[Task],
    week_blocks: list[list[WeightedTimeBlock]],
    max_usable_minutes: float,
    pomodoro_minutes: int,
    max_consecutive: int,
) -> ScheduleProposal:
    """Greedily pack pomodoro sessions into blocks.

    Days are scanned Monday first and, within a day, blocks in weight order.
    Each block keeps its own cursor, so later tasks continue where earlier
    ones stopped. Each task's run counter restarts in every block; after
    *max_consecutive* sessions a break is inserted, and if no further
    session fits after the break the task moves on to the next block. No
    session is placed that would push used minutes past the ceiling.
    """
    if pomodoro_minutes <= 0:
        return ScheduleProposal()

    max_consecutive = max(1, max_consecutive)
    sessions: list[ScheduledSession] = []
    used_minutes = 0
    session_id = 0
    run_counts: dict[str, int] = {}
    block_cursors = [[b.start_minutes for b in day_blocks] for day_blocks in week_blocks]

    def has_capacity() -> bool:
        return used_minutes + pomodoro_minutes <= max_usable_minutes

    for task in sorted_tasks:
        needed = sessions_needed(task, pomodoro_minutes)
        scheduled = 0

        for day in range(DAYS_PER_WEEK):
            if scheduled >= needed:
                break

            for i, block in enumerate(week_blocks[day]):
                if scheduled >= needed or not has_capacity():
                    break

                cursor = block_cursors[day][i]
                run_counts[task.id] = 0

                while (
                    cursor + pomodoro_minutes <= block.end_minutes
                    and scheduled < needed
                    and has_capacity()
                ):
                    insert, pause = should_insert_break(
                        run_counts[task.id],
                        max_consecutive,
                        block.end_minutes - cursor,
                        pomodoro_minutes,
                    )
                    if insert:
                        cursor += pause
                        run_counts[task.id] = 0
                        if cursor + pomodoro_minutes > block.end_minutes:
                            break

                    sessions.append(ScheduledSession(
                        id=f"session_{session_id}",
                        task_id=task.id,
                        day_of_week=day,
                        start_minutes=cursor,
                        end_minutes=cursor + pomodoro_minutes,
                        sequence_number=run_counts[task.id],
                    ))
                    session_id += 1
                    cursor += pomodoro_minutes
                    scheduled += 1
                    run_counts[task.id] += 1
                    used_minutes += pomodoro_minutes

                block_cursors[day][i] = cursor

        if scheduled < needed:
            logger.debug(
                "Task %s carries over %d of %d sessions", task.id, needed - scheduled, needed
            )

    return ScheduleProposal(
        sessions=sessions,
        total_planned_hours=used_minutes / 60,
        utilization_rate=used_minutes / max_usable_minutes if max_usable_minutes > 0 else 0.0,
    )


# ── Schedule Generation ──────────────────────────────────────


def generate_schedule_with_history(
    tasks: list[Task],
    preferences: UserPreferences,
    current_day: int,
    pomodoro_minutes: int,
    completed_sessions: list[CompletedSession],
    daily_metrics: list[DailyMetrics],
    fatigue_indicator: float = 0.0,
) -> ScheduleProposal:
    """Generate a weekly proposal adjusted by history.

    - Build the focus profile and best focus time from completed sessions
    - Weight and rank each day's free blocks
    - Discount raw availability into a usable-minutes ceiling
    - Pack tasks in priority order
    """
    if pomodoro_minutes <= 0:
        logger.warning("Non-positive pomodoro length %s; returning empty proposal", pomodoro_minutes)
        return ScheduleProposal()

    sorted_tasks = sort_tasks_by_priority(tasks, current_day)

    focus_profile = build_focus_profile(completed_sessions)
    best_focus_time, _worst = find_focus_extremes(completed_sessions)

    week_blocks = build_week_blocks(preferences, pomodoro_minutes, focus_profile, best_focus_time)
    total_available = sum(total_block_minutes(day) for day in week_blocks)

    max_usable = apply_adjustment_factor_to_capacity(total_available, daily_metrics, fatigue_indicator)
    logger.debug(
        "Planning %d tasks: %d free minutes, ceiling %.1f", len(tasks), total_available, max_usable
    )

    return pack_sessions(
        sorted_tasks,
        week_blocks,
        max_usable,
        pomodoro_minutes,
        preferences.max_consecutive_pomodoros,
    )


def plan(
    tasks: list[Task],
    preferences: UserPreferences,
    current_day: int,
    pomodoro_minutes: int = DEFAULT_POMODORO_MINUTES,
) -> ScheduleProposal:
    """Cold-start weekly plan with no history."""
    return generate_schedule_with_history(
        tasks, preferences, current_day, pomodoro_minutes, [], []
    )
