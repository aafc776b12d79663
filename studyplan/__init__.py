"""studyplan — adaptive weekly pomodoro scheduling engine.

Public API re-exports for convenient imports:
    from studyplan import plan, plan_rolling, calculate_weekly_metrics, analyze, ...
"""

# Models
from studyplan.models import (
    TIME_OF_DAY_BUCKETS,
    Task,
    UnavailableSlot,
    UserPreferences,
    TimeBlock,
    WeightedTimeBlock,
    ScheduledSession,
    CompletedSession,
    DailyMetrics,
    TaskPerformance,
    WeeklyMetrics,
    FocusProfile,
    ScheduleProposal,
    Recommendation,
)

# Engine
from studyplan.availability import calculate_available_blocks, get_time_of_day
from studyplan.focus import build_focus_profile, calculate_block_weight, weight_and_sort_blocks
from studyplan.capacity import apply_adjustment_factor_to_capacity
from studyplan.scheduler import (
    calculate_task_priority,
    sort_tasks_by_priority,
    pack_sessions,
    plan,
)
from studyplan.metrics import (
    calculate_daily_metrics,
    calculate_daily_metrics_for_rolling,
    calculate_week_daily_metrics,
    calculate_weekly_metrics,
)
from studyplan.rolling import plan_rolling
from studyplan.recommendations import analyze

# Workspace adapter
from studyplan.adapter import (
    run_study_planning,
    run_rolling_planning,
    run_weekly_analysis,
)
