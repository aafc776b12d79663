"""Fatigue- and adherence-aware capacity budgeting."""

from __future__ import annotations

from studyplan.models import DailyMetrics


SAFETY_MARGIN = 0.75
FATIGUE_THRESHOLD = 0.3
FATIGUE_DISCOUNT = 0.3
MIN_MULTIPLIER = 0.5
MAX_MULTIPLIER = 1.0


def capacity_multiplier(daily_metrics: list[DailyMetrics], fatigue_indicator: float) -> float:
    """Average adjustment factor, discounted for fatigue, clamped to [0.5, 1.0]."""
    if daily_metrics:
        multiplier = sum(m.adjustment_factor for m in daily_metrics) / len(daily_metrics)
    else:
        multiplier = 1.0

    if fatigue_indicator > FATIGUE_THRESHOLD:
        multiplier *= 1 - fatigue_indicator * FATIGUE_DISCOUNT

    return max(MIN_MULTIPLIER, min(MAX_MULTIPLIER, multiplier))


def apply_adjustment_factor_to_capacity(
    total_available_minutes: float,
    daily_metrics: list[DailyMetrics],
    fatigue_indicator: float,
) -> float:
    """Usable-minutes ceiling for the cycle. The packer never exceeds it."""
    return total_available_minutes * SAFETY_MARGIN * capacity_multiplier(daily_metrics, fatigue_indicator)
