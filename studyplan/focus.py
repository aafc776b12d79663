"""Focus profile and block weighting for studyplan.

Aggregates historical focus ratings per time-of-day bucket and uses them,
together with the preferred/not-preferred tag, to rank free blocks.
"""

from __future__ import annotations

from studyplan.availability import get_time_of_day
from studyplan.models import (
    TIME_OF_DAY_BUCKETS,
    CompletedSession,
    FocusProfile,
    TimeBlock,
    WeightedTimeBlock,
)


NEUTRAL_FOCUS_SCORE = 3.0
MIN_PROFILE_SAMPLES = 5
PREFERRED_WEIGHT = 1.4
NOT_PREFERRED_WEIGHT = 0.6
BEST_TIME_BONUS = 1.3


def build_focus_profile(completed_sessions: list[CompletedSession]) -> FocusProfile:
    """Mean focus rating per time-of-day bucket.

    Buckets without samples get the neutral score so that users with little
    history are not penalized.
    """
    sums = {bucket: 0.0 for bucket in TIME_OF_DAY_BUCKETS}
    counts = {bucket: 0 for bucket in TIME_OF_DAY_BUCKETS}
    for session in completed_sessions:
        if session.time_of_day not in sums:
            continue
        sums[session.time_of_day] += session.focus_rating
        counts[session.time_of_day] += 1

    scores = {
        bucket: (sums[bucket] / counts[bucket]) if counts[bucket] else NEUTRAL_FOCUS_SCORE
        for bucket in TIME_OF_DAY_BUCKETS
    }
    return FocusProfile(time_of_day_scores=scores, sample_count=len(completed_sessions))


def calculate_block_weight(
    block: TimeBlock,
    focus_profile: FocusProfile,
    best_focus_time: str | None,
) -> float:
    weight = PREFERRED_WEIGHT if block.is_preferred else NOT_PREFERRED_WEIGHT
    block_time = get_time_of_day(block.start_minutes)

    if focus_profile.sample_count >= MIN_PROFILE_SAMPLES:
        focus_score = focus_profile.time_of_day_scores.get(block_time, NEUTRAL_FOCUS_SCORE)
        # 0-5 focus maps onto a 0.7-1.3 multiplier
        weight *= 0.7 + (focus_score / 5.0) * 0.6

    if best_focus_time and block_time == best_focus_time:
        weight *= BEST_TIME_BONUS

    return weight


def weight_and_sort_blocks(
    blocks: list[TimeBlock],
    focus_profile: FocusProfile,
    best_focus_time: str | None,
) -> list[WeightedTimeBlock]:
    """Attach weights and sort descending; equal weights keep chronological order."""
    weighted = [
        WeightedTimeBlock(
            day_of_week=b.day_of_week,
            start_minutes=b.start_minutes,
            end_minutes=b.end_minutes,
            is_preferred=b.is_preferred,
            weight=calculate_block_weight(b, focus_profile, best_focus_time),
        )
        for b in blocks
    ]
    weighted.sort(key=lambda b: b.weight, reverse=True)
    return weighted
