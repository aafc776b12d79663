"""Free-time computation for studyplan.

Carves each day between wake and sleep time around the user's unavailable
slots, producing the raw TimeBlocks the packer later fills.
"""

from __future__ import annotations

import logging

from studyplan.models import TimeBlock, UserPreferences

logger = logging.getLogger(__name__)


# ── Constants ─────────────────────────────────────────────────

MINUTES_PER_DAY = 1440
DAYS_PER_WEEK = 7


# ── Time of day ───────────────────────────────────────────────


def get_time_of_day(minutes: int) -> str:
    """Map a clock minute to its time-of-day bucket.

    dawn 04:00-11:59, morning 12:00-16:59, evening 17:00-20:59,
    everything else (including the wrap past midnight) is night.
    """
    if 240 <= minutes < 720:
        return "dawn"
    if 720 <= minutes < 1020:
        return "morning"
    if 1020 <= minutes < 1260:
        return "evening"
    return "night"


# ── Slot Computation ──────────────────────────────────────────


def calculate_available_blocks(
    day_of_week: int,
    preferences: UserPreferences,
    min_session_minutes: int,
) -> list[TimeBlock]:
    """Compute free blocks for one day.

    Walks the day's unavailable slots in start order with a cursor starting at
    wake time. A gap before a slot becomes a block when it is at least
    *min_session_minutes* long; it is tagged preferred unless the slot that
    follows it is ``not_preferred``. The cursor only moves forward, so
    overlapping or nested slots merge. A trailing block runs to sleep time.
    """
    wake = preferences.wake_time_minutes
    day_end = preferences.sleep_time_minutes
    if wake >= day_end:
        return []

    day_slots = []
    for slot in preferences.unavailable_slots:
        if slot.day_of_week != day_of_week:
            continue
        if not slot.is_valid():
            logger.warning(
                "Ignoring invalid unavailable slot on day %d: %d-%d",
                day_of_week, slot.start_minutes, slot.end_minutes,
            )
            continue
        day_slots.append(slot)
    day_slots.sort(key=lambda s: s.start_minutes)

    blocks: list[TimeBlock] = []
    cursor = wake
    for slot in day_slots:
        gap_end = min(slot.start_minutes, day_end)
        if gap_end > cursor and gap_end - cursor >= min_session_minutes:
            blocks.append(TimeBlock(
                day_of_week=day_of_week,
                start_minutes=cursor,
                end_minutes=gap_end,
                is_preferred=slot.type != "not_preferred",
            ))
        cursor = max(cursor, slot.end_minutes)

    if day_end > cursor and day_end - cursor >= min_session_minutes:
        blocks.append(TimeBlock(
            day_of_week=day_of_week,
            start_minutes=cursor,
            end_minutes=day_end,
            is_preferred=True,
        ))

    return blocks


def total_block_minutes(blocks: list[TimeBlock]) -> int:
    return sum(b.duration_minutes() for b in blocks)
