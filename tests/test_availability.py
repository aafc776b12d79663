"""Tests for studyplan/availability.py — free block carving and time-of-day buckets."""

from studyplan.availability import calculate_available_blocks, get_time_of_day
from studyplan.models import UnavailableSlot, UserPreferences


def _prefs(*slots: UnavailableSlot, wake: int = 480, sleep: int = 1320) -> UserPreferences:
    return UserPreferences(wake_time_minutes=wake, sleep_time_minutes=sleep, unavailable_slots=list(slots))


def test_get_time_of_day_boundaries():
    assert get_time_of_day(240) == "dawn"
    assert get_time_of_day(719) == "dawn"
    assert get_time_of_day(720) == "morning"
    assert get_time_of_day(1019) == "morning"
    assert get_time_of_day(1020) == "evening"
    assert get_time_of_day(1259) == "evening"
    assert get_time_of_day(1260) == "night"
    assert get_time_of_day(0) == "night"
    assert get_time_of_day(239) == "night"


def test_no_slots_yields_whole_day():
    blocks = calculate_available_blocks(0, _prefs(), 25)
    assert len(blocks) == 1
    assert (blocks[0].start_minutes, blocks[0].end_minutes) == (480, 1320)
    assert blocks[0].is_preferred is True


def test_slot_splits_day():
    blocks = calculate_available_blocks(0, _prefs(UnavailableSlot(0, 720, 780)), 25)
    assert [(b.start_minutes, b.end_minutes) for b in blocks] == [(480, 720), (780, 1320)]


def test_slots_on_other_days_ignored():
    blocks = calculate_available_blocks(1, _prefs(UnavailableSlot(0, 720, 780)), 25)
    assert len(blocks) == 1


def test_not_preferred_tags_the_gap_before_it():
    blocks = calculate_available_blocks(
        0, _prefs(UnavailableSlot(0, 720, 780, type="not_preferred")), 25
    )
    assert blocks[0].is_preferred is False
    # trailing block is always preferred
    assert blocks[1].is_preferred is True


def test_overlapping_slots_merge():
    blocks = calculate_available_blocks(
        0,
        _prefs(UnavailableSlot(0, 600, 700), UnavailableSlot(0, 650, 680), UnavailableSlot(0, 690, 800)),
        25,
    )
    assert [(b.start_minutes, b.end_minutes) for b in blocks] == [(480, 600), (800, 1320)]


def test_unsorted_slots_are_sorted():
    blocks = calculate_available_blocks(
        0, _prefs(UnavailableSlot(0, 1000, 1100), UnavailableSlot(0, 600, 700)), 25
    )
    assert [(b.start_minutes, b.end_minutes) for b in blocks] == [
        (480, 600), (700, 1000), (1100, 1320),
    ]


def test_short_gaps_dropped():
    blocks = calculate_available_blocks(0, _prefs(UnavailableSlot(0, 500, 1320)), 25)
    assert blocks == []


def test_wake_after_sleep_yields_nothing():
    assert calculate_available_blocks(0, _prefs(wake=1320, sleep=480), 25) == []
    assert calculate_available_blocks(0, _prefs(wake=600, sleep=600), 25) == []


def test_invalid_slots_carve_nothing():
    blocks = calculate_available_blocks(
        0,
        _prefs(UnavailableSlot(0, 800, 700), UnavailableSlot(0, -30, 600), UnavailableSlot(0, 1300, 1500)),
        25,
    )
    assert [(b.start_minutes, b.end_minutes) for b in blocks] == [(480, 1320)]


def test_slot_after_sleep_does_not_extend_day():
    blocks = calculate_available_blocks(0, _prefs(UnavailableSlot(0, 1380, 1400)), 25)
    assert [(b.start_minutes, b.end_minutes) for b in blocks] == [(480, 1320)]


def test_blocks_always_valid_and_long_enough():
    slots = [UnavailableSlot(d, s, s + 37) for d in range(7) for s in range(300, 1400, 90)]
    prefs = _prefs(*slots, wake=420, sleep=1380)
    for day in range(7):
        for block in calculate_available_blocks(day, prefs, 30):
            assert block.start_minutes < block.end_minutes
            assert block.end_minutes - block.start_minutes >= 30
            assert 420 <= block.start_minutes and block.end_minutes <= 1380
