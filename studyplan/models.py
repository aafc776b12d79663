"""Typed dataclasses for the studyplan data model.

All exchanged models use from_dict/to_dict for JSON/YAML serialization.
camelCase in JSON is mapped to snake_case in Python; both spellings are
accepted on input. Unknown keys are ignored; missing keys use defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# ── Constants ─────────────────────────────────────────────────

TIME_OF_DAY_BUCKETS = ("dawn", "morning", "evening", "night")
SLOT_TYPES = {"unavailable", "not_preferred"}
DAY_NAMES = ["mon", "tue", "wed", "thu", "fri", "sat", "sun"]


# ── Parsing helpers ───────────────────────────────────────────


def _get(d: dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    if snake in d:
        return d[snake]
    return d.get(camel, default)


def parse_minutes(value: Any) -> int:
    """Parse minutes-since-midnight from an int or an 'HH:MM' string."""
    if isinstance(value, str):
        parts = value.strip().split(":")
        if len(parts) != 2:
            raise ValueError(f"Invalid time of day: {value!r}")
        hours, minutes = int(parts[0]), int(parts[1])
        if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes):
            raise ValueError(f"Invalid time of day: {value!r}")
        return hours * 60 + minutes
    return int(value)


def parse_day(value: Any) -> int:
    """Parse a day index from 0-6 or a day name ('mon'..'sun', 0 = Monday)."""
    if isinstance(value, str) and not value.strip().isdigit():
        name = value.strip().lower()[:3]
        if name not in DAY_NAMES:
            raise ValueError(f"Invalid day of week: {value!r}")
        return DAY_NAMES.index(name)
    return int(value)


# ── Inputs ────────────────────────────────────────────────────


@dataclass
class Task:
    id: str = ""
    name: str = ""
    estimated_hours: float = 0.0
    urgency: float = 0.0
    deadline_day_index: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Task:
        deadline = _get(d, "deadline_day_index", "deadlineDayIndex")
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", d.get("title", ""))),
            estimated_hours=float(_get(d, "estimated_hours", "estimatedHours", 0.0) or 0.0),
            urgency=float(d.get("urgency", 0.0) or 0.0),
            deadline_day_index=parse_day(deadline) if deadline is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "estimatedHours": self.estimated_hours,
            "urgency": self.urgency,
            "deadlineDayIndex": self.deadline_day_index,
        }


@dataclass
class UnavailableSlot:
    day_of_week: int = 0
    start_minutes: int = 0
    end_minutes: int = 0
    type: str = "unavailable"  # unavailable, not_preferred

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UnavailableSlot:
        return cls(
            day_of_week=parse_day(_get(d, "day_of_week", "dayOfWeek", d.get("day", 0))),
            start_minutes=parse_minutes(_get(d, "start_minutes", "startMinutes", d.get("start", 0))),
            end_minutes=parse_minutes(_get(d, "end_minutes", "endMinutes", d.get("end", 0))),
            type=str(d.get("type", "unavailable")),
        )

    def is_valid(self) -> bool:
        """A slot carves out time only if it is a proper range inside the day."""
        return 0 <= self.start_minutes < self.end_minutes <= 1440

    def to_dict(self) -> dict[str, Any]:
        return {
            "dayOfWeek": self.day_of_week,
            "startMinutes": self.start_minutes,
            "endMinutes": self.end_minutes,
            "type": self.type,
        }


@dataclass
class UserPreferences:
    wake_time_minutes: int = 480
    sleep_time_minutes: int = 1320
    preferred_activity_time: str = "morning"
    max_consecutive_pomodoros: int = 4
    unavailable_slots: list[UnavailableSlot] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> UserPreferences:
        if not d or not isinstance(d, dict):
            return cls()
        wake = _get(d, "wake_time_minutes", "wakeTimeMinutes", d.get("wake_time", 480))
        sleep = _get(d, "sleep_time_minutes", "sleepTimeMinutes", d.get("sleep_time", 1320))
        slots = _get(d, "unavailable_slots", "unavailableSlots") or []
        return cls(
            wake_time_minutes=parse_minutes(wake),
            sleep_time_minutes=parse_minutes(sleep),
            preferred_activity_time=str(
                _get(d, "preferred_activity_time", "preferredActivityTime", "morning")
            ),
            max_consecutive_pomodoros=int(
                _get(d, "max_consecutive_pomodoros", "maxConsecutivePomodoros", 4)
            ),
            unavailable_slots=[UnavailableSlot.from_dict(s) for s in slots],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "wakeTimeMinutes": self.wake_time_minutes,
            "sleepTimeMinutes": self.sleep_time_minutes,
            "preferredActivityTime": self.preferred_activity_time,
            "maxConsecutivePomodoros": self.max_consecutive_pomodoros,
            "unavailableSlots": [s.to_dict() for s in self.unavailable_slots],
        }


@dataclass
class CompletedSession:
    task_id: str = ""
    duration_minutes: float = 0.0
    focus_rating: float = 0.0  # 0-5
    day_of_week: int = 0
    time_of_day: str = "morning"
    sequence_number: int | None = None

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> CompletedSession:
        seq = _get(d, "sequence_number", "sequenceNumber")
        return cls(
            task_id=str(_get(d, "task_id", "taskId", "")),
            duration_minutes=float(_get(d, "duration_minutes", "durationMinutes", 0.0)),
            focus_rating=float(_get(d, "focus_rating", "focusRating", 0.0)),
            day_of_week=parse_day(_get(d, "day_of_week", "dayOfWeek", 0)),
            time_of_day=str(_get(d, "time_of_day", "timeOfDay", "morning")),
            sequence_number=int(seq) if seq is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "taskId": self.task_id,
            "durationMinutes": self.duration_minutes,
            "focusRating": self.focus_rating,
            "dayOfWeek": self.day_of_week,
            "timeOfDay": self.time_of_day,
        }
        if self.sequence_number is not None:
            d["sequenceNumber"] = self.sequence_number
        return d


# ── Blocks ────────────────────────────────────────────────────


@dataclass
class TimeBlock:
    """A contiguous span of free time on one day."""

    day_of_week: int
    start_minutes: int
    end_minutes: int
    is_preferred: bool = True

    def duration_minutes(self) -> int:
        return max(0, self.end_minutes - self.start_minutes)


@dataclass
class WeightedTimeBlock(TimeBlock):
    weight: float = 1.0


@dataclass
class FocusProfile:
    time_of_day_scores: dict[str, float] = field(
        default_factory=lambda: {bucket: 3.0 for bucket in TIME_OF_DAY_BUCKETS}
    )
    sample_count: int = 0


# ── Schedule ──────────────────────────────────────────────────


@dataclass
class ScheduledSession:
    id: str = ""
    task_id: str = ""
    day_of_week: int = 0
    start_minutes: int = 0
    end_minutes: int = 0
    sequence_number: int = 0

    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScheduledSession:
        return cls(
            id=str(d.get("id", "")),
            task_id=str(_get(d, "task_id", "taskId", "")),
            day_of_week=parse_day(_get(d, "day_of_week", "dayOfWeek", 0)),
            start_minutes=parse_minutes(_get(d, "start_minutes", "startMinutes", 0)),
            end_minutes=parse_minutes(_get(d, "end_minutes", "endMinutes", 0)),
            sequence_number=int(_get(d, "sequence_number", "sequenceNumber", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "taskId": self.task_id,
            "dayOfWeek": self.day_of_week,
            "startMinutes": self.start_minutes,
            "endMinutes": self.end_minutes,
            "sequenceNumber": self.sequence_number,
        }


@dataclass
class ScheduleProposal:
    sessions: list[ScheduledSession] = field(default_factory=list)
    total_planned_hours: float = 0.0
    utilization_rate: float = 0.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> ScheduleProposal:
        if not d or not isinstance(d, dict):
            return cls()
        return cls(
            sessions=[ScheduledSession.from_dict(s) for s in (d.get("sessions") or [])],
            total_planned_hours=float(_get(d, "total_planned_hours", "totalPlannedHours", 0.0)),
            utilization_rate=float(_get(d, "utilization_rate", "utilizationRate", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "sessions": [s.to_dict() for s in self.sessions],
            "totalPlannedHours": round(self.total_planned_hours, 3),
            "utilizationRate": round(self.utilization_rate, 3),
        }


# ── Metrics ───────────────────────────────────────────────────


@dataclass
class DailyMetrics:
    status: str = "on_track"  # on_track, behind, fatigued, overperforming
    planned_minutes: float = 0.0
    actual_minutes: float = 0.0
    adherence_score: float = 0.0
    focus_score: float = 0.0
    adjustment_factor: float = 1.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> DailyMetrics:
        return cls(
            status=str(d.get("status", "on_track")),
            planned_minutes=float(_get(d, "planned_minutes", "plannedMinutes", 0.0)),
            actual_minutes=float(_get(d, "actual_minutes", "actualMinutes", 0.0)),
            adherence_score=float(_get(d, "adherence_score", "adherenceScore", 0.0)),
            focus_score=float(_get(d, "focus_score", "focusScore", 0.0)),
            adjustment_factor=float(_get(d, "adjustment_factor", "adjustmentFactor", 1.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "plannedMinutes": self.planned_minutes,
            "actualMinutes": self.actual_minutes,
            "adherenceScore": round(self.adherence_score, 3),
            "focusScore": round(self.focus_score, 3),
            "adjustmentFactor": self.adjustment_factor,
        }


@dataclass
class TaskPerformance:
    task_id: str = ""
    estimated_hours: float = 0.0
    actual_hours: float = 0.0
    average_focus: float = 0.0
    efficiency: float = 0.0

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> TaskPerformance:
        return cls(
            task_id=str(_get(d, "task_id", "taskId", "")),
            estimated_hours=float(_get(d, "estimated_hours", "estimatedHours", 0.0)),
            actual_hours=float(_get(d, "actual_hours", "actualHours", 0.0)),
            average_focus=float(_get(d, "average_focus", "averageFocus", 0.0)),
            efficiency=float(d.get("efficiency", 0.0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "taskId": self.task_id,
            "estimatedHours": self.estimated_hours,
            "actualHours": round(self.actual_hours, 3),
            "averageFocus": round(self.average_focus, 3),
            "efficiency": round(self.efficiency, 3),
        }


@dataclass
class WeeklyMetrics:
    planned_hours: float = 0.0
    actual_hours: float = 0.0
    estimation_accuracy: float = 0.0
    average_focus: float = 0.0
    best_focus_time: str | None = None
    worst_focus_time: str | None = None
    fatigue_indicator: float = 0.0
    task_performance: list[TaskPerformance] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WeeklyMetrics:
        if not d or not isinstance(d, dict):
            return cls()
        perf = _get(d, "task_performance", "taskPerformance") or []
        return cls(
            planned_hours=float(_get(d, "planned_hours", "plannedHours", 0.0)),
            actual_hours=float(_get(d, "actual_hours", "actualHours", 0.0)),
            estimation_accuracy=float(_get(d, "estimation_accuracy", "estimationAccuracy", 0.0)),
            average_focus=float(_get(d, "average_focus", "averageFocus", 0.0)),
            best_focus_time=_get(d, "best_focus_time", "bestFocusTime"),
            worst_focus_time=_get(d, "worst_focus_time", "worstFocusTime"),
            fatigue_indicator=float(_get(d, "fatigue_indicator", "fatigueIndicator", 0.0)),
            task_performance=[TaskPerformance.from_dict(p) for p in perf],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "plannedHours": round(self.planned_hours, 3),
            "actualHours": round(self.actual_hours, 3),
            "estimationAccuracy": round(self.estimation_accuracy, 3),
            "averageFocus": round(self.average_focus, 3),
            "bestFocusTime": self.best_focus_time,
            "worstFocusTime": self.worst_focus_time,
            "fatigueIndicator": round(self.fatigue_indicator, 3),
            "taskPerformance": [p.to_dict() for p in self.task_performance],
        }


# ── Recommendations ───────────────────────────────────────────


@dataclass
class Recommendation:
    type: str = ""
    value: float = 0.0
    confidence: float = 0.0
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "value": round(self.value, 3),
            "confidence": self.confidence,
            "reason": self.reason,
        }
