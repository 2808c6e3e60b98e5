"""Habit and tracker state schemas, plus the events the engines emit."""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from enum import StrEnum
from typing import Literal, TypedDict

DEFAULT_GOAL = "Daily Habit Tracker"


class HabitCategory(StrEnum):
    """What area of life a habit belongs to."""

    HEALTH = "health"
    WORK = "work"
    LEARNING = "learning"
    PERSONAL = "personal"
    OTHER = "other"


class HabitTime(StrEnum):
    """Preferred time of day for a habit."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    ANYTIME = "anytime"


class EventType(StrEnum):
    """Notification kinds emitted to the UI side."""

    MILESTONE = "milestone"
    ROLLOVER = "rollover"


class Habit(TypedDict):
    """A tracked recurring activity."""

    id: str
    name: str
    category: str  # HabitCategory value
    time: str  # HabitTime value
    completed_dates: set[date]
    streak: int
    best_streak: int
    created_at: str  # ISO 8601, informational


class TrackerState(TypedDict):
    """Everything the tracker persists between sessions."""

    habits: dict[str, Habit]  # insertion order = display order
    tracked_month: int  # 1-12, as of the last rollover check
    tracked_year: int
    main_goal: str


class StreakSummary(TypedDict):
    """Streak figures across all habits."""

    bottleneck_streak: int  # weakest habit's streak
    best_streak_overall: int
    completed_today_count: int
    total_habits: int


class HabitCard(TypedDict):
    """Per-habit display values."""

    id: str
    name: str
    category: str
    time: str
    completion_rate: int
    completed_today: bool
    streak: int
    best_streak: int


class Dashboard(TypedDict):
    """All derived values a UI needs after a mutation."""

    date: str  # ISO date the values were computed for
    main_goal: str
    habits: list[HabitCard]
    monthly_progress: int
    summary: StreakSummary
    daily_labels: list[str]
    daily_series: list[int]
    weekly_labels: list[str]
    weekly_series: list[int]
    chart_max: int


class MilestoneEvent(TypedDict):
    """A streak just reached one of the celebration lengths."""

    type: Literal["milestone"]
    streak: int


class RolloverEvent(TypedDict):
    """A new month was detected and in-progress streaks were reset."""

    type: Literal["rollover"]
    month: int
    year: int


TrackerEvent = MilestoneEvent | RolloverEvent

# Engines call this synchronously; whatever it does is the caller's business.
EventSink = Callable[[TrackerEvent], None]


def make_habit(
    habit_id: str,
    name: str,
    category: str = HabitCategory.OTHER,
    time: str = HabitTime.ANYTIME,
    created_at: str | None = None,
) -> Habit:
    """Create a fresh habit with no completions."""
    return Habit(
        id=habit_id,
        name=name,
        category=category,
        time=time,
        completed_dates=set(),
        streak=0,
        best_streak=0,
        created_at=created_at or datetime.now().astimezone().isoformat(),
    )


def make_tracker_state(today: date, main_goal: str = DEFAULT_GOAL) -> TrackerState:
    """Create an empty tracker whose month marker is today's month."""
    return TrackerState(
        habits={},
        tracked_month=today.month,
        tracked_year=today.year,
        main_goal=main_goal,
    )


def make_milestone_event(streak: int) -> MilestoneEvent:
    """Create a milestone notification."""
    return MilestoneEvent(type="milestone", streak=streak)


def make_rollover_event(month: int, year: int) -> RolloverEvent:
    """Create a rollover notification."""
    return RolloverEvent(type="rollover", month=month, year=year)


def copy_habit(habit: Habit) -> Habit:
    """Return a copy that shares no mutable state with the source habit."""
    copied = habit.copy()
    copied["completed_dates"] = set(habit["completed_dates"])
    return copied
