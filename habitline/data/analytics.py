"""Completion rates, monthly progress, streak summary and chart series."""

from __future__ import annotations

import calendar
from collections.abc import Collection
from datetime import date, timedelta

from habitline.data.schemas import Dashboard, Habit, HabitCard, StreakSummary, TrackerState

WEEKDAY_LABELS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
_SERIES_DAYS = 7


def _percent(part: int, whole: int) -> int:
    """Integer percentage rounded half-up. Both operands are non-negative."""
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


def _sunday_index(d: date) -> int:
    """Weekday index with Sunday=0 .. Saturday=6."""
    return d.isoweekday() % 7


def _completed_in_month(habit: Habit, year: int, month: int) -> int:
    return sum(1 for d in habit["completed_dates"] if d.year == year and d.month == month)


def habit_completion_rate(habit: Habit, reference_date: date) -> int:
    """Percent of the reference month's days on which the habit was completed."""
    days_in_month = calendar.monthrange(reference_date.year, reference_date.month)[1]
    completed = _completed_in_month(habit, reference_date.year, reference_date.month)
    return _percent(completed, days_in_month)


def monthly_progress(habits: Collection[Habit], reference_date: date) -> int:
    """Percent of possible completions so far this month, across all habits.

    Possible completions = habit count * days elapsed (including today).
    """
    total_possible = len(habits) * reference_date.day
    if total_possible == 0:
        return 0
    total_completed = sum(_completed_in_month(h, reference_date.year, reference_date.month) for h in habits)
    return _percent(total_completed, total_possible)


def current_streak_summary(habits: Collection[Habit], today: date) -> StreakSummary:
    """Overall streak figures.

    The overall streak is the minimum across habits: one neglected habit
    drags it down to its own value.
    """
    if not habits:
        return StreakSummary(bottleneck_streak=0, best_streak_overall=0, completed_today_count=0, total_habits=0)

    return StreakSummary(
        bottleneck_streak=min(h["streak"] for h in habits),
        best_streak_overall=max(h["best_streak"] for h in habits),
        completed_today_count=sum(1 for h in habits if today in h["completed_dates"]),
        total_habits=len(habits),
    )


def _last_days(reference_date: date) -> list[date]:
    return [reference_date - timedelta(days=offset) for offset in range(_SERIES_DAYS - 1, -1, -1)]


def daily_series(habits: Collection[Habit], reference_date: date) -> list[int]:
    """Habits completed on each of the 7 days ending at reference_date, oldest first."""
    return [sum(1 for h in habits if day in h["completed_dates"]) for day in _last_days(reference_date)]


def daily_labels(reference_date: date) -> list[str]:
    """Short weekday names lining up with daily_series."""
    return [WEEKDAY_LABELS[_sunday_index(day)] for day in _last_days(reference_date)]


def week_start(reference_date: date) -> date:
    """Monday of the Monday-Sunday week containing reference_date."""
    return reference_date - timedelta(days=reference_date.weekday())


def weekly_series(habits: Collection[Habit], reference_date: date) -> list[int]:
    """Completions in the current Monday-Sunday week, bucketed Sun..Sat."""
    monday = week_start(reference_date)
    sunday = monday + timedelta(days=6)
    buckets = [0] * 7
    for habit in habits:
        for day in habit["completed_dates"]:
            if monday <= day <= sunday:
                buckets[_sunday_index(day)] += 1
    return buckets


def build_dashboard(state: TrackerState, today: date) -> Dashboard:
    """Compute every display value for the current state in one pass."""
    habits = list(state["habits"].values())
    cards = [
        HabitCard(
            id=h["id"],
            name=h["name"],
            category=h["category"],
            time=h["time"],
            completion_rate=habit_completion_rate(h, today),
            completed_today=today in h["completed_dates"],
            streak=h["streak"],
            best_streak=h["best_streak"],
        )
        for h in habits
    ]
    return Dashboard(
        date=today.isoformat(),
        main_goal=state["main_goal"],
        habits=cards,
        monthly_progress=monthly_progress(habits, today),
        summary=current_streak_summary(habits, today),
        daily_labels=daily_labels(today),
        daily_series=daily_series(habits, today),
        weekly_labels=list(WEEKDAY_LABELS),
        weekly_series=weekly_series(habits, today),
        chart_max=len(habits),
    )
