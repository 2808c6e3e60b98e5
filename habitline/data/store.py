"""Habit store: create, edit, delete and look up habits in a tracker state."""

from __future__ import annotations

import logging
import secrets
import string
import time as _time
from datetime import datetime

from habitline.core.errors import NotFoundError, ValidationError
from habitline.data.schemas import Habit, HabitCategory, HabitTime, TrackerState, make_habit

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Return a millisecond timestamp in base 36 followed by a random suffix."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return _to_base36(int(_time.time() * 1000)) + suffix


def _clean_name(name: str) -> str:
    cleaned = name.strip() if isinstance(name, str) else ""
    if not cleaned:
        msg = "Habit name must not be empty"
        raise ValidationError(msg)
    return cleaned


def _coerce_category(category: str) -> HabitCategory:
    try:
        return HabitCategory(category)
    except ValueError:
        msg = f"Unknown category: {category!r}"
        raise ValidationError(msg) from None


def _coerce_time(time: str) -> HabitTime:
    try:
        return HabitTime(time)
    except ValueError:
        msg = f"Unknown time of day: {time!r}"
        raise ValidationError(msg) from None


def add_habit(
    state: TrackerState,
    name: str,
    category: str = HabitCategory.OTHER,
    time: str = HabitTime.ANYTIME,
    now: datetime | None = None,
) -> Habit:
    """Create a habit and append it to the tracker.

    Raises ValidationError for a blank name or an unknown category/time.
    """
    cleaned = _clean_name(name)
    cat = _coerce_category(category)
    tod = _coerce_time(time)

    habit_id = generate_id()
    while habit_id in state["habits"]:
        habit_id = generate_id()

    created = (now or datetime.now().astimezone()).isoformat()
    habit = make_habit(habit_id, cleaned, category=cat, time=tod, created_at=created)
    state["habits"][habit_id] = habit
    logger.info("Added habit %s (%s)", habit_id, cleaned)
    return habit


def find_habit(state: TrackerState, habit_id: str) -> Habit | None:
    """Return the habit with this id, or None."""
    return state["habits"].get(habit_id)


def get_habit(state: TrackerState, habit_id: str) -> Habit:
    """Return the habit with this id or raise NotFoundError."""
    habit = find_habit(state, habit_id)
    if habit is None:
        raise NotFoundError(habit_id)
    return habit


def update_habit(
    state: TrackerState,
    habit_id: str,
    name: str,
    category: str,
    time: str,
) -> None:
    """Overwrite name, category and time. Streak data is left alone."""
    habit = get_habit(state, habit_id)
    cleaned = _clean_name(name)
    cat = _coerce_category(category)
    tod = _coerce_time(time)

    habit["name"] = cleaned
    habit["category"] = cat
    habit["time"] = tod
    logger.info("Updated habit %s", habit_id)


def delete_habit(state: TrackerState, habit_id: str) -> None:
    """Remove a habit. Raises NotFoundError if it does not exist."""
    if habit_id not in state["habits"]:
        raise NotFoundError(habit_id)
    del state["habits"][habit_id]
    logger.info("Deleted habit %s", habit_id)


def set_main_goal(state: TrackerState, goal: str) -> None:
    """Replace the headline goal text."""
    cleaned = goal.strip() if isinstance(goal, str) else ""
    if not cleaned:
        msg = "Goal must not be empty"
        raise ValidationError(msg)
    state["main_goal"] = cleaned
