"""Daily completion toggling and the boundary streak rule."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from habitline.data.schemas import EventSink, Habit, TrackerState, copy_habit, make_milestone_event
from habitline.data.store import get_habit

logger = logging.getLogger(__name__)

MILESTONES = (3, 7, 14, 21, 30, 60, 90)


def check_milestone(streak: int) -> int | None:
    """Return the milestone value if streak is exactly a milestone, else None."""
    if streak in MILESTONES:
        return streak
    return None


def toggle_completion(habit: Habit, today: date, emit: EventSink | None = None) -> Habit:
    """Flip today's completion and adjust the streak at the yesterday boundary.

    Only the two-day window is inspected: the stored streak is trusted to be
    correct up to yesterday. Un-ticking today zeroes the streak only when
    yesterday is also missing; ticking today either extends the streak or
    restarts it at 1. The input habit is not modified.
    """
    updated = copy_habit(habit)
    dates = updated["completed_dates"]
    yesterday = today - timedelta(days=1)

    if today in dates:
        dates.discard(today)
        if yesterday not in dates:
            updated["streak"] = 0
        logger.debug("Habit %s unmarked for %s, streak=%d", updated["id"], today, updated["streak"])
        return updated

    dates.add(today)
    if yesterday in dates:
        updated["streak"] += 1
        if updated["streak"] > updated["best_streak"]:
            updated["best_streak"] = updated["streak"]

        milestone = check_milestone(updated["streak"])
        if milestone is not None:
            logger.info("Habit %s reached a %d-day streak", updated["id"], milestone)
            if emit is not None:
                emit(make_milestone_event(milestone))
    else:
        updated["streak"] = 1
        if updated["best_streak"] < 1:
            updated["best_streak"] = 1

    logger.debug("Habit %s marked for %s, streak=%d", updated["id"], today, updated["streak"])
    return updated


def toggle_habit(
    state: TrackerState,
    habit_id: str,
    today: date,
    emit: EventSink | None = None,
) -> Habit:
    """Toggle a stored habit by id and write the result back into the state."""
    habit = get_habit(state, habit_id)
    updated = toggle_completion(habit, today, emit=emit)
    state["habits"][habit_id] = updated
    return updated
