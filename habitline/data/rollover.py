"""Month rollover: reset in-progress streaks when a new month starts."""

from __future__ import annotations

import logging
from datetime import date

from habitline.data.schemas import EventSink, TrackerState, make_rollover_event

logger = logging.getLogger(__name__)


def is_new_month(state: TrackerState, today: date) -> bool:
    """True if today's month/year differs from the tracked marker."""
    return (today.year, today.month) != (state["tracked_year"], state["tracked_month"])


def check_for_new_month(state: TrackerState, today: date, emit: EventSink | None = None) -> bool:
    """Zero every streak on a month change, keeping best streaks.

    Returns True when a rollover happened. Repeated calls within the same
    month are no-ops.
    """
    if not is_new_month(state, today):
        return False

    for habit in state["habits"].values():
        habit["streak"] = 0

    state["tracked_month"] = today.month
    state["tracked_year"] = today.year
    logger.info(
        "New month %04d-%02d: reset streaks for %d habits",
        today.year,
        today.month,
        len(state["habits"]),
    )
    if emit is not None:
        emit(make_rollover_event(today.month, today.year))
    return True
