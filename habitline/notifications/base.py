"""Abstract base for tracker event listeners, and user-facing messages."""

from __future__ import annotations

import calendar
import logging
from abc import ABC, abstractmethod

from habitline.data.schemas import EventType, TrackerEvent

logger = logging.getLogger(__name__)


def format_message(event: TrackerEvent) -> str:
    """Render an event as the text shown to the user."""
    if event["type"] == EventType.MILESTONE:
        return f"Amazing! You've reached a {event['streak']}-day streak! Keep up the great work!"
    if event["type"] == EventType.ROLLOVER:
        month_name = calendar.month_name[event["month"]]
        return f"New month detected! Your streaks have been reset. Good luck with {month_name}!"
    msg = f"Unknown event type: {event['type']}"
    raise ValueError(msg)


class EventListener(ABC):
    """Something that reacts to tracker events (confetti, alerts, sounds)."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique listener name (e.g. 'log')."""

    @abstractmethod
    def handle(self, event: TrackerEvent) -> None:
        """React to one event. Must not block for long."""


class LoggingListener(EventListener):
    """Writes each event's user-facing message to the log."""

    def __init__(self, level: int = logging.INFO) -> None:
        self._level = level

    @property
    def name(self) -> str:
        return "log"

    def handle(self, event: TrackerEvent) -> None:
        logger.log(self._level, format_message(event))
