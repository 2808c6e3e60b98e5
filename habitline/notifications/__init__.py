"""Tracker event notifications: listener ABC, router, message formatting."""

from habitline.notifications.base import EventListener, LoggingListener, format_message
from habitline.notifications.router import EventRouter

__all__ = [
    "EventListener",
    "EventRouter",
    "LoggingListener",
    "format_message",
]
