"""Event router: fans tracker events out to registered listeners."""

from __future__ import annotations

import logging

from habitline.data.schemas import EventType, TrackerEvent
from habitline.notifications.base import EventListener

logger = logging.getLogger(__name__)


class EventRouter:
    """Dispatches events to every listener subscribed to their type.

    Listeners run synchronously in registration order. A failing listener
    is logged and skipped so the remaining listeners still see the event.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, EventListener] = {}
        self._subscriptions: dict[EventType, list[str]] = {t: [] for t in EventType}

    def register(
        self,
        listener: EventListener,
        event_types: list[EventType] | None = None,
    ) -> None:
        """Register a listener for the given event types (all when None)."""
        if listener.name in self._listeners:
            msg = f"Listener already registered: {listener.name}"
            raise ValueError(msg)
        types = list(EventType) if event_types is None else [EventType(t) for t in event_types]
        self._listeners[listener.name] = listener
        for event_type in types:
            self._subscriptions[event_type].append(listener.name)

    def unregister(self, name: str) -> None:
        """Remove a listener by name. Unknown names are ignored."""
        if self._listeners.pop(name, None) is None:
            return
        for names in self._subscriptions.values():
            if name in names:
                names.remove(name)

    @property
    def listeners(self) -> list[EventListener]:
        return list(self._listeners.values())

    def dispatch(self, event: TrackerEvent) -> int:
        """Deliver an event. Returns how many listeners handled it."""
        names = self._subscriptions.get(EventType(event["type"]), [])
        if not names:
            logger.debug("No listeners for %s event", event["type"])
            return 0
        delivered = 0
        for name in names:
            try:
                self._listeners[name].handle(event)
            except Exception:
                logger.exception("Listener %s failed on %s event", name, event["type"])
                continue
            delivered += 1
        return delivered

    # Lets the router be passed straight to the engines as an EventSink.
    __call__ = dispatch
