"""Session facade: load state, run the monthly rollover, mutate, save."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from zoneinfo import ZoneInfo

from habitline.core.config import Settings
from habitline.core.config import settings as default_settings
from habitline.data import store
from habitline.data.analytics import build_dashboard
from habitline.data.audit import make_audit_entry, write_audit_entry
from habitline.data.completion import toggle_habit
from habitline.data.persistence import load_state, save_state
from habitline.data.rollover import check_for_new_month
from habitline.data.schemas import Dashboard, EventType, Habit, TrackerState
from habitline.notifications import EventListener, EventRouter

logger = logging.getLogger(__name__)


class HabitTracker:
    """One user session over a persisted tracker.

    Every mutation is saved immediately; the pure engines never touch disk.
    """

    def __init__(
        self,
        config: Settings | None = None,
        today_fn: Callable[[], date] | None = None,
        router: EventRouter | None = None,
    ) -> None:
        self._config = config or default_settings
        self._today_fn = today_fn or self._local_today
        self.router = router or EventRouter()
        self._state: TrackerState | None = None

    def _local_today(self) -> date:
        return datetime.now(ZoneInfo(self._config.timezone)).date()

    @property
    def today(self) -> date:
        return self._today_fn()

    @property
    def state(self) -> TrackerState:
        if self._state is None:
            msg = "HabitTracker.start() has not been called"
            raise RuntimeError(msg)
        return self._state

    def subscribe(self, listener: EventListener, event_types: list[EventType] | None = None) -> None:
        """Register a listener for milestone and/or rollover events."""
        self.router.register(listener, event_types)

    def start(self) -> TrackerState:
        """Load the saved state and apply the monthly rollover once."""
        if not logging.getLogger().handlers:
            logging.basicConfig(level=self._config.log_level.upper())

        today = self.today
        self._state = load_state(self._config.data_path, today, default_goal=self._config.default_goal)
        if check_for_new_month(self._state, today, emit=self.router):
            self._persist("rollover", month=today.month, year=today.year)
        return self._state

    def _persist(self, action: str, **fields: object) -> None:
        save_state(self.state, self._config.data_path)
        if self._config.audit_enabled:
            write_audit_entry(self._config.audit_path, make_audit_entry(action, **fields))

    def add_habit(self, name: str, category: str, time: str) -> Habit:
        habit = store.add_habit(self.state, name, category, time)
        self._persist("add", habit_id=habit["id"], name=habit["name"])
        return habit

    def update_habit(self, habit_id: str, name: str, category: str, time: str) -> None:
        store.update_habit(self.state, habit_id, name, category, time)
        self._persist("update", habit_id=habit_id)

    def delete_habit(self, habit_id: str) -> None:
        store.delete_habit(self.state, habit_id)
        self._persist("delete", habit_id=habit_id)

    def find_habit(self, habit_id: str) -> Habit | None:
        return store.find_habit(self.state, habit_id)

    def toggle(self, habit_id: str) -> Habit:
        """Tick or untick today's completion for a habit."""
        today = self.today
        habit = toggle_habit(self.state, habit_id, today, emit=self.router)
        self._persist(
            "toggle",
            habit_id=habit_id,
            day=today.isoformat(),
            completed=today in habit["completed_dates"],
            streak=habit["streak"],
        )
        return habit

    def set_main_goal(self, goal: str) -> None:
        store.set_main_goal(self.state, goal)
        self._persist("goal", goal=self.state["main_goal"])

    def dashboard(self) -> Dashboard:
        """All display values for today."""
        return build_dashboard(self.state, self.today)
