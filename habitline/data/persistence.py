"""Load and save the tracker snapshot as a single JSON document.

Older exports (camelCase keys, browser ``toDateString`` dates, records
missing ids or streak fields) are accepted and backfilled on load.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from habitline.data.schemas import (
    DEFAULT_GOAL,
    Habit,
    HabitCategory,
    HabitTime,
    TrackerState,
    make_tracker_state,
)
from habitline.data.store import generate_id

logger = logging.getLogger(__name__)

_BROWSER_DATE_FORMAT = "%a %b %d %Y"  # Date.prototype.toDateString()
_UNTITLED = "Untitled habit"


def parse_day(value: object) -> date | None:
    """Parse a stored calendar day; return None if it is not recognisable."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.strptime(text, _BROWSER_DATE_FORMAT).date()
    except ValueError:
        return None


class StoredHabit(BaseModel):
    """On-disk habit record. Missing or empty fields get defaults."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(default_factory=generate_id)
    name: str = _UNTITLED
    category: HabitCategory = HabitCategory.OTHER
    time: HabitTime = HabitTime.ANYTIME
    completed_dates: list[date] = Field(default_factory=list)
    streak: int = 0
    best_streak: int = 0
    created_at: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def backfill_id(cls, value: Any) -> str:
        if not value:
            return generate_id()
        return str(value)

    @field_validator("name", mode="before")
    @classmethod
    def backfill_name(cls, value: Any) -> str:
        cleaned = str(value).strip() if value is not None else ""
        return cleaned or _UNTITLED

    @field_validator("category", mode="before")
    @classmethod
    def known_category(cls, value: Any) -> HabitCategory:
        try:
            return HabitCategory(value)
        except ValueError:
            logger.warning("Unknown habit category %r, using 'other'", value)
            return HabitCategory.OTHER

    @field_validator("time", mode="before")
    @classmethod
    def known_time(cls, value: Any) -> HabitTime:
        try:
            return HabitTime(value)
        except ValueError:
            logger.warning("Unknown habit time %r, using 'anytime'", value)
            return HabitTime.ANYTIME

    @field_validator("completed_dates", mode="before")
    @classmethod
    def parse_dates(cls, value: Any) -> list[date]:
        if not value or not isinstance(value, list | tuple | set):
            return []
        days: set[date] = set()
        for raw in value:
            parsed = parse_day(raw)
            if parsed is None:
                logger.warning("Dropping unparseable completion date: %r", raw)
                continue
            days.add(parsed)
        return sorted(days)

    @field_validator("streak", "best_streak", mode="before")
    @classmethod
    def non_negative(cls, value: Any) -> int:
        try:
            return max(int(value or 0), 0)
        except (TypeError, ValueError):
            return 0

    @field_validator("created_at", mode="before")
    @classmethod
    def default_created_at(cls, value: Any) -> str:
        return str(value) if value else ""

    def to_habit(self) -> Habit:
        return Habit(
            id=self.id,
            name=self.name,
            category=self.category,
            time=self.time,
            completed_dates=set(self.completed_dates),
            streak=self.streak,
            best_streak=self.best_streak,
            created_at=self.created_at,
        )

    @classmethod
    def from_habit(cls, habit: Habit) -> StoredHabit:
        return cls(
            id=habit["id"],
            name=habit["name"],
            category=habit["category"],
            time=habit["time"],
            completed_dates=sorted(habit["completed_dates"]),
            streak=habit["streak"],
            best_streak=habit["best_streak"],
            created_at=habit["created_at"],
        )


class StoredState(BaseModel):
    """On-disk tracker snapshot."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    main_goal: str = DEFAULT_GOAL
    tracked_month: int
    tracked_year: int
    habits: list[StoredHabit] = Field(default_factory=list)


def _read_json(path: Path) -> dict[str, Any] | None:
    if not path.exists():
        return None
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
        logger.warning("Could not read tracker state from %s: %s", path, exc)
        return None
    if not isinstance(raw, dict):
        logger.warning("Tracker state in %s is not an object, ignoring", path)
        return None
    return raw


def _load_habits(raw_habits: object) -> dict[str, Habit]:
    habits: dict[str, Habit] = {}
    if not isinstance(raw_habits, list):
        return habits
    for raw in raw_habits:
        if not isinstance(raw, dict):
            logger.debug("Skipping non-object habit record: %r", raw)
            continue
        if not raw.get("id") or ("completedDates" not in raw and "completed_dates" not in raw):
            logger.warning("Backfilling legacy habit record %r", raw.get("name"))
        try:
            habit = StoredHabit.model_validate(raw).to_habit()
        except PydanticValidationError as exc:
            logger.warning("Skipping invalid habit record: %s", exc)
            continue
        if habit["id"] in habits:
            logger.warning("Duplicate habit id %s, assigning a new one", habit["id"])
            habit["id"] = generate_id()
        habits[habit["id"]] = habit
    return habits


def _as_int(value: object) -> int | None:
    """Accept ints and digit strings (the browser app stored numbers as strings)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _read_marker(raw: dict[str, Any]) -> tuple[int, int] | None:
    """Return the stored (month, year) marker, month 1-12, or None.

    Browser exports keep a 0-based ``currentMonth`` next to ``currentYear``.
    """
    month = _as_int(raw.get("trackedMonth", raw.get("tracked_month")))
    year = _as_int(raw.get("trackedYear", raw.get("tracked_year")))
    if month is None and year is None:
        legacy_month = _as_int(raw.get("currentMonth"))
        month = legacy_month + 1 if legacy_month is not None else None
        year = _as_int(raw.get("currentYear"))
    if month is None or year is None or not 1 <= month <= 12:
        return None
    return month, year


def load_state(path: Path, today: date, default_goal: str = DEFAULT_GOAL) -> TrackerState:
    """Read the tracker snapshot, or return an empty tracker if there is none.

    When no month marker is stored, it defaults to today's month so the
    first session does not trigger a rollover.
    """
    raw = _read_json(path)
    state = make_tracker_state(today, main_goal=default_goal)
    if raw is None:
        logger.info("No saved tracker state at %s, starting fresh", path)
        return state

    goal = raw.get("mainGoal", raw.get("main_goal"))
    if isinstance(goal, str) and goal.strip():
        state["main_goal"] = goal.strip()

    marker = _read_marker(raw)
    if marker is not None:
        state["tracked_month"], state["tracked_year"] = marker

    state["habits"] = _load_habits(raw.get("habits"))
    logger.info("Loaded %d habits from %s", len(state["habits"]), path)
    return state


def dump_state(state: TrackerState) -> dict[str, Any]:
    """Serialise a tracker state to a JSON-ready dict."""
    stored = StoredState(
        main_goal=state["main_goal"],
        tracked_month=state["tracked_month"],
        tracked_year=state["tracked_year"],
        habits=[StoredHabit.from_habit(h) for h in state["habits"].values()],
    )
    return stored.model_dump(mode="json", by_alias=True)


def save_state(state: TrackerState, path: Path) -> None:
    """Write the snapshot atomically: temp file in the same dir, then replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = json.dumps(dump_state(state), ensure_ascii=False, indent=2)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved %d habits to %s", len(state["habits"]), path)
