"""Error types raised by tracker operations."""

from __future__ import annotations


class HabitlineError(Exception):
    """Base class for all tracker errors."""


class ValidationError(HabitlineError, ValueError):
    """Invalid input, e.g. a blank habit name."""


class NotFoundError(HabitlineError, KeyError):
    """An operation referenced a habit id that is not in the tracker."""

    def __init__(self, habit_id: str) -> None:
        self.habit_id = habit_id
        super().__init__(f"Unknown habit: {habit_id}")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])
