"""Tests for habitline.data.completion: toggle and boundary streak rule."""

from __future__ import annotations

from datetime import date, timedelta
from unittest.mock import MagicMock

import pytest

from habitline.core.errors import NotFoundError
from habitline.data.completion import MILESTONES, check_milestone, toggle_completion, toggle_habit
from habitline.data.schemas import Habit, make_habit, make_tracker_state

JAN_1 = date(2024, 1, 1)
JAN_2 = date(2024, 1, 2)
JAN_3 = date(2024, 1, 3)


def _habit(dates: set[date] | None = None, streak: int = 0, best: int = 0) -> Habit:
    habit = make_habit("h1", "Exercise", category="health", time="morning")
    habit["completed_dates"] = set(dates or ())
    habit["streak"] = streak
    habit["best_streak"] = best
    return habit


# ---------------------------------------------------------------------------
# check_milestone
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("days", [3, 7, 14, 21, 30, 60, 90])
def test_check_milestone_hits(days: int) -> None:
    assert check_milestone(days) == days


@pytest.mark.parametrize("days", [0, 1, 2, 4, 8, 29, 31, 100])
def test_check_milestone_miss(days: int) -> None:
    assert check_milestone(days) is None


def test_milestones_constant() -> None:
    assert MILESTONES == (3, 7, 14, 21, 30, 60, 90)


# ---------------------------------------------------------------------------
# toggle_completion: adding today
# ---------------------------------------------------------------------------


class TestMarkToday:
    def test_extends_streak_and_hits_milestone(self) -> None:
        emit = MagicMock()
        habit = _habit({JAN_1, JAN_2}, streak=2, best=2)

        updated = toggle_completion(habit, JAN_3, emit=emit)

        assert updated["completed_dates"] == {JAN_1, JAN_2, JAN_3}
        assert updated["streak"] == 3
        assert updated["best_streak"] == 3
        emit.assert_called_once_with({"type": "milestone", "streak": 3})

    def test_no_yesterday_restarts_at_one(self) -> None:
        emit = MagicMock()
        habit = _habit({JAN_1}, streak=5, best=5)

        updated = toggle_completion(habit, JAN_3, emit=emit)

        assert updated["streak"] == 1
        assert updated["best_streak"] == 5
        emit.assert_not_called()

    def test_first_completion_sets_best_to_one(self) -> None:
        updated = toggle_completion(_habit(), JAN_3)
        assert updated["streak"] == 1
        assert updated["best_streak"] == 1

    def test_best_not_raised_below_record(self) -> None:
        habit = _habit({JAN_2}, streak=1, best=10)
        updated = toggle_completion(habit, JAN_3)
        assert updated["streak"] == 2
        assert updated["best_streak"] == 10

    def test_no_event_for_non_milestone(self) -> None:
        emit = MagicMock()
        habit = _habit({JAN_2}, streak=3, best=3)
        updated = toggle_completion(habit, JAN_3, emit=emit)
        assert updated["streak"] == 4
        emit.assert_not_called()

    def test_input_not_mutated(self) -> None:
        habit = _habit({JAN_1, JAN_2}, streak=2, best=2)
        toggle_completion(habit, JAN_3)
        assert habit["completed_dates"] == {JAN_1, JAN_2}
        assert habit["streak"] == 2

    def test_works_without_emit(self) -> None:
        habit = _habit({JAN_1, JAN_2}, streak=2, best=2)
        assert toggle_completion(habit, JAN_3)["streak"] == 3

    def test_across_month_boundary(self) -> None:
        habit = _habit({date(2024, 1, 31)}, streak=1, best=1)
        updated = toggle_completion(habit, date(2024, 2, 1))
        assert updated["streak"] == 2


# ---------------------------------------------------------------------------
# toggle_completion: removing today
# ---------------------------------------------------------------------------


class TestUnmarkToday:
    def test_yesterday_present_keeps_streak(self) -> None:
        habit = _habit({JAN_1, JAN_2, JAN_3}, streak=3, best=3)
        updated = toggle_completion(habit, JAN_3)
        assert updated["completed_dates"] == {JAN_1, JAN_2}
        assert updated["streak"] == 3
        assert updated["best_streak"] == 3

    def test_yesterday_absent_zeroes_streak(self) -> None:
        habit = _habit({JAN_3}, streak=1, best=4)
        updated = toggle_completion(habit, JAN_3)
        assert updated["completed_dates"] == set()
        assert updated["streak"] == 0
        assert updated["best_streak"] == 4

    def test_removal_never_emits(self) -> None:
        emit = MagicMock()
        habit = _habit({JAN_2, JAN_3}, streak=3, best=3)
        toggle_completion(habit, JAN_3, emit=emit)
        emit.assert_not_called()


class TestScenarios:
    def test_tick_then_untick_keeps_streak_when_yesterday_done(self) -> None:
        emit = MagicMock()
        habit = _habit({JAN_1, JAN_2}, streak=2, best=2)

        after_add = toggle_completion(habit, JAN_3, emit=emit)
        after_remove = toggle_completion(after_add, JAN_3, emit=emit)

        assert JAN_3 not in after_remove["completed_dates"]
        assert after_remove["streak"] == 3
        assert emit.call_count == 1

    def test_add_then_remove_restores_membership_but_may_zero_streak(self) -> None:
        habit = _habit({JAN_1}, streak=1, best=1)
        after = toggle_completion(toggle_completion(habit, JAN_3), JAN_3)
        assert after["completed_dates"] == habit["completed_dates"]
        assert after["streak"] == 0

    def test_best_streak_never_below_streak(self) -> None:
        habit = _habit()
        start = date(2024, 3, 1)
        # tick most days, untick a few, skip some
        pattern = [1, 1, 1, 0, 1, 1, 2, 1, 1, 1, 1, 0, 2, 1, 1]
        for offset, action in enumerate(pattern):
            day = start + timedelta(days=offset)
            if action == 0:
                continue
            habit = toggle_completion(habit, day)
            if action == 2:
                habit = toggle_completion(habit, day)
            assert habit["best_streak"] >= habit["streak"]

    def test_seven_day_run_emits_three_and_seven(self) -> None:
        emit = MagicMock()
        habit = _habit()
        for offset in range(7):
            habit = toggle_completion(habit, JAN_1 + timedelta(days=offset), emit=emit)
        assert habit["streak"] == 7
        assert [c.args[0]["streak"] for c in emit.call_args_list] == [3, 7]


class TestToggleHabit:
    def test_writes_back_into_state(self) -> None:
        state = make_tracker_state(JAN_3)
        state["habits"]["h1"] = _habit({JAN_2}, streak=1, best=1)

        updated = toggle_habit(state, "h1", JAN_3)

        assert state["habits"]["h1"] is updated
        assert state["habits"]["h1"]["streak"] == 2

    def test_unknown_id(self) -> None:
        state = make_tracker_state(JAN_3)
        with pytest.raises(NotFoundError):
            toggle_habit(state, "missing", JAN_3)
