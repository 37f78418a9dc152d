"""Unit tests for ProgressionEngine - pure Python logic tests.

Test Categories:
- Completion bookkeeping (idempotence per calendar day)
- Unlock recomputation (cascade, stickiness, celebration, all-unlocked)
- Reset and next-actionable lookups
"""

from __future__ import annotations

from datetime import date

from custom_components.habitladder import const
from custom_components.habitladder.engines.progression_engine import (
    CompletionResult,
    LadderProgress,
    ProgressionEngine,
    UnlockDelta,
)
from tests.helpers import make_habit

CONSECUTIVE = const.STREAK_POLICY_CONSECUTIVE_DAY
CAPPED = const.STREAK_POLICY_TOTAL_COUNT_CAPPED
THREE_DAYS = ["2026-01-01", "2026-01-02", "2026-01-03"]


def _ladder(count: int) -> list[dict]:
    return [
        make_habit(f"h{index}", f"Habit {index}", unlocked=index == 0)
        for index in range(count)
    ]


# =============================================================================
# Test: completion
# =============================================================================


class TestCompletion:
    """apply_completion / is_completed_on / can_complete_today."""

    def test_apply_completion_appends_today(self) -> None:
        habit = make_habit("h0", "Water", unlocked=True)
        ProgressionEngine.apply_completion(habit, date(2026, 1, 15))

        assert habit[const.DATA_HABIT_COMPLETION_DATES] == ["2026-01-15"]
        assert habit[const.DATA_HABIT_LAST_CHECKED_DATE] == "2026-01-15"
        assert ProgressionEngine.is_completed_on(habit, date(2026, 1, 15))

    def test_apply_completion_twice_keeps_one_entry(self) -> None:
        habit = make_habit("h0", "Water", unlocked=True)
        ProgressionEngine.apply_completion(habit, date(2026, 1, 15))
        ProgressionEngine.apply_completion(habit, date(2026, 1, 15))

        assert habit[const.DATA_HABIT_COMPLETION_DATES] == ["2026-01-15"]

    def test_can_complete_today(self) -> None:
        today = date(2026, 1, 15)
        locked = make_habit("h1", "Stretch")
        done = make_habit("h0", "Water", unlocked=True, dates=["2026-01-15"])
        open_habit = make_habit("h2", "Read", unlocked=True, dates=["2026-01-14"])

        assert not ProgressionEngine.can_complete_today(locked, today)
        assert not ProgressionEngine.can_complete_today(done, today)
        assert ProgressionEngine.can_complete_today(open_habit, today)

    def test_find_habit(self) -> None:
        habits = _ladder(3)
        assert ProgressionEngine.find_habit(habits, "h2") == (2, habits[2])
        assert ProgressionEngine.find_habit(habits, "missing") is None


# =============================================================================
# Test: recompute_unlocks
# =============================================================================


class TestRecomputeUnlocks:
    """Sequential unlock rules."""

    def test_empty_ladder(self) -> None:
        delta = ProgressionEngine.recompute_unlocks([], CONSECUTIVE)
        assert delta == UnlockDelta()
        assert not delta.has_changes

    def test_first_habit_always_unlocked(self) -> None:
        habits = [make_habit("h0", "Water")]
        ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)
        assert habits[0][const.DATA_HABIT_IS_UNLOCKED] is True

    def test_cascade_unlocks_only_next_rung(self) -> None:
        """Four habits, habit 0 done three days in a row: only habit 1 unlocks."""
        habits = _ladder(4)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)

        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        assert [h[const.DATA_HABIT_IS_UNLOCKED] for h in habits] == [
            True,
            True,
            False,
            False,
        ]
        assert delta.newly_unlocked == ["h1"]
        assert delta.primary_unlock == "h1"
        assert habits[1][const.DATA_HABIT_HAS_BEEN_CELEBRATED] is True
        assert delta.all_unlocked is False

    def test_unlock_requires_qualifying_predecessor(self) -> None:
        habits = _ladder(2)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = ["2026-01-01", "2026-01-02"]

        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        assert habits[1][const.DATA_HABIT_IS_UNLOCKED] is False
        assert not delta.has_changes

    def test_multiple_unlocks_in_one_pass_primary_is_last(self) -> None:
        """Bulk-imported history unlocks several rungs at once."""
        habits = _ladder(3)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        habits[1][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)

        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        assert delta.newly_unlocked == ["h1", "h2"]
        assert delta.primary_unlock == "h2"
        assert delta.all_unlocked is True

    def test_unlocks_are_sticky(self) -> None:
        """A broken predecessor streak never relocks its successor."""
        habits = _ladder(2)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        habits[0][const.DATA_HABIT_COMPLETION_DATES].append("2026-01-10")
        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        assert habits[1][const.DATA_HABIT_IS_UNLOCKED] is True
        assert not delta.has_changes

    def test_celebrated_habit_not_reannounced(self) -> None:
        """Relocked-by-hand but already celebrated habits unlock silently."""
        habits = _ladder(2)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        habits[1][const.DATA_HABIT_HAS_BEEN_CELEBRATED] = True

        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)

        assert habits[1][const.DATA_HABIT_IS_UNLOCKED] is True
        assert delta.newly_unlocked == []
        assert delta.has_changes

    def test_all_unlocked_fires_exactly_once(self) -> None:
        habits = _ladder(3)
        habits[0][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        first = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)
        assert first.all_unlocked is False

        habits[1][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        second = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)
        assert second.all_unlocked is True

        habits[2][const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
        third = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)
        assert third.all_unlocked is False
        assert not third.has_changes

    def test_single_habit_ladder_never_fires_all_unlocked(self) -> None:
        habits = [make_habit("h0", "Water", dates=THREE_DAYS)]
        delta = ProgressionEngine.recompute_unlocks(habits, CONSECUTIVE)
        assert delta.all_unlocked is False

    def test_policy_changes_outcome(self) -> None:
        gapped = ["2026-01-01", "2026-01-04", "2026-01-08"]
        consecutive = _ladder(2)
        capped = _ladder(2)
        consecutive[0][const.DATA_HABIT_COMPLETION_DATES] = list(gapped)
        capped[0][const.DATA_HABIT_COMPLETION_DATES] = list(gapped)

        ProgressionEngine.recompute_unlocks(consecutive, CONSECUTIVE)
        ProgressionEngine.recompute_unlocks(capped, CAPPED)

        assert consecutive[1][const.DATA_HABIT_IS_UNLOCKED] is False
        assert capped[1][const.DATA_HABIT_IS_UNLOCKED] is True


# =============================================================================
# Test: reset and lookups
# =============================================================================


class TestResetAndLookups:
    """reset_habits / next_actionable_habit / counters."""

    def test_reset_clears_progress(self) -> None:
        habits = _ladder(3)
        for habit in habits:
            habit[const.DATA_HABIT_COMPLETION_DATES] = list(THREE_DAYS)
            habit[const.DATA_HABIT_IS_UNLOCKED] = True
            habit[const.DATA_HABIT_HAS_BEEN_CELEBRATED] = True

        ProgressionEngine.reset_habits(habits)

        assert [h[const.DATA_HABIT_IS_UNLOCKED] for h in habits] == [True, False, False]
        for habit in habits:
            assert habit[const.DATA_HABIT_COMPLETION_DATES] == []
            assert habit[const.DATA_HABIT_LAST_CHECKED_DATE] is None
            assert habit[const.DATA_HABIT_HAS_BEEN_CELEBRATED] is False

    def test_next_actionable_habit(self) -> None:
        today = date(2026, 1, 15)
        habits = _ladder(3)
        habits[1][const.DATA_HABIT_IS_UNLOCKED] = True

        assert ProgressionEngine.next_actionable_habit(habits, today) is habits[0]

        ProgressionEngine.apply_completion(habits[0], today)
        assert ProgressionEngine.next_actionable_habit(habits, today) is habits[1]

        ProgressionEngine.apply_completion(habits[1], today)
        assert ProgressionEngine.next_actionable_habit(habits, today) is None

    def test_counters(self) -> None:
        today = date(2026, 1, 15)
        habits = _ladder(3)
        habits[1][const.DATA_HABIT_IS_UNLOCKED] = True
        ProgressionEngine.apply_completion(habits[0], today)

        assert ProgressionEngine.unlocked_count(habits) == 2
        assert ProgressionEngine.completed_today_count(habits, today) == 1

    def test_ladder_progress(self) -> None:
        today = date(2026, 1, 15)
        habits = _ladder(2)
        ProgressionEngine.apply_completion(habits[0], today)

        assert ProgressionEngine.ladder_progress(habits, today) == LadderProgress(
            total=2, unlocked=1, completed_today=1, all_unlocked=False
        )

        habits[1][const.DATA_HABIT_IS_UNLOCKED] = True
        assert ProgressionEngine.ladder_progress(habits, today).all_unlocked
        assert not ProgressionEngine.ladder_progress([], today).all_unlocked


def test_completion_result_serialization() -> None:
    result = CompletionResult(
        outcome=const.COMPLETION_OUTCOME_COMPLETED,
        habit_id="h0",
        habit=make_habit("h0", "Water", unlocked=True),
        streak=3,
        has_qualifying_streak=True,
        newly_unlocked=["h1", "h2"],
    )

    assert result.is_success
    assert result.primary_unlock == "h2"
    assert result.as_dict() == {
        "outcome": "completed",
        "habit_id": "h0",
        "habit_name": "Water",
        "streak": 3,
        "has_qualifying_streak": True,
        "newly_unlocked": ["h1", "h2"],
        "primary_unlock": "h2",
        "all_unlocked": False,
    }
