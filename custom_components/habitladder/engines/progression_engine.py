"""Progression Engine - Pure logic for the ladder unlock state machine.

This engine provides stateless, pure Python functions for:
- Recording a completion on a habit's history
- Recomputing unlock status down the ladder (sticky unlocks)
- Detecting newly unlocked habits and the one-time "all unlocked" transition
- Resetting a ladder's progress
- Finding the next actionable habit

Per-habit state machine:
    Locked -> Unlocked (one-way, undone only by reset_habits)
    "Streak qualified" is derived on every recomputation, never stored. It
    decides whether a habit can unlock its successor, not its own status.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data. Functions
that change habits modify the passed-in list in place and say so.
State management and side effects belong in ProgressionManager.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import const
from ..utils.dt_utils import to_iso_day
from .streak_engine import StreakEngine, StreakResult

if TYPE_CHECKING:
    from ..type_defs import HabitData


@dataclass
class UnlockDelta:
    """What changed during one unlock recomputation.

    Attributes:
        newly_unlocked: Habit ids celebrated by this recomputation, ladder order
        all_unlocked: True only when this recomputation completed the ladder
        changed: True if any unlock flag was written, celebrated or not
    """

    newly_unlocked: list[str] = field(default_factory=list)
    all_unlocked: bool = False
    changed: bool = False

    @property
    def primary_unlock(self) -> str | None:
        """The most advanced unlock, surfaced for celebration."""
        return self.newly_unlocked[-1] if self.newly_unlocked else None

    @property
    def has_changes(self) -> bool:
        """Return True if the habits were modified and need saving."""
        return self.changed or bool(self.newly_unlocked) or self.all_unlocked


@dataclass(frozen=True)
class LadderProgress:
    """Read-only progress summary of a habit list."""

    total: int
    unlocked: int
    completed_today: int
    all_unlocked: bool


class ProgressionEngine:
    """Pure logic engine for ladder progression.

    All methods are static - no instance state.
    """

    @staticmethod
    def find_habit(
        habits: list[HabitData], habit_id: str
    ) -> tuple[int, HabitData] | None:
        """Return (index, habit) for habit_id, or None."""
        for index, habit in enumerate(habits):
            if habit[const.DATA_HABIT_ID] == habit_id:
                return index, habit
        return None

    @staticmethod
    def is_completed_on(habit: HabitData, day: date) -> bool:
        """Check if the habit was completed on the given calendar day."""
        iso_day = to_iso_day(day)
        return (
            habit.get(const.DATA_HABIT_LAST_CHECKED_DATE) == iso_day
            or iso_day in habit.get(const.DATA_HABIT_COMPLETION_DATES, [])
        )

    @staticmethod
    def can_complete_today(habit: HabitData, today: date) -> bool:
        """Unlocked habits can be completed once per calendar day."""
        return bool(
            habit.get(const.DATA_HABIT_IS_UNLOCKED)
        ) and not ProgressionEngine.is_completed_on(habit, today)

    @staticmethod
    def apply_completion(habit: HabitData, today: date) -> None:
        """Append today to the habit's history (modifies habit in place).

        Callers must check is_completed_on() first; a repeated day is ignored
        so history never holds duplicates.
        """
        iso_day = to_iso_day(today)
        dates = habit.setdefault(const.DATA_HABIT_COMPLETION_DATES, [])
        if iso_day not in dates:
            dates.append(iso_day)
            dates.sort()
        habit[const.DATA_HABIT_LAST_CHECKED_DATE] = dates[-1]

    @staticmethod
    def compute_streak(habit: HabitData, policy: str) -> StreakResult:
        """Compute a habit's streak under the given policy."""
        return StreakEngine.compute_streak(
            habit.get(const.DATA_HABIT_COMPLETION_DATES, []), policy
        )

    @staticmethod
    def all_unlocked(habits: list[HabitData]) -> bool:
        """Return True if the ladder is non-empty and every habit is unlocked."""
        return bool(habits) and all(
            habit.get(const.DATA_HABIT_IS_UNLOCKED) for habit in habits
        )

    @staticmethod
    def recompute_unlocks(habits: list[HabitData], policy: str) -> UnlockDelta:
        """Recompute unlock status for the whole ladder (modifies habits in place).

        Habit 0 is always unlocked. Habit i > 0 becomes unlocked the first time
        habit i - 1 has a qualifying streak and never relocks afterwards.
        Each locked -> unlocked transition of an uncelebrated habit marks it
        celebrated and is reported in ladder order.

        Args:
            habits: The active ladder's habits
            policy: Streak policy used to evaluate predecessors

        Returns:
            UnlockDelta describing newly unlocked habits and whether this
            recomputation unlocked the final habit of the ladder
        """
        delta = UnlockDelta()
        if not habits:
            return delta

        was_all_unlocked = ProgressionEngine.all_unlocked(habits)
        transitioned = False

        if not habits[0].get(const.DATA_HABIT_IS_UNLOCKED):
            habits[0][const.DATA_HABIT_IS_UNLOCKED] = True
            delta.changed = True

        for index in range(1, len(habits)):
            habit = habits[index]
            if habit.get(const.DATA_HABIT_IS_UNLOCKED):
                continue

            predecessor = habits[index - 1]
            if not ProgressionEngine.compute_streak(
                predecessor, policy
            ).has_qualifying_streak:
                continue

            habit[const.DATA_HABIT_IS_UNLOCKED] = True
            transitioned = True
            delta.changed = True
            if not habit.get(const.DATA_HABIT_HAS_BEEN_CELEBRATED):
                habit[const.DATA_HABIT_HAS_BEEN_CELEBRATED] = True
                delta.newly_unlocked.append(habit[const.DATA_HABIT_ID])

        delta.all_unlocked = (
            transitioned
            and not was_all_unlocked
            and ProgressionEngine.all_unlocked(habits)
        )
        return delta

    @staticmethod
    def reset_habits(habits: list[HabitData]) -> None:
        """Clear all progress (modifies habits in place).

        Completion history and celebration flags are cleared and every habit
        except the first is locked again.
        """
        for index, habit in enumerate(habits):
            habit[const.DATA_HABIT_COMPLETION_DATES] = []
            habit[const.DATA_HABIT_LAST_CHECKED_DATE] = None
            habit[const.DATA_HABIT_IS_UNLOCKED] = index == 0
            habit[const.DATA_HABIT_HAS_BEEN_CELEBRATED] = False

    @staticmethod
    def next_actionable_habit(habits: list[HabitData], today: date) -> HabitData | None:
        """Return the first unlocked habit not yet completed today."""
        for habit in habits:
            if ProgressionEngine.can_complete_today(habit, today):
                return habit
        return None

    @staticmethod
    def completed_today_count(habits: list[HabitData], today: date) -> int:
        """Count habits completed on the given day."""
        return sum(
            1 for habit in habits if ProgressionEngine.is_completed_on(habit, today)
        )

    @staticmethod
    def unlocked_count(habits: list[HabitData]) -> int:
        """Count unlocked habits."""
        return sum(1 for habit in habits if habit.get(const.DATA_HABIT_IS_UNLOCKED))

    @staticmethod
    def ladder_progress(habits: list[HabitData], today: date) -> LadderProgress:
        """Summarize how far up the ladder the user is."""
        return LadderProgress(
            total=len(habits),
            unlocked=ProgressionEngine.unlocked_count(habits),
            completed_today=ProgressionEngine.completed_today_count(habits, today),
            all_unlocked=bool(habits) and ProgressionEngine.all_unlocked(habits),
        )


@dataclass
class CompletionResult:
    """Outcome of recording a completion, returned as a value.

    Attributes:
        outcome: One of the COMPLETION_OUTCOME_* constants
        habit_id: Requested habit id
        habit: Copy of the habit after the operation (None if not found)
        streak: Streak count after the operation
        has_qualifying_streak: Whether the habit can now unlock its successor
        newly_unlocked: Habit ids unlocked by this completion, ladder order
        all_unlocked: True if this completion finished the ladder
    """

    outcome: str
    habit_id: str
    habit: HabitData | None = None
    streak: int = 0
    has_qualifying_streak: bool = False
    newly_unlocked: list[str] = field(default_factory=list)
    all_unlocked: bool = False

    @property
    def is_success(self) -> bool:
        """Return True if the completion was recorded."""
        return self.outcome == const.COMPLETION_OUTCOME_COMPLETED

    @property
    def primary_unlock(self) -> str | None:
        """The most advanced unlock, surfaced for celebration."""
        return self.newly_unlocked[-1] if self.newly_unlocked else None

    def as_dict(self) -> dict[str, Any]:
        """Serialize for service responses."""
        return {
            "outcome": self.outcome,
            "habit_id": self.habit_id,
            "habit_name": self.habit[const.DATA_HABIT_NAME] if self.habit else None,
            "streak": self.streak,
            "has_qualifying_streak": self.has_qualifying_streak,
            "newly_unlocked": list(self.newly_unlocked),
            "primary_unlock": self.primary_unlock,
            "all_unlocked": self.all_unlocked,
        }
