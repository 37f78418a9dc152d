"""Progression Manager - completion workflow and unlock side effects.

Wraps ProgressionEngine with the coordinator's single-writer lock,
persistence and outbound events:
- habit_completed: consumed by the calendar mirror
- habit_unlocked / ladder_all_unlocked: celebration consumers
- ladder_reset
- actionable_habit_changed: consumed by the notification scheduler
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING

from .. import const
from ..engines import CompletionResult, ProgressionEngine, UnlockDelta
from .base_manager import BaseManager
from .ladder_manager import LadderOperationResult

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitLadderCoordinator

# Sentinel distinguishing "not computed yet" from "no actionable habit"
_UNSET = object()


class ProgressionManager(BaseManager):
    """Records completions and keeps unlock state current."""

    def __init__(
        self, hass: HomeAssistant, coordinator: HabitLadderCoordinator
    ) -> None:
        """Initialize the progression manager."""
        super().__init__(hass, coordinator)
        self._last_actionable_id: object = _UNSET

    async def async_setup(self) -> None:
        """Remember the current actionable habit without announcing it."""
        habit = self.coordinator.next_actionable_habit()
        self._last_actionable_id = habit[const.DATA_HABIT_ID] if habit else None

    # -------------------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------------------

    async def async_record_completion(self, habit_id: str) -> CompletionResult:
        """Mark a habit complete for today.

        Returns:
            CompletionResult; already_completed_today, habit_locked and
            habit_not_found outcomes leave the state untouched
        """
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            today = self.coordinator.today()

            found = ProgressionEngine.find_habit(state.habits, habit_id)
            if found is None:
                const.LOGGER.warning(
                    "WARNING: Record Completion - Habit '%s' not in the active ladder",
                    habit_id,
                )
                return CompletionResult(
                    outcome=const.COMPLETION_OUTCOME_HABIT_NOT_FOUND,
                    habit_id=habit_id,
                )

            _, habit = found
            if not habit.get(const.DATA_HABIT_IS_UNLOCKED):
                const.LOGGER.warning(
                    "WARNING: Record Completion - Habit '%s' is locked",
                    habit[const.DATA_HABIT_NAME],
                )
                return CompletionResult(
                    outcome=const.COMPLETION_OUTCOME_HABIT_LOCKED,
                    habit_id=habit_id,
                    habit=copy.deepcopy(habit),
                )

            policy = self.coordinator.streak_policy
            if ProgressionEngine.is_completed_on(habit, today):
                const.LOGGER.debug(
                    "DEBUG: Record Completion - '%s' already completed on %s",
                    habit[const.DATA_HABIT_NAME],
                    today,
                )
                streak = ProgressionEngine.compute_streak(habit, policy)
                return CompletionResult(
                    outcome=const.COMPLETION_OUTCOME_ALREADY_COMPLETED_TODAY,
                    habit_id=habit_id,
                    habit=copy.deepcopy(habit),
                    streak=streak.count,
                    has_qualifying_streak=streak.has_qualifying_streak,
                )

            ProgressionEngine.apply_completion(habit, today)
            delta = ProgressionEngine.recompute_unlocks(state.habits, policy)
            await self.coordinator.async_persist()

            streak = ProgressionEngine.compute_streak(habit, policy)
            result = CompletionResult(
                outcome=const.COMPLETION_OUTCOME_COMPLETED,
                habit_id=habit_id,
                habit=copy.deepcopy(habit),
                streak=streak.count,
                has_qualifying_streak=streak.has_qualifying_streak,
                newly_unlocked=list(delta.newly_unlocked),
                all_unlocked=delta.all_unlocked,
            )
            ladder = state.current_ladder

        const.LOGGER.info(
            "INFO: Habit '%s' completed on %s (streak %s)",
            habit[const.DATA_HABIT_NAME],
            today,
            streak.count,
        )
        self.emit(
            const.SIGNAL_SUFFIX_HABIT_COMPLETED,
            habit_id=habit_id,
            habit_name=habit[const.DATA_HABIT_NAME],
            calendar_day=today.isoformat(),
            ladder_id=ladder[const.DATA_LADDER_ID] if ladder else None,
        )
        self._emit_unlock_delta(delta)
        self.check_actionable_habit()
        return result

    async def async_recompute_unlocks(self) -> UnlockDelta:
        """Recompute unlock state for the current ladder and announce changes."""
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            delta = ProgressionEngine.recompute_unlocks(
                state.habits, self.coordinator.streak_policy
            )
            if delta.has_changes:
                await self.coordinator.async_persist()

        self._emit_unlock_delta(delta)
        self.check_actionable_habit()
        return delta

    async def async_reset_ladder(self) -> LadderOperationResult:
        """Clear all progress of the current ladder. Not recoverable."""
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            if not state.habits:
                return LadderOperationResult(outcome=const.LADDER_OUTCOME_NO_ACTIVE_LADDER)

            ProgressionEngine.reset_habits(state.habits)
            await self.coordinator.async_persist()
            ladder = copy.deepcopy(state.current_ladder)

        const.LOGGER.info(
            "INFO: Ladder '%s' reset",
            ladder[const.DATA_LADDER_NAME] if ladder else "(legacy habits)",
        )
        self.emit(
            const.SIGNAL_SUFFIX_LADDER_RESET,
            ladder_id=ladder[const.DATA_LADDER_ID] if ladder else None,
            ladder_name=ladder[const.DATA_LADDER_NAME] if ladder else None,
            reason="reset",
        )
        self.check_actionable_habit()
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=ladder)

    # -------------------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------------------

    def _emit_unlock_delta(self, delta: UnlockDelta) -> None:
        """Announce unlocks and ladder completion."""
        if delta.primary_unlock is not None:
            primary = ProgressionEngine.find_habit(
                self.coordinator.state.habits, delta.primary_unlock
            )
            self.emit(
                const.SIGNAL_SUFFIX_HABIT_UNLOCKED,
                newly_unlocked=list(delta.newly_unlocked),
                primary_unlock=delta.primary_unlock,
                primary_unlock_name=primary[1][const.DATA_HABIT_NAME]
                if primary
                else None,
            )
        if delta.all_unlocked:
            ladder = self.coordinator.state.current_ladder
            self.emit(
                const.SIGNAL_SUFFIX_LADDER_ALL_UNLOCKED,
                ladder_id=ladder[const.DATA_LADDER_ID] if ladder else None,
                ladder_name=ladder[const.DATA_LADDER_NAME] if ladder else None,
            )

    def check_actionable_habit(self) -> bool:
        """Emit actionable_habit_changed if the next habit to do has changed.

        Called after every mutation and on each periodic refresh, which also
        catches calendar-day rollover.

        Returns:
            True if an event was emitted
        """
        habit = self.coordinator.next_actionable_habit()
        habit_id = habit[const.DATA_HABIT_ID] if habit else None
        if habit_id == self._last_actionable_id:
            return False

        self._last_actionable_id = habit_id
        self.emit(
            const.SIGNAL_SUFFIX_ACTIONABLE_HABIT_CHANGED,
            habit_id=habit_id,
            habit_name=habit[const.DATA_HABIT_NAME] if habit else None,
        )
        return True
