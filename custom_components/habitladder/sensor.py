# File: sensor.py
# pyright: reportIncompatibleVariableOverride=false
# ^ Suppresses Pylance warnings about @property overriding @cached_property from base classes.
"""Sensors for the HabitLadder integration.

1) LadderProgressSensor: number of unlocked habits on the current ladder,
   with the ladder, next habit and slot usage as attributes.
2) HabitRungSensor: one per ladder position; state is the habit's streak.
   Positions past the end of the current ladder report unavailable.
"""

from __future__ import annotations

from typing import Any

from homeassistant.components.sensor import SensorEntity, SensorStateClass
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import HabitLadderCoordinator
from .engines import LadderProgress, ProgressionEngine
from .entity import HabitLadderCoordinatorEntity
from .helpers.device_helpers import create_ladder_device_info
from .helpers.entity_helpers import get_coordinator
from .type_defs import HabitData

# Read-only sensors, coordinator handles updates
PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the ladder progress sensor and one sensor per rung."""
    coordinator = get_coordinator(hass, entry.entry_id)

    entities: list[SensorEntity] = [LadderProgressSensor(coordinator, entry)]
    entities.extend(
        HabitRungSensor(coordinator, entry, index)
        for index in range(const.MAX_LADDER_HABITS)
    )
    async_add_entities(entities)


class LadderProgressSensor(HabitLadderCoordinatorEntity, SensorEntity):
    """How far up the current ladder the user has climbed."""

    _attr_translation_key = const.TRANS_KEY_SENSOR_LADDER_PROGRESS
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(self, coordinator: HabitLadderCoordinator, entry: ConfigEntry) -> None:
        """Initialize the sensor."""
        super().__init__(coordinator)
        self._attr_unique_id = f"{entry.entry_id}{const.SENSOR_LADDER_PROGRESS_SUFFIX}"
        self._attr_device_info = create_ladder_device_info(entry)

    @property
    def _progress(self) -> LadderProgress:
        return ProgressionEngine.ladder_progress(
            self.coordinator.state.habits, self.coordinator.today()
        )

    @property
    def native_value(self) -> int:
        """Number of unlocked habits."""
        return self._progress.unlocked

    @property
    def icon(self) -> str:
        """Ladder icon; changes once every habit is unlocked."""
        if self._progress.all_unlocked:
            return const.ICON_LADDER_COMPLETE
        return const.ICON_LADDER

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Ladder identity, next habit, and slot usage."""
        coordinator = self.coordinator
        state = coordinator.state
        ladder = state.current_ladder
        habits = state.habits
        progress = self._progress
        next_habit = coordinator.next_actionable_habit()

        return {
            const.ATTR_LADDER_ID: ladder[const.DATA_LADDER_ID] if ladder else None,
            const.ATTR_LADDER_NAME: ladder[const.DATA_LADDER_NAME] if ladder else None,
            const.ATTR_LADDER_EMOJI: ladder.get(const.DATA_LADDER_EMOJI)
            if ladder
            else None,
            const.ATTR_HABITS_SOURCE: state.habits_source,
            const.ATTR_IS_CUSTOM_LADDER: state.is_custom_active,
            const.ATTR_HABITS: [habit[const.DATA_HABIT_NAME] for habit in habits],
            const.ATTR_TOTAL_HABITS: progress.total,
            const.ATTR_COMPLETED_TODAY: progress.completed_today,
            const.ATTR_ALL_UNLOCKED: progress.all_unlocked,
            const.ATTR_NEXT_HABIT_ID: next_habit[const.DATA_HABIT_ID]
            if next_habit
            else None,
            const.ATTR_NEXT_HABIT_NAME: next_habit[const.DATA_HABIT_NAME]
            if next_habit
            else None,
            const.ATTR_STREAK_POLICY: coordinator.streak_policy,
            const.ATTR_USAGE_SUMMARY: coordinator.usage_summary,
            const.ATTR_CUSTOM_LADDERS: [
                custom[const.DATA_LADDER_NAME] for custom in state.custom_ladders
            ],
        }


class HabitRungSensor(HabitLadderCoordinatorEntity, SensorEntity):
    """Streak of the habit at a fixed position on the current ladder.

    Entities are position based so switching ladders never creates or
    removes entities; the habit behind a rung changes instead.
    """

    _attr_translation_key = const.TRANS_KEY_SENSOR_HABIT_RUNG
    _attr_state_class = SensorStateClass.MEASUREMENT

    def __init__(
        self, coordinator: HabitLadderCoordinator, entry: ConfigEntry, index: int
    ) -> None:
        """Initialize the sensor for ladder position ``index`` (0-based)."""
        super().__init__(coordinator)
        self._index = index
        self._attr_unique_id = (
            f"{entry.entry_id}{const.SENSOR_HABIT_RUNG_SUFFIX.format(index=index + 1)}"
        )
        self._attr_translation_placeholders = {const.TRANS_KEY_ATTR_RUNG: str(index + 1)}
        self._attr_device_info = create_ladder_device_info(entry)

    @property
    def _habit(self) -> HabitData | None:
        return self.coordinator.get_habit_at(self._index)

    @property
    def available(self) -> bool:
        """Unavailable when the current ladder has no habit at this position."""
        return super().available and self._habit is not None

    @property
    def native_value(self) -> int | None:
        """Current streak of the habit under the active policy."""
        habit = self._habit
        if habit is None:
            return None
        return ProgressionEngine.compute_streak(
            habit, self.coordinator.streak_policy
        ).count

    @property
    def icon(self) -> str:
        """Locked, done today, or open."""
        habit = self._habit
        if habit is None or not habit[const.DATA_HABIT_IS_UNLOCKED]:
            return const.ICON_HABIT_LOCKED
        if ProgressionEngine.is_completed_on(habit, self.coordinator.today()):
            return const.ICON_HABIT_DONE_TODAY
        return const.ICON_HABIT_OPEN

    @property
    def extra_state_attributes(self) -> dict[str, Any]:
        """Habit details for the rung."""
        habit = self._habit
        if habit is None:
            return {const.ATTR_RUNG: self._index + 1}

        streak = ProgressionEngine.compute_streak(habit, self.coordinator.streak_policy)
        return {
            const.ATTR_RUNG: self._index + 1,
            const.ATTR_HABIT_ID: habit[const.DATA_HABIT_ID],
            const.ATTR_HABIT_NAME: habit[const.DATA_HABIT_NAME],
            const.ATTR_DESCRIPTION: habit[const.DATA_HABIT_DESCRIPTION],
            const.ATTR_IS_UNLOCKED: habit[const.DATA_HABIT_IS_UNLOCKED],
            const.ATTR_IS_COMPLETED_TODAY: ProgressionEngine.is_completed_on(
                habit, self.coordinator.today()
            ),
            const.ATTR_HAS_QUALIFYING_STREAK: streak.has_qualifying_streak,
            const.ATTR_TOTAL_COMPLETION_DAYS: len(
                habit[const.DATA_HABIT_COMPLETION_DATES]
            ),
            const.ATTR_LAST_CHECKED_DATE: habit.get(const.DATA_HABIT_LAST_CHECKED_DATE),
        }
