# File: button.py
# pyright: reportIncompatibleVariableOverride=false
# ^ Suppresses Pylance warnings about @property overriding @cached_property from base classes.
"""Buttons for the HabitLadder integration.

One CompleteRungButton per ladder position. Pressing it records today's
completion of the habit currently at that position.
"""

from __future__ import annotations

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from . import const
from .coordinator import HabitLadderCoordinator
from .engines import ProgressionEngine
from .entity import HabitLadderCoordinatorEntity
from .helpers.device_helpers import create_ladder_device_info
from .helpers.entity_helpers import get_coordinator

# Set to 1 (serialized) for action buttons that modify state
PARALLEL_UPDATES = 1


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one completion button per ladder position."""
    coordinator = get_coordinator(hass, entry.entry_id)
    async_add_entities(
        CompleteRungButton(coordinator, entry, index)
        for index in range(const.MAX_LADDER_HABITS)
    )


class CompleteRungButton(HabitLadderCoordinatorEntity, ButtonEntity):
    """Button to mark the habit at a ladder position as done today.

    Available only while the position holds an unlocked habit that has not
    been completed today.
    """

    _attr_translation_key = const.TRANS_KEY_BUTTON_COMPLETE_RUNG
    _attr_icon = const.ICON_COMPLETE_BUTTON

    def __init__(
        self, coordinator: HabitLadderCoordinator, entry: ConfigEntry, index: int
    ) -> None:
        """Initialize the button for ladder position ``index`` (0-based)."""
        super().__init__(coordinator)
        self._index = index
        self._attr_unique_id = (
            f"{entry.entry_id}{const.BUTTON_COMPLETE_RUNG_SUFFIX.format(index=index + 1)}"
        )
        self._attr_translation_placeholders = {const.TRANS_KEY_ATTR_RUNG: str(index + 1)}
        self._attr_device_info = create_ladder_device_info(entry)

    @property
    def available(self) -> bool:
        """Available when the rung can be completed today."""
        habit = self.coordinator.get_habit_at(self._index)
        return (
            super().available
            and habit is not None
            and ProgressionEngine.can_complete_today(habit, self.coordinator.today())
        )

    async def async_press(self) -> None:
        """Handle the button press event."""
        habit = self.coordinator.get_habit_at(self._index)
        if habit is None:
            raise HomeAssistantError(
                const.ERROR_HABIT_NOT_FOUND_FMT.format(f"rung {self._index + 1}")
            )

        result = await self.coordinator.progression_manager.async_record_completion(
            habit[const.DATA_HABIT_ID]
        )
        if result.outcome == const.COMPLETION_OUTCOME_HABIT_NOT_FOUND:
            raise HomeAssistantError(
                const.ERROR_HABIT_NOT_FOUND_FMT.format(habit[const.DATA_HABIT_ID])
            )
        if result.outcome == const.COMPLETION_OUTCOME_HABIT_LOCKED:
            raise HomeAssistantError(
                const.ERROR_HABIT_LOCKED_FMT.format(habit[const.DATA_HABIT_NAME])
            )
        const.LOGGER.debug(
            "DEBUG: Complete button for rung %s pressed: %s",
            self._index + 1,
            result.outcome,
        )
