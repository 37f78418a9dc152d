"""Base entity classes for HabitLadder integration."""

from __future__ import annotations

from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .coordinator import HabitLadderCoordinator


class HabitLadderCoordinatorEntity(CoordinatorEntity[HabitLadderCoordinator]):
    """Base entity class for HabitLadder entities with typed coordinator access."""

    _attr_has_entity_name = True

    @property
    def coordinator(self) -> HabitLadderCoordinator:
        """Return typed coordinator."""
        return object.__getattribute__(self, "_coordinator")

    @coordinator.setter
    def coordinator(self, value: HabitLadderCoordinator) -> None:
        """Set coordinator with proper typing."""
        object.__setattr__(self, "_coordinator", value)
