# File: helpers/entity_helpers.py
"""Entry and signal helper functions for HabitLadder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntryState

from .. import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitLadderCoordinator


# ==============================================================================
# Event Signal Helpers (Manager Communication)
# ==============================================================================


def get_event_signal(entry_id: str, suffix: str) -> str:
    """Build instance-scoped event signal name for dispatcher.

    Format: 'habitladder_{entry_id}_{suffix}'

    Args:
        entry_id: ConfigEntry.entry_id from coordinator
        suffix: Signal suffix constant from const.py (e.g., SIGNAL_SUFFIX_HABIT_COMPLETED)

    Returns:
        Fully qualified signal name scoped to this integration instance

    Example:
        >>> get_event_signal("abc123", const.SIGNAL_SUFFIX_HABIT_COMPLETED)
        'habitladder_abc123_habit_completed'
    """
    return f"{const.DOMAIN}_{entry_id}_{suffix}"


# ==============================================================================
# Config Entry Lookup
# ==============================================================================


def get_first_habitladder_entry(hass: HomeAssistant) -> str | None:
    """Get the entry_id of the first loaded HabitLadder config entry.

    Args:
        hass: HomeAssistant instance

    Returns:
        Config entry ID string, or None if no loaded entries
    """
    for entry in hass.config_entries.async_entries(const.DOMAIN):
        if entry.state is ConfigEntryState.LOADED:
            return entry.entry_id
    return None


def get_coordinator(hass: HomeAssistant, entry_id: str) -> HabitLadderCoordinator:
    """Return the coordinator stored for a config entry."""
    return hass.data[const.DOMAIN][entry_id][const.COORDINATOR]
