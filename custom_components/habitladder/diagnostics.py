"""Diagnostics support for HabitLadder integration.

Exports the in-memory ladder state, keyed like the storage files, along
with the entry options.
"""

from typing import Any

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from . import const
from .coordinator import HabitLadderCoordinator


async def async_get_config_entry_diagnostics(
    hass: HomeAssistant, entry: ConfigEntry
) -> dict[str, Any]:
    """Return diagnostics for a config entry."""
    coordinator: HabitLadderCoordinator = hass.data[const.DOMAIN][entry.entry_id][
        const.COORDINATOR
    ]

    return {
        "options": dict(entry.options),
        "usage_summary": coordinator.usage_summary,
        "state": coordinator.state.as_dict(),
    }
