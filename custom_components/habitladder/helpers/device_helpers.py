# File: helpers/device_helpers.py
"""Device registry helper functions for HabitLadder."""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.device_registry import DeviceEntryType, DeviceInfo

from .. import const

if TYPE_CHECKING:
    from homeassistant.config_entries import ConfigEntry


def create_ladder_device_info(config_entry: ConfigEntry) -> DeviceInfo:
    """Create the single service device that groups all ladder entities.

    Args:
        config_entry: Config entry for this integration instance

    Returns:
        DeviceInfo dict for the HabitLadder device
    """
    return DeviceInfo(
        identifiers={(const.DOMAIN, config_entry.entry_id)},
        name=config_entry.title,
        manufacturer=const.HABITLADDER_TITLE,
        model="Habit Ladder",
        entry_type=DeviceEntryType.SERVICE,
    )
