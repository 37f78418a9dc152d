# File: __init__.py
"""Initialization file for the HabitLadder integration.

Handles setting up the integration, including loading configuration entries,
initializing data storage, and preparing the coordinator for data handling.

Key Features:
- Config entry setup and unload support.
- Coordinator initialization owning the ladder state.
- Safety-net autosave on a fixed interval and on Home Assistant shutdown.
"""

from __future__ import annotations

from datetime import timedelta

from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EVENT_HOMEASSISTANT_STOP
from homeassistant.core import Event, HomeAssistant
from homeassistant.helpers.event import async_track_time_interval

from . import const
from .coordinator import HabitLadderCoordinator
from .services import async_setup_services, async_unload_services
from .store import HabitLadderStore


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up the integration from a config entry."""
    const.LOGGER.info("INFO: Starting setup for HabitLadder entry: %s", entry.entry_id)

    store = HabitLadderStore(hass)
    coordinator = HabitLadderCoordinator(hass, entry, store)

    # Load state before the first refresh so entities start with real data.
    await coordinator.async_load()
    await coordinator.async_config_entry_first_refresh()

    hass.data.setdefault(const.DOMAIN, {})[entry.entry_id] = {
        const.COORDINATOR: coordinator,
    }

    # Safety-net flushes on top of per-mutation persistence.
    entry.async_on_unload(
        async_track_time_interval(
            hass,
            coordinator.async_flush,
            timedelta(seconds=const.AUTOSAVE_INTERVAL_SECONDS),
        )
    )

    async def _async_flush_on_stop(_event: Event) -> None:
        """Flush pending state when Home Assistant stops."""
        await coordinator.async_flush()

    entry.async_on_unload(
        hass.bus.async_listen_once(EVENT_HOMEASSISTANT_STOP, _async_flush_on_stop)
    )
    entry.async_on_unload(entry.add_update_listener(async_reload_entry))

    async_setup_services(hass)

    await hass.config_entries.async_forward_entry_setups(entry, const.PLATFORMS)

    const.LOGGER.info("INFO: HabitLadder setup complete for entry: %s", entry.entry_id)
    return True


async def async_reload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Reload the entry when options change."""
    await hass.config_entries.async_reload(entry.entry_id)


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    const.LOGGER.info("INFO: Unloading HabitLadder entry: %s", entry.entry_id)

    unload_ok = await hass.config_entries.async_unload_platforms(entry, const.PLATFORMS)

    if unload_ok:
        coordinator: HabitLadderCoordinator = hass.data[const.DOMAIN].pop(
            entry.entry_id
        )[const.COORDINATOR]
        await coordinator.async_flush()

        if not hass.data[const.DOMAIN]:
            await async_unload_services(hass)

    return unload_ok


async def async_remove_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Handle removal of a config entry."""
    const.LOGGER.info("INFO: Removing HabitLadder entry: %s", entry.entry_id)
    await HabitLadderStore(hass).async_delete_storage()
    const.LOGGER.info("INFO: HabitLadder entry data cleared: %s", entry.entry_id)
