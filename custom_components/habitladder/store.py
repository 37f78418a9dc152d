# File: store.py
"""Handles persistent key-value storage for the HabitLadder integration.

Uses Home Assistant's Storage helper with one Store per logical key
(default ladder, active ladder, custom-ladder library, usage flags, the
legacy flat habit list and the calendar log). Every key is read and written independently, so a
failure on one never blocks or rolls back another.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from . import const

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


def get_storage_key(key: str) -> str:
    """Return the on-disk storage key for a logical key."""
    return f"{const.STORAGE_KEY_PREFIX}.{key}"


class HabitLadderStore:
    """Thin wrapper around Home Assistant's Store API, one Store per key.

    Load and remove never raise: errors are logged and reported as
    None (load) or False (remove). Write errors are handled inside Store.
    """

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize the per-key stores.

        Args:
            hass: Home Assistant core object.
        """
        self.hass = hass
        self._stores: dict[str, Store] = {
            key: Store(hass, const.STORAGE_VERSION, get_storage_key(key))
            for key in const.STORAGE_KEYS
        }

    def _get_store(self, key: str) -> Store:
        try:
            return self._stores[key]
        except KeyError as err:
            raise ValueError(f"Unknown storage key: {key}") from err

    async def async_load_key(self, key: str) -> Any | None:
        """Load the raw payload for a logical key.

        Returns:
            The stored payload, or None if absent or unreadable.
        """
        store = self._get_store(key)
        try:
            data = await store.async_load()
        except (HomeAssistantError, OSError, ValueError) as err:
            const.LOGGER.warning(
                "WARNING: Failed to load storage key '%s', treating as absent: %s",
                key,
                err,
            )
            return None

        const.LOGGER.debug(
            "DEBUG: Loaded storage key '%s' (%s)",
            key,
            "absent" if data is None else type(data).__name__,
        )
        return data

    async def async_save_key(self, key: str, data: Any) -> None:
        """Queue the payload for a logical key to be written.

        Home Assistant's Store logs and drops write and serialization
        errors itself, so this never raises and a failed write cannot be
        observed here. Callers retry by saving again.
        """
        store = self._get_store(key)
        await store.async_save(data)
        const.LOGGER.debug("DEBUG: Storage key '%s' saved", key)

    async def async_remove_key(self, key: str) -> bool:
        """Remove the stored payload for a logical key."""
        store = self._get_store(key)
        try:
            await store.async_remove()
        except OSError as err:
            const.LOGGER.error(
                "ERROR: Failed to remove storage key '%s': %s", key, err
            )
            return False

        const.LOGGER.debug("DEBUG: Storage key '%s' removed", key)
        return True

    async def async_delete_storage(self) -> None:
        """Delete every key; used when the config entry is removed."""
        const.LOGGER.info("INFO: Removing all HabitLadder storage")
        for key in const.STORAGE_KEYS:
            await self.async_remove_key(key)
