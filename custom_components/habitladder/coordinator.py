# File: coordinator.py
"""Coordinator for the HabitLadder integration.

Owns the single AppState instance for the lifetime of the config entry and
enforces single-writer discipline: managers mutate state only while holding
write_lock, and every mutation awaits persistence before the lock is
released. Entities read from the coordinator and never write.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator, UpdateFailed
from homeassistant.util import dt as dt_util

from . import const
from .engines import ProgressionEngine, StreakEngine, UsageGate
from .managers import LadderManager, NotificationManager, ProgressionManager
from .repository import AppState, LadderRepository
from .store import HabitLadderStore

if TYPE_CHECKING:
    from .type_defs import HabitData


class HabitLadderCoordinator(DataUpdateCoordinator[AppState]):
    """Coordinator for HabitLadder integration.

    The periodic refresh notices calendar-day rollover, so "completed today"
    states and the next actionable habit stay current without user action.
    """

    config_entry: ConfigEntry

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry,
        store: HabitLadderStore,
    ) -> None:
        """Initialize the HabitLadderCoordinator."""
        super().__init__(
            hass,
            const.LOGGER,
            config_entry=config_entry,
            name=f"{const.DOMAIN}{const.COORDINATOR_SUFFIX}",
            update_interval=timedelta(minutes=const.DEFAULT_UPDATE_INTERVAL),
        )
        self.store = store
        self.repository = LadderRepository(store)
        self.state = AppState()
        self.write_lock = asyncio.Lock()

        self.progression_manager = ProgressionManager(hass, self)
        self.ladder_manager = LadderManager(hass, self)
        self.notification_manager = NotificationManager(hass, self)

    # -------------------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------------------

    async def async_load(self) -> None:
        """Load state from storage and set up managers.

        Unlocks are recomputed once after loading so histories imported in
        bulk unlock their successors.
        """
        self.state = await self.repository.async_load()
        self.data = self.state

        for manager in (
            self.progression_manager,
            self.ladder_manager,
            self.notification_manager,
        ):
            await manager.async_setup()

        await self.progression_manager.async_recompute_unlocks()

        const.LOGGER.info(
            "INFO: HabitLadder state loaded (%s habits from %s)",
            len(self.state.habits),
            self.state.habits_source,
        )

    async def _async_update_data(self) -> AppState:
        """Periodic update: publish day-rollover changes to listeners."""
        try:
            self.progression_manager.check_actionable_habit()
            return self.state
        except Exception as err:  # pylint: disable=broad-exception-caught
            raise UpdateFailed(f"Error updating HabitLadder data: {err}") from err

    # -------------------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------------------

    async def async_persist(self) -> None:
        """Save state and notify entities. Callers must hold write_lock."""
        await self.repository.async_save(self.state)
        self.async_set_updated_data(self.state)

    async def async_flush(self, _now: datetime | None = None) -> None:
        """Safety-net save used by the autosave timer, unload and shutdown.

        Store drops failed writes after logging them, so the whole state is
        written again whenever there is any.
        """
        if self.state.is_empty:
            return
        const.LOGGER.debug("DEBUG: Flushing HabitLadder state")
        async with self.write_lock:
            await self.repository.async_save(self.state)

    # -------------------------------------------------------------------------------------
    # Read helpers
    # -------------------------------------------------------------------------------------

    @property
    def is_premium_user(self) -> bool:
        """Entitlement provider: the premium flag from the options."""
        return bool(
            self.config_entry.options.get(
                const.CONF_PREMIUM_USER, const.DEFAULT_PREMIUM_USER
            )
        )

    @property
    def streak_policy(self) -> str:
        """Streak policy for the current ladder (ladder override, else global)."""
        ladder = self.state.current_ladder
        return StreakEngine.resolve_policy(
            ladder.get(const.DATA_LADDER_STREAK_POLICY) if ladder else None,
            self.config_entry.options.get(const.CONF_STREAK_POLICY),
        )

    @property
    def usage_summary(self) -> str:
        """Free/premium slot summary for display."""
        return UsageGate.status_summary(self.is_premium_user, self.state.usage_flags)

    def today(self) -> date:
        """Current calendar day in Home Assistant's time zone."""
        return dt_util.now().date()

    def next_actionable_habit(self) -> HabitData | None:
        """First unlocked habit not completed today."""
        return ProgressionEngine.next_actionable_habit(self.state.habits, self.today())

    def get_habit_at(self, index: int) -> HabitData | None:
        """Habit at a ladder position, or None past the end."""
        if 0 <= index < len(self.state.habits):
            return self.state.habits[index]
        return None
