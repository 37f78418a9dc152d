# File: notification_manager.py
"""Notification Manager for HabitLadder integration.

The reminder scheduler consumer of the progression core:
- Listens to actionable_habit_changed and remembers the next habit to do
- Sends a daily reminder for that habit at the configured time
- Optionally notifies immediately whenever the next habit changes

Reminders are a Premium feature and need a notify service in the options.
Sending is fire-and-forget; failures are logged by the notification helper.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from homeassistant.core import callback
from homeassistant.helpers.event import async_track_time_change
from homeassistant.util import dt as dt_util

from .. import const
from ..notification_helper import async_send_notification
from .base_manager import BaseManager

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant

    from ..coordinator import HabitLadderCoordinator
    from ..type_defs import ActionableHabitChangedEvent


class NotificationManager(BaseManager):
    """Schedules next-habit reminders."""

    def __init__(
        self, hass: HomeAssistant, coordinator: HabitLadderCoordinator
    ) -> None:
        """Initialize the notification manager."""
        super().__init__(hass, coordinator)
        self.next_habit_id: str | None = None
        self.next_habit_name: str | None = None

    async def async_setup(self) -> None:
        """Subscribe to actionable-habit changes and register the reminder timer."""
        habit = self.coordinator.next_actionable_habit()
        if habit is not None:
            self.next_habit_id = habit[const.DATA_HABIT_ID]
            self.next_habit_name = habit[const.DATA_HABIT_NAME]

        self.listen(
            const.SIGNAL_SUFFIX_ACTIONABLE_HABIT_CHANGED,
            self._handle_actionable_habit_changed,
        )

        reminder_time = dt_util.parse_time(
            self.coordinator.config_entry.options.get(
                const.CONF_REMINDER_TIME, const.DEFAULT_REMINDER_TIME
            )
        ) or dt_util.parse_time(const.DEFAULT_REMINDER_TIME)
        self.coordinator.config_entry.async_on_unload(
            async_track_time_change(
                self.hass,
                self._async_send_daily_reminder,
                hour=reminder_time.hour,
                minute=reminder_time.minute,
                second=reminder_time.second,
            )
        )

    @property
    def notify_service(self) -> str:
        """Configured notify service, or an empty string."""
        return (
            self.coordinator.config_entry.options.get(
                const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
            )
            or ""
        )

    @property
    def reminders_enabled(self) -> bool:
        """Reminders need Premium and a notify service."""
        return self.coordinator.is_premium_user and bool(self.notify_service)

    @callback
    def _handle_actionable_habit_changed(
        self, payload: ActionableHabitChangedEvent
    ) -> None:
        """Track the next habit; notify right away if configured to."""
        self.next_habit_id = payload.get("habit_id")
        self.next_habit_name = payload.get("habit_name")
        const.LOGGER.debug(
            "DEBUG: Next actionable habit is now '%s'", self.next_habit_name
        )

        if (
            self.next_habit_name
            and self.reminders_enabled
            and self.coordinator.config_entry.options.get(
                const.CONF_NOTIFY_ON_CHANGE, const.DEFAULT_NOTIFY_ON_CHANGE
            )
        ):
            self.hass.async_create_task(
                self.async_notify_next_habit(self.next_habit_name)
            )

    async def _async_send_daily_reminder(self, now: datetime | None = None) -> None:
        """Send the daily reminder for whatever is next right now."""
        if not self.reminders_enabled:
            return
        habit = self.coordinator.next_actionable_habit()
        if habit is None:
            const.LOGGER.debug("DEBUG: Daily reminder skipped, nothing left to do")
            return
        await self.async_notify_next_habit(habit[const.DATA_HABIT_NAME])

    async def async_notify_next_habit(self, habit_name: str) -> bool:
        """Send the next-habit notification."""
        extra_data: dict[str, Any] = {const.NOTIFY_TAG: const.NOTIFY_TAG_NEXT_HABIT}
        return await async_send_notification(
            self.hass,
            self.notify_service,
            const.NOTIFY_TITLE_NEXT_HABIT,
            const.NOTIFY_MESSAGE_NEXT_HABIT.format(habit_name=habit_name),
            extra_data=extra_data,
        )
