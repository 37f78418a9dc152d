"""Calendar platform for HabitLadder integration.

The calendar mirror: one all-day event per habit per completed calendar day,
titled "Completed: {habit name}". Events live in their own persisted log,
seeded once from ladder history and appended on every completion. Resetting
or switching ladders never removes them.
"""

from __future__ import annotations

import datetime

from homeassistant.components.calendar import CalendarEntity, CalendarEvent
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.dispatcher import async_dispatcher_connect
from homeassistant.helpers.entity_platform import AddEntitiesCallback
from homeassistant.util import dt as dt_util

from . import const
from .coordinator import HabitLadderCoordinator
from .data_builders import (
    add_calendar_entry,
    build_calendar_entry,
    build_calendar_log,
)
from .helpers.device_helpers import create_ladder_device_info
from .helpers.entity_helpers import get_coordinator, get_event_signal
from .type_defs import CalendarEntryData, HabitCompletedEvent, HabitData

PARALLEL_UPDATES = 0


async def async_setup_entry(
    hass: HomeAssistant,
    entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up the HabitLadder calendar platform."""
    coordinator = get_coordinator(hass, entry.entry_id)
    async_add_entities([HabitCompletionCalendar(coordinator, entry)])


class HabitCompletionCalendar(CalendarEntity):
    """Read-only calendar of habit completions across all ladders."""

    _attr_has_entity_name = True
    _attr_translation_key = const.TRANS_KEY_CALENDAR_COMPLETIONS
    _attr_icon = const.ICON_LADDER

    def __init__(
        self, coordinator: HabitLadderCoordinator, config_entry: ConfigEntry
    ) -> None:
        """Initialize the calendar entity."""
        super().__init__()
        self.coordinator = coordinator
        self._config_entry = config_entry
        self._attr_unique_id = f"{config_entry.entry_id}{const.CALENDAR_SUFFIX}"
        self._attr_device_info = create_ladder_device_info(config_entry)
        self._entries: list[CalendarEntryData] = []

    async def async_added_to_hass(self) -> None:
        """Load the calendar log and subscribe to completions."""
        await super().async_added_to_hass()

        repository = self.coordinator.repository
        entries = await repository.async_load_calendar_log()
        if entries is None:
            entries = build_calendar_log(self._history_habits())
            const.LOGGER.info(
                "INFO: Seeded completion calendar with %s event(s) from history",
                len(entries),
            )
            await repository.async_save_calendar_log(entries)
        self._entries = entries

        self.async_on_remove(
            async_dispatcher_connect(
                self.hass,
                get_event_signal(
                    self._config_entry.entry_id, const.SIGNAL_SUFFIX_HABIT_COMPLETED
                ),
                self._on_habit_completed,
            )
        )

    @callback
    def _on_habit_completed(self, payload: HabitCompletedEvent) -> None:
        """Mirror a completion into the calendar log."""
        entry = build_calendar_entry(
            payload["habit_id"], payload["habit_name"], payload["calendar_day"]
        )
        if not add_calendar_entry(self._entries, entry):
            return
        const.LOGGER.debug(
            "DEBUG: Calendar mirror added '%s' on %s",
            entry[const.DATA_EVENT_HABIT_NAME],
            entry[const.DATA_EVENT_CALENDAR_DAY],
        )
        self.hass.async_create_task(
            self.coordinator.repository.async_save_calendar_log(list(self._entries))
        )
        self.async_write_ha_state()

    def _history_habits(self) -> list[HabitData]:
        """Habits of every known ladder, current working set first."""
        state = self.coordinator.state
        habits: list[HabitData] = list(state.habits)
        current = state.current_ladder
        ladders = [state.default_ladder, *state.custom_ladders]
        for ladder in ladders:
            if ladder is None:
                continue
            if current and ladder[const.DATA_LADDER_ID] == current[const.DATA_LADDER_ID]:
                continue
            habits.extend(ladder[const.DATA_LADDER_HABITS])
        return habits

    def _build_events(self) -> list[CalendarEvent]:
        """One all-day event per log entry, in the order they were logged."""
        events: list[CalendarEvent] = []
        for entry in self._entries:
            iso_day = entry[const.DATA_EVENT_CALENDAR_DAY]
            day = datetime.date.fromisoformat(iso_day)
            events.append(
                CalendarEvent(
                    summary=const.CALENDAR_EVENT_SUMMARY.format(
                        habit_name=entry[const.DATA_EVENT_HABIT_NAME]
                    ),
                    start=day,
                    end=day + datetime.timedelta(days=1),
                    description=const.CALENDAR_EVENT_DESCRIPTION,
                    uid=f"{entry[const.DATA_EVENT_HABIT_ID]}_{iso_day}",
                )
            )
        return events

    async def async_get_events(
        self,
        hass: HomeAssistant,
        start_date: datetime.datetime,
        end_date: datetime.datetime,
    ) -> list[CalendarEvent]:
        """Return completion events overlapping [start_date, end_date)."""
        local_tz = dt_util.get_time_zone(self.hass.config.time_zone)
        if start_date.tzinfo is None:
            start_date = start_date.replace(tzinfo=local_tz)
        if end_date.tzinfo is None:
            end_date = end_date.replace(tzinfo=local_tz)

        matching = []
        for event in sorted(
            self._build_events(), key=lambda event: (event.start, event.summary)
        ):
            event_start = datetime.datetime.combine(
                event.start, datetime.time.min, tzinfo=local_tz
            )
            event_end = datetime.datetime.combine(
                event.end, datetime.time.min, tzinfo=local_tz
            )
            if event_start < end_date and event_end > start_date:
                matching.append(event)
        return matching

    @property
    def event(self) -> CalendarEvent | None:
        """Return today's most recent completion event, if any."""
        today = self.coordinator.today()
        todays = [event for event in self._build_events() if event.start == today]
        return todays[-1] if todays else None
