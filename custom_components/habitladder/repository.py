# File: repository.py
"""Ladder persistence and reconciliation for the HabitLadder integration.

The repository turns the independently stored keys into one AppState and
back again:

Load priority for the working habit list (resolve_working_habits):
    1. Active custom ladder
    2. Default ladder
    3. Legacy flat habit list (pre-ladder storage), if non-empty
    4. Empty (the user has to pick a profile)

Write-back rule: the working habit list is copied into whichever ladder is
active (the active custom ladder and its library entry, else the default
ladder), never into both.

The calendar log is stored under its own key and is never rebuilt from
ladder history once written, so resets and profile switches keep it.
"""

from __future__ import annotations

import copy
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from . import const
from .data_builders import (
    LadderDecodeError,
    decode_calendar_log,
    decode_habit_list,
    decode_ladder,
    decode_ladder_list,
    decode_usage_flags,
)
from .engines import UsageGate
from .profiles import is_reserved_name

if TYPE_CHECKING:
    from .store import HabitLadderStore
    from .type_defs import (
        CalendarEntryData,
        HabitData,
        LadderData,
        UsageFlagsData,
    )


@dataclass
class AppState:
    """The single mutable HabitLadder state owned by the coordinator.

    Attributes:
        default_ladder: Ladder chosen through the profile picker
        active_ladder: Custom ladder currently tracked, None when on default
        custom_ladders: Library of user-created and curated ladders
        usage_flags: Free-slot bookkeeping
        habits: Working set of the current ladder's habits
        habits_source: Which stored artifact habits were resolved from
    """

    default_ladder: LadderData | None = None
    active_ladder: LadderData | None = None
    custom_ladders: list[LadderData] = field(default_factory=list)
    usage_flags: UsageFlagsData = field(default_factory=UsageGate.default_flags)
    habits: list[HabitData] = field(default_factory=list)
    habits_source: str = const.HABITS_SOURCE_NONE

    @property
    def is_custom_active(self) -> bool:
        """Return True if a custom ladder is being tracked."""
        return self.active_ladder is not None

    @property
    def current_ladder(self) -> LadderData | None:
        """The ladder the working set belongs to."""
        return self.active_ladder or self.default_ladder

    @property
    def is_empty(self) -> bool:
        """Return True before any ladder, library entry or habit exists."""
        return (
            self.current_ladder is None
            and not self.custom_ladders
            and not self.habits
        )

    def find_custom_ladder(self, ladder_id: str) -> LadderData | None:
        """Return the library entry with ladder_id, if any."""
        for ladder in self.custom_ladders:
            if ladder[const.DATA_LADDER_ID] == ladder_id:
                return ladder
        return None

    def snapshot(self) -> AppState:
        """Return a deep copy for read-only consumers."""
        return copy.deepcopy(self)

    def as_dict(self) -> dict[str, Any]:
        """Serialize for diagnostics."""
        return asdict(self)


def resolve_working_habits(
    active_ladder: LadderData | None,
    default_ladder: LadderData | None,
    legacy_habits: list[HabitData] | None,
) -> tuple[list[HabitData], str]:
    """Pick the authoritative habit list among the stored artifacts.

    Returns:
        (habits, source) where habits is a deep copy and source is one of
        the HABITS_SOURCE_* constants
    """
    if active_ladder is not None:
        return (
            copy.deepcopy(active_ladder[const.DATA_LADDER_HABITS]),
            const.HABITS_SOURCE_ACTIVE_LADDER,
        )
    if default_ladder is not None:
        return (
            copy.deepcopy(default_ladder[const.DATA_LADDER_HABITS]),
            const.HABITS_SOURCE_DEFAULT_LADDER,
        )
    if legacy_habits:
        return copy.deepcopy(legacy_habits), const.HABITS_SOURCE_LEGACY
    return [], const.HABITS_SOURCE_NONE


class LadderRepository:
    """Loads, reconciles and saves AppState through HabitLadderStore."""

    def __init__(self, store: HabitLadderStore) -> None:
        """Initialize the repository."""
        self._store = store

    # -------------------------------------------------------------------------------------
    # Load
    # -------------------------------------------------------------------------------------

    async def _async_decode_key(self, key: str, decoder: Any) -> Any | None:
        """Load and decode one key; decode failures count as absent."""
        raw = await self._store.async_load_key(key)
        if raw is None:
            return None
        try:
            return decoder(raw)
        except LadderDecodeError as err:
            const.LOGGER.warning(
                "WARNING: Discarding undecodable storage key '%s': %s", key, err
            )
            return None

    async def async_load(self) -> AppState:
        """Build AppState from storage. Never raises."""
        default_ladder = await self._async_decode_key(
            const.STORAGE_KEY_DEFAULT_LADDER, decode_ladder
        )
        active_ladder = await self._async_decode_key(
            const.STORAGE_KEY_ACTIVE_LADDER, decode_ladder
        )
        usage_flags = await self._async_decode_key(
            const.STORAGE_KEY_USAGE_FLAGS, decode_usage_flags
        )
        legacy_habits = await self._async_decode_key(
            const.STORAGE_KEY_LEGACY_HABITS, decode_habit_list
        )

        library = await self._async_decode_key(
            const.STORAGE_KEY_CUSTOM_LADDERS, decode_ladder_list
        )
        custom_ladders: list[LadderData] = []
        if library is not None:
            custom_ladders, entry_errors = library
            for error in entry_errors:
                const.LOGGER.warning(
                    "WARNING: Skipping undecodable custom ladder %s", error
                )

        if active_ladder is not None:
            self._sync_library_entry(custom_ladders, active_ladder)

        habits, source = resolve_working_habits(
            active_ladder, default_ladder, legacy_habits
        )
        state = AppState(
            default_ladder=default_ladder,
            active_ladder=active_ladder,
            custom_ladders=custom_ladders,
            usage_flags=usage_flags or UsageGate.default_flags(),
            habits=habits,
            habits_source=source,
        )
        self.reconcile(state, legacy_habits)

        const.LOGGER.debug(
            "DEBUG: Loaded HabitLadder state: source=%s, habits=%s, custom_ladders=%s",
            state.habits_source,
            len(state.habits),
            len(state.custom_ladders),
        )
        return state

    # -------------------------------------------------------------------------------------
    # Reconcile
    # -------------------------------------------------------------------------------------

    def reconcile(
        self, state: AppState, legacy_habits: list[HabitData] | None = None
    ) -> bool:
        """Repair known inconsistencies in a loaded state.

        - Library ladders named like built-in profiles are removed; if the
          active ladder was one of them, tracking falls back to the default
        - The custom slot is released when the library is empty
        - A default ladder stored without habits adopts the legacy list

        Returns:
            True if the state was changed
        """
        changed = False

        reserved = [
            ladder
            for ladder in state.custom_ladders
            if is_reserved_name(ladder[const.DATA_LADDER_NAME])
        ]
        if reserved:
            state.custom_ladders = [
                ladder for ladder in state.custom_ladders if ladder not in reserved
            ]
            changed = True
            const.LOGGER.info(
                "INFO: Removed %s custom ladder(s) named like built-in profiles",
                len(reserved),
            )

        if state.active_ladder is not None and is_reserved_name(
            state.active_ladder[const.DATA_LADDER_NAME]
        ):
            state.active_ladder = None
            state.habits, state.habits_source = resolve_working_habits(
                None, state.default_ladder, legacy_habits
            )
            changed = True

        if UsageGate.release_custom_slot(
            state.usage_flags, len(state.custom_ladders)
        ):
            changed = True

        if (
            state.default_ladder is not None
            and state.active_ladder is None
            and not state.default_ladder[const.DATA_LADDER_HABITS]
            and legacy_habits
        ):
            const.LOGGER.info(
                "INFO: Default ladder had no habits, recovering %s legacy habits",
                len(legacy_habits),
            )
            state.habits = copy.deepcopy(legacy_habits)
            self.commit_habits(state)
            changed = True

        return changed

    # -------------------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------------------

    @staticmethod
    def _sync_library_entry(
        custom_ladders: list[LadderData], ladder: LadderData
    ) -> None:
        """Replace (or append) the library entry matching ladder's id."""
        for index, entry in enumerate(custom_ladders):
            if entry[const.DATA_LADDER_ID] == ladder[const.DATA_LADDER_ID]:
                custom_ladders[index] = copy.deepcopy(ladder)
                return
        custom_ladders.append(copy.deepcopy(ladder))

    def commit_habits(self, state: AppState) -> None:
        """Write the working habit set back into the active ladder only."""
        if state.active_ladder is not None:
            state.active_ladder[const.DATA_LADDER_HABITS] = copy.deepcopy(state.habits)
            self._sync_library_entry(state.custom_ladders, state.active_ladder)
            state.habits_source = const.HABITS_SOURCE_ACTIVE_LADDER
        elif state.default_ladder is not None:
            state.default_ladder[const.DATA_LADDER_HABITS] = copy.deepcopy(
                state.habits
            )
            state.habits_source = const.HABITS_SOURCE_DEFAULT_LADDER

    async def async_save(self, state: AppState) -> list[str]:
        """Persist every sub-aggregate independently (best effort).

        Returns:
            The logical keys written or removed
        """
        self.commit_habits(state)
        written: list[str] = []

        if state.default_ladder is not None:
            await self._store.async_save_key(
                const.STORAGE_KEY_DEFAULT_LADDER, copy.deepcopy(state.default_ladder)
            )
            written.append(const.STORAGE_KEY_DEFAULT_LADDER)

        if state.active_ladder is not None:
            await self._store.async_save_key(
                const.STORAGE_KEY_ACTIVE_LADDER, copy.deepcopy(state.active_ladder)
            )
            written.append(const.STORAGE_KEY_ACTIVE_LADDER)
        elif await self._store.async_remove_key(const.STORAGE_KEY_ACTIVE_LADDER):
            written.append(const.STORAGE_KEY_ACTIVE_LADDER)
        else:
            const.LOGGER.warning(
                "WARNING: Stale active ladder could not be removed; "
                "it will be retried on the next save"
            )

        await self._store.async_save_key(
            const.STORAGE_KEY_CUSTOM_LADDERS, copy.deepcopy(state.custom_ladders)
        )
        written.append(const.STORAGE_KEY_CUSTOM_LADDERS)
        await self._store.async_save_key(
            const.STORAGE_KEY_USAGE_FLAGS, dict(state.usage_flags)
        )
        written.append(const.STORAGE_KEY_USAGE_FLAGS)

        # The flat list only backs up habits that belong to no ladder
        if state.current_ladder is None:
            await self._store.async_save_key(
                const.STORAGE_KEY_LEGACY_HABITS, copy.deepcopy(state.habits)
            )
            written.append(const.STORAGE_KEY_LEGACY_HABITS)

        return written

    # -------------------------------------------------------------------------------------
    # Calendar log
    # -------------------------------------------------------------------------------------

    async def async_load_calendar_log(self) -> list[CalendarEntryData] | None:
        """Load the calendar log; None when it was never written."""
        decoded = await self._async_decode_key(
            const.STORAGE_KEY_CALENDAR_EVENTS, decode_calendar_log
        )
        if decoded is None:
            return None
        entries, entry_errors = decoded
        for error in entry_errors:
            const.LOGGER.warning("WARNING: Skipping undecodable calendar %s", error)
        return entries

    async def async_save_calendar_log(self, entries: list[CalendarEntryData]) -> None:
        """Persist the calendar log, independent of ladder state."""
        await self._store.async_save_key(
            const.STORAGE_KEY_CALENDAR_EVENTS, copy.deepcopy(entries)
        )
