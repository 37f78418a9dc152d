"""Type definitions for HabitLadder data structures.

All persisted records are plain dicts keyed by the DATA_* constants in
const.py, so they serialize directly through Home Assistant's Store. The
TypedDicts below document their fixed shape for static analysis only.

NOTE: TypedDict is STATIC ANALYSIS ONLY. Stored payloads are checked at
runtime by the decoders in data_builders.py; TypedDict does NOT enforce
types at runtime.

IMPORTANT: This file must NOT import from coordinator.py or any module that
imports the coordinator, to avoid circular dependencies.
"""

from typing import NotRequired, TypedDict

# =============================================================================
# Type Aliases (for readability)
# =============================================================================

HabitId = str  # UUID string
LadderId = str  # UUID string
ISODatetime = str  # ISO 8601 datetime string "2026-01-18T12:30:00+00:00"
ISODate = str  # ISO 8601 date string (no time) "2026-01-18"


# =============================================================================
# Ladder Records
# =============================================================================


class HabitData(TypedDict):
    """A single habit (rung) of a ladder.

    Invariants:
    - completion_dates is sorted ascending and holds no duplicate days
    - last_checked_date equals max(completion_dates), or None when empty
    - is_unlocked is only ever set by ProgressionEngine, except for index 0
    """

    id: HabitId
    name: str
    description: str
    completion_dates: list[ISODate]
    last_checked_date: ISODate | None
    is_unlocked: bool
    has_been_celebrated: bool


class LadderData(TypedDict):
    """An ordered sequence of habits with sequential unlock dependencies."""

    id: LadderId
    name: str
    emoji: str | None
    created_date: ISODatetime
    habits: list[HabitData]
    streak_policy: NotRequired[str | None]  # Overrides the global option


class UsageFlagsData(TypedDict):
    """Free-slot bookkeeping, independent of current premium status."""

    used_free_default_slot: bool
    used_free_custom_slot: bool


class CalendarEntryData(TypedDict):
    """A mirrored completion. The calendar log outlives ladder history."""

    habit_id: HabitId
    habit_name: str
    calendar_day: ISODate


class ProfileData(TypedDict):
    """A built-in profile or curated ladder template (not persisted)."""

    name: str
    emoji: str
    description: str
    is_free: bool
    habits: list[tuple[str, str]]  # (name, description)


# =============================================================================
# Event Payloads (dispatcher signals)
# =============================================================================


class HabitCompletedEvent(TypedDict, total=False):
    """Event payload for SIGNAL_SUFFIX_HABIT_COMPLETED.

    Emitted by: ProgressionManager.async_record_completion()
    Consumed by: HabitLadderCalendar (calendar mirror)
    """

    habit_id: HabitId  # Required
    habit_name: str  # Required
    calendar_day: ISODate  # Required
    ladder_id: LadderId | None


class HabitUnlockedEvent(TypedDict, total=False):
    """Event payload for SIGNAL_SUFFIX_HABIT_UNLOCKED.

    Emitted once per recomputation that unlocks at least one habit.
    """

    newly_unlocked: list[HabitId]  # Required, ladder order
    primary_unlock: HabitId  # Required, last entry of newly_unlocked
    primary_unlock_name: str


class LadderAllUnlockedEvent(TypedDict, total=False):
    """Event payload for SIGNAL_SUFFIX_LADDER_ALL_UNLOCKED."""

    ladder_id: LadderId | None
    ladder_name: str


class ActionableHabitChangedEvent(TypedDict, total=False):
    """Event payload for SIGNAL_SUFFIX_ACTIONABLE_HABIT_CHANGED.

    Emitted whenever the next habit to complete differs from before.
    Consumed by: NotificationManager (reminder scheduling)
    """

    habit_id: HabitId | None  # None when nothing is left to do today
    habit_name: str | None


class LadderChangedEvent(TypedDict, total=False):
    """Event payload for SIGNAL_SUFFIX_LADDER_CHANGED and LADDER_RESET."""

    ladder_id: LadderId | None
    ladder_name: str | None
    reason: str
