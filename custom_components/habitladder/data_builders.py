"""Ladder record builders, validators and decoders.

This module is the SINGLE SOURCE OF TRUTH for:
- Habit and ladder field defaults
- Business rule validation for user-created ladders
- Decoding stored payloads back into normalized records

### Build Functions
`build_habit()` / `build_ladder()` generate UUIDs, set timestamps, apply
defaults and return complete records ready for storage. The first habit of
every new ladder is unlocked.

### Calendar Log
`build_calendar_log()` seeds the completion calendar from ladder history
once; afterwards `add_calendar_entry()` appends one entry per habit name
per day.

### Validation Functions
`validate_ladder_input()` returns a dict of errors (empty if valid) and is
shared by the services and the ladder manager.

### Decode Functions
`decode_*()` functions accept whatever came out of storage, including the
camelCase field names written by the pre-ladder app version, and return
records that satisfy the data model invariants. Any shape problem raises
LadderDecodeError, which the repository treats as "key absent".
"""

from __future__ import annotations

import copy
from typing import Any
import uuid

from homeassistant.util import dt as dt_util

from . import const
from .profiles import is_reserved_name
from .type_defs import (
    CalendarEntryData,
    HabitData,
    LadderData,
    ProfileData,
    UsageFlagsData,
)
from .utils.dt_utils import from_legacy_timestamp, to_iso_day

# ==============================================================================
# EXCEPTIONS
# ==============================================================================


class LadderDecodeError(Exception):
    """Stored payload could not be decoded into a ladder record.

    Attributes:
        field: The DATA_* key that failed, when known
        reason: Short description of the problem
    """

    def __init__(self, reason: str, field: str | None = None) -> None:
        """Initialize LadderDecodeError.

        Args:
            reason: Short description of the problem
            field: The DATA_* key that failed, when known
        """
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}" if field else reason)


# ==============================================================================
# BUILDERS
# ==============================================================================


def build_habit(name: str, description: str | None = None) -> HabitData:
    """Build a new, locked habit with empty history.

    A blank description falls back to the habit name.
    """
    clean_name = name.strip()
    clean_description = (description or "").strip() or clean_name
    return {
        const.DATA_HABIT_ID: str(uuid.uuid4()),
        const.DATA_HABIT_NAME: clean_name,
        const.DATA_HABIT_DESCRIPTION: clean_description,
        const.DATA_HABIT_COMPLETION_DATES: [],
        const.DATA_HABIT_LAST_CHECKED_DATE: None,
        const.DATA_HABIT_IS_UNLOCKED: False,
        const.DATA_HABIT_HAS_BEEN_CELEBRATED: False,
    }


def build_ladder(
    name: str,
    habits: list[HabitData],
    emoji: str | None = None,
    streak_policy: str | None = None,
) -> LadderData:
    """Build a new ladder; the first habit starts unlocked."""
    ladder_habits = [copy.deepcopy(habit) for habit in habits]
    if ladder_habits:
        ladder_habits[0][const.DATA_HABIT_IS_UNLOCKED] = True

    return {
        const.DATA_LADDER_ID: str(uuid.uuid4()),
        const.DATA_LADDER_NAME: name.strip(),
        const.DATA_LADDER_EMOJI: emoji or None,
        const.DATA_LADDER_CREATED_DATE: dt_util.utcnow().isoformat(),
        const.DATA_LADDER_HABITS: ladder_habits,
        const.DATA_LADDER_STREAK_POLICY: streak_policy,
    }


def build_ladder_from_template(template: ProfileData) -> LadderData:
    """Build a fresh ladder from a built-in profile or curated ladder."""
    habits = [
        build_habit(habit_name, description)
        for habit_name, description in template["habits"]
    ]
    return build_ladder(template["name"], habits, emoji=template["emoji"])


def build_calendar_entry(
    habit_id: str, habit_name: str, calendar_day: str
) -> CalendarEntryData:
    """Build one calendar log entry."""
    return {
        const.DATA_EVENT_HABIT_ID: habit_id,
        const.DATA_EVENT_HABIT_NAME: habit_name,
        const.DATA_EVENT_CALENDAR_DAY: calendar_day,
    }


def add_calendar_entry(
    entries: list[CalendarEntryData], entry: CalendarEntryData
) -> bool:
    """Append entry unless its habit name already has one on that day.

    Returns:
        True if the log changed
    """
    key = (
        entry[const.DATA_EVENT_HABIT_NAME],
        entry[const.DATA_EVENT_CALENDAR_DAY],
    )
    for existing in entries:
        if (
            existing[const.DATA_EVENT_HABIT_NAME],
            existing[const.DATA_EVENT_CALENDAR_DAY],
        ) == key:
            return False
    entries.append(entry)
    return True


def build_calendar_log(habits: list[HabitData]) -> list[CalendarEntryData]:
    """Seed a calendar log from existing completion history, oldest first."""
    entries: list[CalendarEntryData] = []
    dated = sorted(
        (
            (iso_day, habit[const.DATA_HABIT_ID], habit[const.DATA_HABIT_NAME])
            for habit in habits
            for iso_day in habit.get(const.DATA_HABIT_COMPLETION_DATES, [])
        ),
        key=lambda item: item[0],
    )
    for iso_day, habit_id, habit_name in dated:
        add_calendar_entry(entries, build_calendar_entry(habit_id, habit_name, iso_day))
    return entries


# ==============================================================================
# VALIDATION
# ==============================================================================


def validate_ladder_input(
    name: str,
    habits: list[dict[str, Any]] | None,
    existing_ladders: list[LadderData] | None = None,
    *,
    current_ladder_id: str | None = None,
    streak_policy: str | None = None,
    check_habits: bool = True,
) -> dict[str, str]:
    """Validate a user-created ladder - SINGLE SOURCE OF TRUTH.

    Args:
        name: Proposed ladder name
        habits: Proposed habits as dicts with "name" and optional "description"
        existing_ladders: The custom-ladder library, for duplicate checks
        current_ladder_id: Ladder being renamed (excluded from duplicate check)
        streak_policy: Optional per-ladder policy override
        check_habits: False when only the name changes (rename)

    Returns:
        Dict of errors: {field: error_key}. Empty dict means validation passed.
    """
    errors: dict[str, str] = {}

    # === 1. Name ===
    clean_name = (name or "").strip()
    if not clean_name:
        errors[const.FIELD_NAME] = const.ERROR_LADDER_NAME_REQUIRED
    elif is_reserved_name(clean_name):
        errors[const.FIELD_NAME] = const.ERROR_LADDER_NAME_RESERVED
    else:
        for ladder in existing_ladders or []:
            if ladder[const.DATA_LADDER_ID] == current_ladder_id:
                continue
            if ladder[const.DATA_LADDER_NAME].casefold() == clean_name.casefold():
                errors[const.FIELD_NAME] = const.ERROR_LADDER_NAME_DUPLICATE
                break

    # === 2. Habits ===
    if check_habits:
        named = [
            habit
            for habit in habits or []
            if str(habit.get(const.FIELD_NAME) or "").strip()
        ]
        if len(named) != len(habits or []):
            errors[const.FIELD_HABITS] = const.ERROR_HABIT_NAME_REQUIRED
        elif len(named) < const.MIN_LADDER_HABITS:
            errors[const.FIELD_HABITS] = const.ERROR_HABITS_REQUIRED
        elif len(named) > const.MAX_LADDER_HABITS:
            errors[const.FIELD_HABITS] = const.ERROR_TOO_MANY_HABITS

    # === 3. Streak policy ===
    if streak_policy is not None and streak_policy not in const.STREAK_POLICIES:
        errors[const.FIELD_STREAK_POLICY] = const.ERROR_INVALID_STREAK_POLICY

    return errors


# ==============================================================================
# DECODERS
# ==============================================================================


def _apply_aliases(raw: dict[str, Any], aliases: dict[str, str]) -> dict[str, Any]:
    """Copy raw, renaming legacy keys unless the current key is already set."""
    data = dict(raw)
    for legacy_key, key in aliases.items():
        if legacy_key in data:
            legacy_value = data.pop(legacy_key)
            data.setdefault(key, legacy_value)
    return data


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise LadderDecodeError("expected non-empty string", key)
    return value


def _optional_bool(data: dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise LadderDecodeError("expected boolean", key)
    return value


def decode_habit(raw: Any) -> HabitData:
    """Decode a stored habit, repairing the last_checked_date invariant."""
    if not isinstance(raw, dict):
        raise LadderDecodeError(f"habit must be a mapping, got {type(raw).__name__}")
    data = _apply_aliases(raw, const.LEGACY_HABIT_FIELD_ALIASES)

    raw_dates = data.get(const.DATA_HABIT_COMPLETION_DATES) or []
    if not isinstance(raw_dates, list):
        raise LadderDecodeError("expected list", const.DATA_HABIT_COMPLETION_DATES)
    local_tz = dt_util.get_default_time_zone()
    try:
        completion_dates = sorted(
            {to_iso_day(value, tz=local_tz) for value in raw_dates}
        )
    except ValueError as err:
        raise LadderDecodeError(str(err), const.DATA_HABIT_COMPLETION_DATES) from err

    description = data.get(const.DATA_HABIT_DESCRIPTION) or ""
    if not isinstance(description, str):
        raise LadderDecodeError("expected string", const.DATA_HABIT_DESCRIPTION)

    return {
        const.DATA_HABIT_ID: _require_str(data, const.DATA_HABIT_ID),
        const.DATA_HABIT_NAME: _require_str(data, const.DATA_HABIT_NAME),
        const.DATA_HABIT_DESCRIPTION: description,
        const.DATA_HABIT_COMPLETION_DATES: completion_dates,
        const.DATA_HABIT_LAST_CHECKED_DATE: (
            completion_dates[-1] if completion_dates else None
        ),
        const.DATA_HABIT_IS_UNLOCKED: _optional_bool(data, const.DATA_HABIT_IS_UNLOCKED),
        const.DATA_HABIT_HAS_BEEN_CELEBRATED: _optional_bool(
            data, const.DATA_HABIT_HAS_BEEN_CELEBRATED
        ),
    }


def decode_habit_list(raw: Any) -> list[HabitData]:
    """Decode a list of habits, forcing the first one unlocked."""
    if not isinstance(raw, list):
        raise LadderDecodeError(f"habits must be a list, got {type(raw).__name__}")
    habits = [decode_habit(item) for item in raw]
    if habits:
        habits[0][const.DATA_HABIT_IS_UNLOCKED] = True
    return habits


def decode_ladder(raw: Any) -> LadderData:
    """Decode a stored ladder."""
    if not isinstance(raw, dict):
        raise LadderDecodeError(f"ladder must be a mapping, got {type(raw).__name__}")
    data = _apply_aliases(raw, const.LEGACY_LADDER_FIELD_ALIASES)

    emoji = data.get(const.DATA_LADDER_EMOJI)
    if emoji is not None and not isinstance(emoji, str):
        raise LadderDecodeError("expected string", const.DATA_LADDER_EMOJI)

    created_date = data.get(const.DATA_LADDER_CREATED_DATE)
    if isinstance(created_date, (int, float)) and not isinstance(created_date, bool):
        try:
            created_date = from_legacy_timestamp(created_date).isoformat()
        except ValueError:
            created_date = None
    if not isinstance(created_date, str) or not created_date:
        created_date = dt_util.utcnow().isoformat()

    streak_policy = data.get(const.DATA_LADDER_STREAK_POLICY)
    if streak_policy not in const.STREAK_POLICIES:
        streak_policy = None

    return {
        const.DATA_LADDER_ID: _require_str(data, const.DATA_LADDER_ID),
        const.DATA_LADDER_NAME: _require_str(data, const.DATA_LADDER_NAME),
        const.DATA_LADDER_EMOJI: emoji or None,
        const.DATA_LADDER_CREATED_DATE: created_date,
        const.DATA_LADDER_HABITS: decode_habit_list(
            data.get(const.DATA_LADDER_HABITS, [])
        ),
        const.DATA_LADDER_STREAK_POLICY: streak_policy,
    }


def decode_ladder_list(raw: Any) -> tuple[list[LadderData], list[str]]:
    """Decode the custom-ladder library.

    Entries that fail to decode are skipped rather than failing the library.

    Returns:
        (ladders, errors) where errors describes every skipped entry
    """
    if not isinstance(raw, list):
        raise LadderDecodeError(f"library must be a list, got {type(raw).__name__}")
    ladders: list[LadderData] = []
    errors: list[str] = []
    for index, item in enumerate(raw):
        try:
            ladders.append(decode_ladder(item))
        except LadderDecodeError as err:
            errors.append(f"entry {index}: {err}")
    return ladders, errors


def decode_usage_flags(raw: Any) -> UsageFlagsData:
    """Decode usage flags; missing flags default to unused."""
    if not isinstance(raw, dict):
        raise LadderDecodeError(f"flags must be a mapping, got {type(raw).__name__}")
    data = _apply_aliases(raw, const.LEGACY_USAGE_FIELD_ALIASES)
    return {
        const.DATA_USAGE_USED_FREE_DEFAULT_SLOT: _optional_bool(
            data, const.DATA_USAGE_USED_FREE_DEFAULT_SLOT
        ),
        const.DATA_USAGE_USED_FREE_CUSTOM_SLOT: _optional_bool(
            data, const.DATA_USAGE_USED_FREE_CUSTOM_SLOT
        ),
    }


def decode_calendar_log(raw: Any) -> tuple[list[CalendarEntryData], list[str]]:
    """Decode the calendar log, skipping malformed entries.

    Returns:
        (entries, errors) where errors describes every skipped entry
    """
    if not isinstance(raw, list):
        raise LadderDecodeError(
            f"calendar log must be a list, got {type(raw).__name__}"
        )
    local_tz = dt_util.get_default_time_zone()
    entries: list[CalendarEntryData] = []
    errors: list[str] = []
    for index, item in enumerate(raw):
        try:
            if not isinstance(item, dict):
                raise LadderDecodeError(
                    f"entry must be a mapping, got {type(item).__name__}"
                )
            try:
                calendar_day = to_iso_day(
                    item.get(const.DATA_EVENT_CALENDAR_DAY), tz=local_tz
                )
            except ValueError as err:
                raise LadderDecodeError(
                    str(err), const.DATA_EVENT_CALENDAR_DAY
                ) from err
            entry = build_calendar_entry(
                _require_str(item, const.DATA_EVENT_HABIT_ID),
                _require_str(item, const.DATA_EVENT_HABIT_NAME),
                calendar_day,
            )
        except LadderDecodeError as err:
            errors.append(f"entry {index}: {err}")
            continue
        add_calendar_entry(entries, entry)
    return entries, errors
