# File: utils/dt_utils.py
"""Calendar-day utilities for HabitLadder.

Pure Python date functions with ZERO Home Assistant dependencies.
Completion history is tracked at calendar-day granularity: time-of-day and
the timezone a completion was captured in are discarded, so a habit done at
23:59 and one done at 00:01 the next day are one day apart.

Functions:
    - to_calendar_day: Normalize a date, datetime, ISO string or legacy
      reference-date timestamp to a date
    - from_legacy_timestamp: Seconds since 2001-01-01 UTC to an aware datetime
    - to_iso_day: Normalize to an ISO "YYYY-MM-DD" string
    - normalize_calendar_days: Deduplicate and sort a collection of days
    - previous_day: The calendar day before a given day
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, timedelta, timezone, tzinfo

# Third-party date utilities (no HA dependency)
from dateutil.parser import isoparse

CalendarDayInput = date | datetime | str | float

# Legacy stores hold seconds since this instant rather than ISO strings
LEGACY_REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)


def from_legacy_timestamp(seconds: float) -> datetime:
    """Return the UTC instant a legacy reference-date timestamp names.

    Raises:
        ValueError: If seconds is not a finite, representable offset.
    """
    try:
        return LEGACY_REFERENCE_DATE + timedelta(seconds=seconds)
    except (OverflowError, ValueError) as err:
        raise ValueError(f"Invalid legacy timestamp {seconds!r}: {err}") from err


def to_calendar_day(value: CalendarDayInput, *, tz: tzinfo | None = None) -> date:
    """Normalize a completion value to its calendar day.

    Accepts a date, a datetime (aware or naive), an ISO 8601 string with or
    without a time component, or a number of seconds since 2001-01-01 UTC as
    written by older stores. The wall-clock date as captured is kept; no
    timezone conversion happens. A legacy timestamp carries no wall clock,
    so it is read in tz (UTC when omitted).

    Raises:
        ValueError: If the value cannot be interpreted as a calendar day.
    """
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise ValueError("Empty calendar day string")
        try:
            return isoparse(text).date()
        except (ValueError, OverflowError) as err:
            raise ValueError(f"Invalid calendar day '{value}': {err}") from err
    # bool is an int subclass but never a timestamp
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return from_legacy_timestamp(value).astimezone(tz or timezone.utc).date()
    raise ValueError(f"Unsupported calendar day type: {type(value).__name__}")


def to_iso_day(value: CalendarDayInput, *, tz: tzinfo | None = None) -> str:
    """Return the ISO "YYYY-MM-DD" form of a calendar day."""
    return to_calendar_day(value, tz=tz).isoformat()


def normalize_calendar_days(
    values: Iterable[CalendarDayInput], *, descending: bool = False
) -> list[date]:
    """Deduplicate and sort calendar days.

    The input iterable is never modified.
    """
    return sorted({to_calendar_day(value) for value in values}, reverse=descending)


def previous_day(value: CalendarDayInput) -> date:
    """Return the calendar day before value."""
    return to_calendar_day(value) - timedelta(days=1)
