"""Tests for calendar-day utilities (pure Python, no Home Assistant)."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from custom_components.habitladder.utils.dt_utils import (
    from_legacy_timestamp,
    normalize_calendar_days,
    previous_day,
    to_calendar_day,
    to_iso_day,
)


class TestToCalendarDay:
    """Normalization of the accepted input types."""

    def test_date_passes_through(self) -> None:
        assert to_calendar_day(date(2026, 1, 15)) == date(2026, 1, 15)

    def test_datetime_keeps_wall_clock_date(self) -> None:
        """No timezone conversion: 23:30 at UTC-8 stays on the 15th."""
        captured = datetime(2026, 1, 15, 23, 30, tzinfo=timezone(timedelta(hours=-8)))
        assert to_calendar_day(captured) == date(2026, 1, 15)

    @pytest.mark.parametrize(
        "value",
        ["2026-01-15", "2026-01-15T08:00:00", "2026-01-15T23:59:59+05:00"],
    )
    def test_iso_strings(self, value: str) -> None:
        assert to_calendar_day(value) == date(2026, 1, 15)

    @pytest.mark.parametrize("value", ["", "   ", "yesterday", "2026-13-01"])
    def test_invalid_strings_raise(self, value: str) -> None:
        with pytest.raises(ValueError):
            to_calendar_day(value)

    @pytest.mark.parametrize("value", [None, True, [2026, 1, 15]])
    def test_unsupported_type_raises(self, value: object) -> None:
        with pytest.raises(ValueError):
            to_calendar_day(value)  # type: ignore[arg-type]


class TestLegacyTimestamps:
    """Seconds since 2001-01-01 UTC, as written by older stores."""

    def test_reference_date_is_zero(self) -> None:
        assert from_legacy_timestamp(0) == datetime(2001, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [790084800.0, 790084800])
    def test_noon_utc(self, value: float) -> None:
        assert to_calendar_day(value) == date(2026, 1, 14)
        assert to_iso_day(value) == "2026-01-14"

    def test_read_in_given_time_zone(self) -> None:
        """02:00 UTC on the 15th is still the 14th at UTC-8."""
        value = 790084800.0 + 14 * 3600
        pacific = timezone(timedelta(hours=-8))

        assert to_calendar_day(value) == date(2026, 1, 15)
        assert to_calendar_day(value, tz=pacific) == date(2026, 1, 14)

    def test_mixed_with_iso_strings(self) -> None:
        assert normalize_calendar_days([789998400.0, "2026-01-14", 790084800.0]) == [
            date(2026, 1, 13),
            date(2026, 1, 14),
        ]

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), 1e20])
    def test_unrepresentable_raises(self, value: float) -> None:
        with pytest.raises(ValueError):
            to_calendar_day(value)


def test_to_iso_day() -> None:
    assert to_iso_day(datetime(2026, 3, 9, 6, 0)) == "2026-03-09"


def test_normalize_calendar_days_dedupes_and_sorts() -> None:
    values = ["2026-01-03", date(2026, 1, 1), "2026-01-03T22:00:00", "2026-01-02"]

    assert normalize_calendar_days(values) == [
        date(2026, 1, 1),
        date(2026, 1, 2),
        date(2026, 1, 3),
    ]
    assert normalize_calendar_days(values, descending=True)[0] == date(2026, 1, 3)
    # Input untouched
    assert values[0] == "2026-01-03"


def test_previous_day_crosses_month() -> None:
    assert previous_day("2026-03-01") == date(2026, 2, 28)
