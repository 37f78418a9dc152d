"""Tests for the sensor and button platforms."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from homeassistant.const import STATE_UNAVAILABLE
from homeassistant.core import HomeAssistant
from homeassistant.helpers import entity_registry as er
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habitladder import const
from tests.helpers import three_rung_ladder


def _entity_id(hass: HomeAssistant, platform: str, unique_id: str) -> str:
    entity_id = er.async_get(hass).async_get_entity_id(platform, const.DOMAIN, unique_id)
    assert entity_id is not None, unique_id
    return entity_id


def _rung_sensor(hass: HomeAssistant, entry: MockConfigEntry, rung: int) -> str:
    return _entity_id(
        hass,
        "sensor",
        f"{entry.entry_id}{const.SENSOR_HABIT_RUNG_SUFFIX.format(index=rung)}",
    )


def _rung_button(hass: HomeAssistant, entry: MockConfigEntry, rung: int) -> str:
    return _entity_id(
        hass,
        "button",
        f"{entry.entry_id}{const.BUTTON_COMPLETE_RUNG_SUFFIX.format(index=rung)}",
    )


def _progress_sensor(hass: HomeAssistant, entry: MockConfigEntry) -> str:
    return _entity_id(
        hass, "sensor", f"{entry.entry_id}{const.SENSOR_LADDER_PROGRESS_SUFFIX}"
    )


@pytest.fixture
async def loaded(
    hass: HomeAssistant,
    seed_storage: Callable[[str, Any], None],
    mock_config_entry: MockConfigEntry,
) -> MockConfigEntry:
    seed_storage(const.STORAGE_KEY_DEFAULT_LADDER, three_rung_ladder())
    seed_storage(
        const.STORAGE_KEY_USAGE_FLAGS, {const.DATA_USAGE_USED_FREE_DEFAULT_SLOT: True}
    )
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    return mock_config_entry


async def test_entities_created_per_rung(
    hass: HomeAssistant, loaded: MockConfigEntry
) -> None:
    registry = er.async_get(hass)
    entries = er.async_entries_for_config_entry(registry, loaded.entry_id)
    by_domain: dict[str, int] = {}
    for entry in entries:
        by_domain[entry.domain] = by_domain.get(entry.domain, 0) + 1

    assert by_domain == {
        "sensor": const.MAX_LADDER_HABITS + 1,
        "button": const.MAX_LADDER_HABITS,
        "calendar": 1,
    }


async def test_progress_sensor(hass: HomeAssistant, loaded: MockConfigEntry) -> None:
    state = hass.states.get(_progress_sensor(hass, loaded))

    assert state.state == "1"
    assert state.attributes["icon"] == const.ICON_LADDER
    assert state.attributes[const.ATTR_LADDER_NAME] == "Starter"
    assert state.attributes[const.ATTR_HABITS_SOURCE] == (
        const.HABITS_SOURCE_DEFAULT_LADDER
    )
    assert state.attributes[const.ATTR_HABITS] == ["Drink water", "Stretch", "Read"]
    assert state.attributes[const.ATTR_NEXT_HABIT_NAME] == "Drink water"
    assert state.attributes[const.ATTR_COMPLETED_TODAY] == 0
    assert state.attributes[const.ATTR_ALL_UNLOCKED] is False
    assert state.attributes[const.ATTR_USAGE_SUMMARY] == (
        "Free: ✓ Default Profile | ○ Custom Ladder"
    )


async def test_rung_sensors(hass: HomeAssistant, loaded: MockConfigEntry) -> None:
    first = hass.states.get(_rung_sensor(hass, loaded, 1))
    second = hass.states.get(_rung_sensor(hass, loaded, 2))
    fourth = hass.states.get(_rung_sensor(hass, loaded, 4))

    assert first.state == "0"
    assert first.attributes[const.ATTR_HABIT_NAME] == "Drink water"
    assert first.attributes["icon"] == const.ICON_HABIT_OPEN
    assert second.attributes["icon"] == const.ICON_HABIT_LOCKED
    assert second.attributes[const.ATTR_IS_UNLOCKED] is False
    assert fourth.state == STATE_UNAVAILABLE


async def test_button_availability(hass: HomeAssistant, loaded: MockConfigEntry) -> None:
    assert hass.states.get(_rung_button(hass, loaded, 1)).state != STATE_UNAVAILABLE
    # Locked rung and empty rung
    assert hass.states.get(_rung_button(hass, loaded, 2)).state == STATE_UNAVAILABLE
    assert hass.states.get(_rung_button(hass, loaded, 5)).state == STATE_UNAVAILABLE


async def test_button_press_records_completion(
    hass: HomeAssistant, loaded: MockConfigEntry
) -> None:
    button_id = _rung_button(hass, loaded, 1)

    await hass.services.async_call(
        "button", "press", {"entity_id": button_id}, blocking=True
    )
    await hass.async_block_till_done()

    rung = hass.states.get(_rung_sensor(hass, loaded, 1))
    assert rung.state == "1"
    assert rung.attributes["icon"] == const.ICON_HABIT_DONE_TODAY
    assert rung.attributes[const.ATTR_IS_COMPLETED_TODAY] is True

    progress = hass.states.get(_progress_sensor(hass, loaded))
    assert progress.attributes[const.ATTR_COMPLETED_TODAY] == 1
    assert progress.attributes[const.ATTR_NEXT_HABIT_NAME] is None

    # Done for today
    assert hass.states.get(button_id).state == STATE_UNAVAILABLE
