"""Shared fixtures for HabitLadder tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habitladder import const
from custom_components.habitladder.store import get_storage_key
from tests.helpers import FROZEN_NOW

# pylint: disable=invalid-name
pytest_plugins = "pytest_homeassistant_custom_component"
# pylint: enable=invalid-name


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations: Any) -> Any:
    """Enable custom integrations in tests."""
    # pylint: disable=unused-argument
    yield


@pytest.fixture(autouse=True)
def frozen_today(freezer: Any) -> Any:
    """Pin the clock so completion days are deterministic."""
    freezer.move_to(FROZEN_NOW)
    return freezer


@pytest.fixture
def entry_options() -> dict[str, Any]:
    """Options for the mock config entry (free user by default)."""
    return {
        const.CONF_PREMIUM_USER: False,
        const.CONF_STREAK_POLICY: const.STREAK_POLICY_CONSECUTIVE_DAY,
    }


@pytest.fixture
def mock_config_entry(
    entry_options: dict[str, Any],  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Return a mock config entry."""
    return MockConfigEntry(
        domain=const.DOMAIN,
        title=const.HABITLADDER_TITLE,
        data={},
        options=entry_options,
        entry_id="test_entry_id",
        unique_id="test_unique_id",
    )


@pytest.fixture
def seed_storage(hass_storage: dict[str, Any]) -> Callable[[str, Any], None]:
    """Return a function that writes a logical key into mocked storage."""

    def _seed(key: str, data: Any) -> None:
        storage_key = get_storage_key(key)
        hass_storage[storage_key] = {
            "version": const.STORAGE_VERSION,
            "minor_version": 1,
            "key": storage_key,
            "data": data,
        }

    return _seed


@pytest.fixture
def stored_data(hass_storage: dict[str, Any]) -> Callable[[str], Any]:
    """Return a function that reads a logical key back from mocked storage."""

    def _read(key: str) -> Any:
        entry = hass_storage.get(get_storage_key(key))
        return entry["data"] if entry else None

    return _read


@pytest.fixture
async def init_integration(
    hass: HomeAssistant,
    mock_config_entry: MockConfigEntry,  # pylint: disable=redefined-outer-name
) -> MockConfigEntry:
    """Set up the HabitLadder integration with whatever storage was seeded."""
    mock_config_entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(mock_config_entry.entry_id)
    await hass.async_block_till_done()
    return mock_config_entry

