"""Tests for LadderManager: profiles, custom-ladder library and quotas."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from homeassistant.core import HomeAssistant
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.habitladder import const
from custom_components.habitladder.coordinator import HabitLadderCoordinator
from tests.helpers import SignalRecorder, get_test_coordinator, three_rung_ladder

EVENING_HABITS = [
    {const.FIELD_NAME: "Dim the lights"},
    {const.FIELD_NAME: "Read", const.FIELD_DESCRIPTION: "Ten pages"},
]


@pytest.fixture
def coordinator(
    hass: HomeAssistant, init_integration: MockConfigEntry
) -> HabitLadderCoordinator:
    """Coordinator of a loaded entry."""
    return get_test_coordinator(hass, init_integration)


# =============================================================================
# Default profile
# =============================================================================


class TestSelectProfileFree:
    """Free users get exactly one default profile."""

    async def test_first_selection(
        self, coordinator: HabitLadderCoordinator, stored_data: Callable[[str], Any]
    ) -> None:
        result = await coordinator.ladder_manager.async_select_profile("Basic Wellness")

        assert result.is_success
        state = coordinator.state
        assert state.default_ladder[const.DATA_LADDER_NAME] == "Basic Wellness"
        assert state.habits_source == const.HABITS_SOURCE_DEFAULT_LADDER
        assert state.habits[0][const.DATA_HABIT_IS_UNLOCKED] is True
        assert state.usage_flags[const.DATA_USAGE_USED_FREE_DEFAULT_SLOT] is True
        assert stored_data(const.STORAGE_KEY_USAGE_FLAGS)[
            const.DATA_USAGE_USED_FREE_DEFAULT_SLOT
        ] is True

    async def test_second_selection_exceeds_quota(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        await coordinator.ladder_manager.async_select_profile("Basic Wellness")
        original_id = coordinator.state.default_ladder[const.DATA_LADDER_ID]

        result = await coordinator.ladder_manager.async_select_profile("Sleep Hygiene")

        assert result.outcome == const.LADDER_OUTCOME_QUOTA_EXCEEDED
        assert result.message == const.DEFAULT_PROFILE_LIMIT_MESSAGE
        assert coordinator.state.default_ladder[const.DATA_LADDER_ID] == original_id

    async def test_premium_profile_refused(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        result = await coordinator.ladder_manager.async_select_profile(
            "Leadership Excellence"
        )
        assert result.outcome == const.LADDER_OUTCOME_PREMIUM_REQUIRED
        assert coordinator.state.default_ladder is None
        # A refusal never consumes the slot
        assert not coordinator.state.usage_flags[const.DATA_USAGE_USED_FREE_DEFAULT_SLOT]

    async def test_unknown_profile(self, coordinator: HabitLadderCoordinator) -> None:
        result = await coordinator.ladder_manager.async_select_profile("Nope")
        assert result.outcome == const.LADDER_OUTCOME_PROFILE_NOT_FOUND


class TestSelectProfilePremium:
    """Premium users may switch profiles freely."""

    @pytest.fixture
    def entry_options(self) -> dict[str, Any]:
        return {const.CONF_PREMIUM_USER: True}

    async def test_switch_profiles(self, coordinator: HabitLadderCoordinator) -> None:
        first = await coordinator.ladder_manager.async_select_profile("Basic Wellness")
        second = await coordinator.ladder_manager.async_select_profile(
            "Leadership Excellence"
        )

        assert first.is_success and second.is_success
        assert (
            coordinator.state.default_ladder[const.DATA_LADDER_NAME]
            == "Leadership Excellence"
        )


# =============================================================================
# Custom ladders
# =============================================================================


class TestCustomLadderQuota:
    """One free custom ladder; deleting the last one frees the slot."""

    async def test_create_delete_recreate(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        manager = coordinator.ladder_manager

        created = await manager.async_create_custom_ladder("Evening", EVENING_HABITS)
        assert created.is_success
        assert coordinator.state.usage_flags[const.DATA_USAGE_USED_FREE_CUSTOM_SLOT]

        refused = await manager.async_create_custom_ladder("Weekend", EVENING_HABITS)
        assert refused.outcome == const.LADDER_OUTCOME_QUOTA_EXCEEDED
        assert refused.message == const.CUSTOM_LADDER_LIMIT_MESSAGE
        assert len(coordinator.state.custom_ladders) == 1

        deleted = await manager.async_delete_custom_ladder("evening")
        assert deleted.is_success
        assert coordinator.state.custom_ladders == []
        assert not coordinator.state.usage_flags[const.DATA_USAGE_USED_FREE_CUSTOM_SLOT]

        recreated = await manager.async_create_custom_ladder("Weekend", EVENING_HABITS)
        assert recreated.is_success

    async def test_invalid_ladder(self, coordinator: HabitLadderCoordinator) -> None:
        result = await coordinator.ladder_manager.async_create_custom_ladder(
            "Basic Wellness", EVENING_HABITS
        )

        assert result.outcome == const.LADDER_OUTCOME_INVALID_LADDER
        assert result.errors == {const.FIELD_NAME: const.ERROR_LADDER_NAME_RESERVED}
        assert not coordinator.state.usage_flags[const.DATA_USAGE_USED_FREE_CUSTOM_SLOT]

    async def test_free_user_emoji_dropped(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        result = await coordinator.ladder_manager.async_create_custom_ladder(
            "Evening", EVENING_HABITS, emoji="🌙"
        )
        assert result.ladder[const.DATA_LADDER_EMOJI] is None
        habits = result.ladder[const.DATA_LADDER_HABITS]
        assert habits[0][const.DATA_HABIT_DESCRIPTION] == "Dim the lights"
        assert habits[1][const.DATA_HABIT_DESCRIPTION] == "Ten pages"


class TestCustomLadderPremium:
    """Premium-only library features."""

    @pytest.fixture
    def entry_options(self) -> dict[str, Any]:
        return {const.CONF_PREMIUM_USER: True}

    async def test_unlimited_with_emoji(self, coordinator: HabitLadderCoordinator) -> None:
        manager = coordinator.ladder_manager
        first = await manager.async_create_custom_ladder(
            "Evening", EVENING_HABITS, emoji="🌙"
        )
        second = await manager.async_create_custom_ladder("Weekend", EVENING_HABITS)

        assert first.ladder[const.DATA_LADDER_EMOJI] == "🌙"
        assert second.is_success
        assert len(coordinator.state.custom_ladders) == 2

    async def test_curated_ladder(self, coordinator: HabitLadderCoordinator) -> None:
        result = await coordinator.ladder_manager.async_add_curated_ladder(
            "Morning Routine", activate=True
        )

        assert result.is_success
        assert coordinator.state.is_custom_active
        assert coordinator.state.active_ladder[const.DATA_LADDER_NAME] == "Morning Routine"
        assert len(coordinator.state.habits) == 5


async def test_curated_ladder_requires_premium(
    coordinator: HabitLadderCoordinator,
) -> None:
    result = await coordinator.ladder_manager.async_add_curated_ladder("Morning Routine")
    assert result.outcome == const.LADDER_OUTCOME_PREMIUM_REQUIRED
    assert coordinator.state.custom_ladders == []


# =============================================================================
# Switching ladders
# =============================================================================


class TestSwitching:
    """Activate / switch back / delete the tracked ladder."""

    @pytest.fixture
    def seeded(self, seed_storage: Callable[[str, Any], None]) -> None:
        seed_storage(const.STORAGE_KEY_DEFAULT_LADDER, three_rung_ladder())
        seed_storage(
            const.STORAGE_KEY_USAGE_FLAGS,
            {const.DATA_USAGE_USED_FREE_DEFAULT_SLOT: True},
        )

    async def test_progress_written_to_active_only(
        self,
        hass: HomeAssistant,
        seeded: None,
        coordinator: HabitLadderCoordinator,
        stored_data: Callable[[str], Any],
    ) -> None:
        created = await coordinator.ladder_manager.async_create_custom_ladder(
            "Evening", EVENING_HABITS, activate=True
        )
        assert coordinator.state.habits_source == const.HABITS_SOURCE_ACTIVE_LADDER

        first_id = created.ladder[const.DATA_LADDER_HABITS][0][const.DATA_HABIT_ID]
        await coordinator.progression_manager.async_record_completion(first_id)

        active = stored_data(const.STORAGE_KEY_ACTIVE_LADDER)
        library = stored_data(const.STORAGE_KEY_CUSTOM_LADDERS)
        default = stored_data(const.STORAGE_KEY_DEFAULT_LADDER)
        assert active[const.DATA_LADDER_HABITS][0][const.DATA_HABIT_COMPLETION_DATES]
        assert library[0][const.DATA_LADDER_HABITS][0][const.DATA_HABIT_COMPLETION_DATES]
        assert not any(
            habit[const.DATA_HABIT_COMPLETION_DATES]
            for habit in default[const.DATA_LADDER_HABITS]
        )

        switched = await coordinator.ladder_manager.async_switch_to_default_ladder()
        assert switched.is_success
        assert coordinator.state.active_ladder is None
        assert coordinator.state.habits_source == const.HABITS_SOURCE_DEFAULT_LADDER
        assert stored_data(const.STORAGE_KEY_ACTIVE_LADDER) is None

        # Library keeps the custom ladder's progress for next time
        reactivated = await coordinator.ladder_manager.async_activate_custom_ladder(
            "Evening"
        )
        assert reactivated.is_success
        assert coordinator.state.habits[0][const.DATA_HABIT_COMPLETION_DATES]

    async def test_delete_active_switches_to_default(
        self,
        hass: HomeAssistant,
        seeded: None,
        coordinator: HabitLadderCoordinator,
    ) -> None:
        recorder = SignalRecorder(hass, coordinator.config_entry.entry_id).listen(
            const.SIGNAL_SUFFIX_LADDER_CHANGED
        )
        created = await coordinator.ladder_manager.async_create_custom_ladder(
            "Evening", EVENING_HABITS, activate=True
        )

        result = await coordinator.ladder_manager.async_delete_custom_ladder(
            created.ladder[const.DATA_LADDER_ID]
        )
        await hass.async_block_till_done()

        assert result.is_success
        assert coordinator.state.active_ladder is None
        assert coordinator.state.habits_source == const.HABITS_SOURCE_DEFAULT_LADDER
        assert [event["reason"] for event in recorder.of(const.SIGNAL_SUFFIX_LADDER_CHANGED)] == [
            "custom_ladder_created",
            "custom_ladder_deleted",
        ]
        recorder.close()

    async def test_switch_without_default(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        result = await coordinator.ladder_manager.async_switch_to_default_ladder()
        assert result.outcome == const.LADDER_OUTCOME_NO_ACTIVE_LADDER


class TestRename:
    """async_rename_custom_ladder."""

    @pytest.fixture
    def entry_options(self) -> dict[str, Any]:
        return {const.CONF_PREMIUM_USER: True}

    async def test_rename_updates_active_copy(
        self, coordinator: HabitLadderCoordinator
    ) -> None:
        await coordinator.ladder_manager.async_create_custom_ladder(
            "Evening", EVENING_HABITS, activate=True
        )

        result = await coordinator.ladder_manager.async_rename_custom_ladder(
            "Evening", "Night"
        )

        assert result.is_success
        assert coordinator.state.active_ladder[const.DATA_LADDER_NAME] == "Night"
        assert coordinator.state.custom_ladders[0][const.DATA_LADDER_NAME] == "Night"

    async def test_rename_conflicts(self, coordinator: HabitLadderCoordinator) -> None:
        manager = coordinator.ladder_manager
        await manager.async_create_custom_ladder("Evening", EVENING_HABITS)
        await manager.async_create_custom_ladder("Weekend", EVENING_HABITS)

        duplicate = await manager.async_rename_custom_ladder("Weekend", "evening")
        reserved = await manager.async_rename_custom_ladder("Weekend", "Sleep Hygiene")
        missing = await manager.async_rename_custom_ladder("Nope", "Anything")

        assert duplicate.errors == {const.FIELD_NAME: const.ERROR_LADDER_NAME_DUPLICATE}
        assert reserved.errors == {const.FIELD_NAME: const.ERROR_LADDER_NAME_RESERVED}
        assert missing.outcome == const.LADDER_OUTCOME_LADDER_NOT_FOUND
