"""Unit tests for UsageGate - free/premium slot bookkeeping."""

from __future__ import annotations

from custom_components.habitladder import const
from custom_components.habitladder.engines.usage_engine import UsageGate

DEFAULT_SLOT = const.DATA_USAGE_USED_FREE_DEFAULT_SLOT
CUSTOM_SLOT = const.DATA_USAGE_USED_FREE_CUSTOM_SLOT


class TestFreeUser:
    """One default profile and one custom ladder."""

    def test_fresh_flags_allow_both(self) -> None:
        flags = UsageGate.default_flags()
        assert UsageGate.can_use_default_profile(False, flags)
        assert UsageGate.can_use_custom_ladder(False, flags)

    def test_consumed_slots_block(self) -> None:
        flags = UsageGate.default_flags()
        UsageGate.consume_default_slot(flags)
        UsageGate.consume_custom_slot(flags)

        assert not UsageGate.can_use_default_profile(False, flags)
        assert not UsageGate.can_use_custom_ladder(False, flags)

    def test_premium_ignores_flags(self) -> None:
        flags = {DEFAULT_SLOT: True, CUSTOM_SLOT: True}
        assert UsageGate.can_use_default_profile(True, flags)
        assert UsageGate.can_use_custom_ladder(True, flags)


class TestReleaseCustomSlot:
    """Only an empty library gives the custom slot back."""

    def test_released_when_library_empty(self) -> None:
        flags = {DEFAULT_SLOT: True, CUSTOM_SLOT: True}

        assert UsageGate.release_custom_slot(flags, remaining_ladders=0) is True
        assert flags[CUSTOM_SLOT] is False
        # Asymmetric: the default slot is never released
        assert flags[DEFAULT_SLOT] is True

    def test_kept_while_ladders_remain(self) -> None:
        flags = {DEFAULT_SLOT: False, CUSTOM_SLOT: True}
        assert UsageGate.release_custom_slot(flags, remaining_ladders=1) is False
        assert flags[CUSTOM_SLOT] is True

    def test_noop_when_unused(self) -> None:
        flags = UsageGate.default_flags()
        assert UsageGate.release_custom_slot(flags, remaining_ladders=0) is False


def test_status_summary() -> None:
    assert UsageGate.status_summary(True, UsageGate.default_flags()).startswith(
        "Premium"
    )
    assert (
        UsageGate.status_summary(False, {DEFAULT_SLOT: True, CUSTOM_SLOT: False})
        == "Free: ✓ Default Profile | ○ Custom Ladder"
    )
