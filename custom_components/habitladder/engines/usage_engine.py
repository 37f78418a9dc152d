"""Usage Engine - Free/premium slot bookkeeping.

Free users get one default profile and one custom ladder. The flags record
whether each free slot has been consumed, independent of current premium
status, so a lapsed subscription does not hand the slots back.

Asymmetry:
- Deleting the last custom ladder releases the custom slot.
- The default-profile slot is never released, not even by switching profiles.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .. import const

if TYPE_CHECKING:
    from ..type_defs import UsageFlagsData


class UsageGate:
    """Pure entitlement checks over UsageFlagsData.

    Mutating helpers modify the passed-in flags dict in place.
    """

    @staticmethod
    def default_flags() -> UsageFlagsData:
        """Return flags for a fresh installation."""
        return {
            const.DATA_USAGE_USED_FREE_DEFAULT_SLOT: False,
            const.DATA_USAGE_USED_FREE_CUSTOM_SLOT: False,
        }

    @staticmethod
    def can_use_default_profile(is_premium: bool, flags: UsageFlagsData) -> bool:
        """Premium users, or free users whose default slot is unused."""
        return is_premium or not flags.get(const.DATA_USAGE_USED_FREE_DEFAULT_SLOT)

    @staticmethod
    def can_use_custom_ladder(is_premium: bool, flags: UsageFlagsData) -> bool:
        """Premium users, or free users whose custom slot is unused."""
        return is_premium or not flags.get(const.DATA_USAGE_USED_FREE_CUSTOM_SLOT)

    @staticmethod
    def consume_default_slot(flags: UsageFlagsData) -> None:
        """Mark the free default-profile slot as used."""
        flags[const.DATA_USAGE_USED_FREE_DEFAULT_SLOT] = True

    @staticmethod
    def consume_custom_slot(flags: UsageFlagsData) -> None:
        """Mark the free custom-ladder slot as used."""
        flags[const.DATA_USAGE_USED_FREE_CUSTOM_SLOT] = True

    @staticmethod
    def release_custom_slot(flags: UsageFlagsData, remaining_ladders: int) -> bool:
        """Release the custom slot once no custom ladders remain.

        Returns:
            True if the flag changed
        """
        if remaining_ladders > 0 or not flags.get(
            const.DATA_USAGE_USED_FREE_CUSTOM_SLOT
        ):
            return False
        flags[const.DATA_USAGE_USED_FREE_CUSTOM_SLOT] = False
        return True

    @staticmethod
    def status_summary(is_premium: bool, flags: UsageFlagsData) -> str:
        """Human readable summary of the user's slots."""
        if is_premium:
            return "Premium: Unlimited profiles and custom ladders"
        profile_used = (
            "✓" if flags.get(const.DATA_USAGE_USED_FREE_DEFAULT_SLOT) else "○"
        )
        custom_used = "✓" if flags.get(const.DATA_USAGE_USED_FREE_CUSTOM_SLOT) else "○"
        return f"Free: {profile_used} Default Profile | {custom_used} Custom Ladder"
