"""Ladder Manager - profile selection and custom-ladder library workflows.

All quota checks go through UsageGate. Refusals are returned as
LadderOperationResult outcomes (quota_exceeded, premium_required, ...)
and never raised; presenting them is up to the caller.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .. import const
from ..data_builders import (
    build_habit,
    build_ladder,
    build_ladder_from_template,
    validate_ladder_input,
)
from ..engines import UsageGate
from ..profiles import get_curated_ladder, get_profile
from .base_manager import BaseManager

if TYPE_CHECKING:
    from ..repository import AppState
    from ..type_defs import LadderData, ProfileData


@dataclass
class LadderOperationResult:
    """Outcome of a ladder management operation, returned as a value.

    Attributes:
        outcome: One of the LADDER_OUTCOME_* constants
        ladder: Copy of the affected ladder, when there is one
        message: User-facing explanation for refusals
        errors: Validation errors for invalid_ladder outcomes
    """

    outcome: str
    ladder: LadderData | None = None
    message: str | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        """Return True if the operation was applied."""
        return self.outcome == const.LADDER_OUTCOME_OK

    def as_dict(self) -> dict[str, Any]:
        """Serialize for service responses."""
        return {
            "outcome": self.outcome,
            "ladder_id": self.ladder[const.DATA_LADDER_ID] if self.ladder else None,
            "ladder_name": self.ladder[const.DATA_LADDER_NAME] if self.ladder else None,
            "message": self.message,
            "errors": dict(self.errors),
        }


class LadderManager(BaseManager):
    """Selects profiles and manages the custom-ladder library."""

    async def async_setup(self) -> None:
        """Nothing to subscribe to; operations are service driven."""

    # -------------------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------------------

    def find_custom_ladder(self, ladder_ref: str) -> LadderData | None:
        """Find a library ladder by id, or by case-insensitive name."""
        state = self.coordinator.state
        ladder = state.find_custom_ladder(ladder_ref)
        if ladder is not None:
            return ladder
        wanted = ladder_ref.strip().casefold()
        for candidate in state.custom_ladders:
            if candidate[const.DATA_LADDER_NAME].casefold() == wanted:
                return candidate
        return None

    # -------------------------------------------------------------------------------------
    # Default profile
    # -------------------------------------------------------------------------------------

    async def async_select_profile(self, profile_name: str) -> LadderOperationResult:
        """Make a built-in profile the default ladder and track it.

        Progress on the previous default ladder is discarded. The free
        default-profile slot is consumed and never given back.
        """
        profile = get_profile(profile_name)
        if profile is None:
            return LadderOperationResult(
                outcome=const.LADDER_OUTCOME_PROFILE_NOT_FOUND,
                message=f"Unknown profile '{profile_name}'",
            )

        is_premium = self.coordinator.is_premium_user
        if not profile["is_free"] and not is_premium:
            return LadderOperationResult(
                outcome=const.LADDER_OUTCOME_PREMIUM_REQUIRED,
                message=const.PREMIUM_REQUIRED_MESSAGE,
            )

        async with self.coordinator.write_lock:
            state = self.coordinator.state
            if not UsageGate.can_use_default_profile(is_premium, state.usage_flags):
                return LadderOperationResult(
                    outcome=const.LADDER_OUTCOME_QUOTA_EXCEEDED,
                    message=const.DEFAULT_PROFILE_LIMIT_MESSAGE,
                )

            # Keep the outgoing custom ladder's progress in the library
            self.coordinator.repository.commit_habits(state)

            ladder = build_ladder_from_template(profile)
            state.default_ladder = ladder
            state.active_ladder = None
            state.habits = copy.deepcopy(ladder[const.DATA_LADDER_HABITS])
            state.habits_source = const.HABITS_SOURCE_DEFAULT_LADDER
            UsageGate.consume_default_slot(state.usage_flags)
            await self.coordinator.async_persist()
            result_ladder = copy.deepcopy(ladder)

        const.LOGGER.info("INFO: Selected profile '%s' as default ladder", profile["name"])
        self._announce_ladder_change(result_ladder, "profile_selected")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=result_ladder)

    async def async_switch_to_default_ladder(self) -> LadderOperationResult:
        """Stop tracking the active custom ladder and go back to the default."""
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            if state.default_ladder is None:
                return LadderOperationResult(
                    outcome=const.LADDER_OUTCOME_NO_ACTIVE_LADDER,
                    message="No default ladder has been selected",
                )
            self._switch_to_default(state)
            await self.coordinator.async_persist()
            ladder = copy.deepcopy(state.default_ladder)

        self._announce_ladder_change(ladder, "switched_to_default")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=ladder)

    def _switch_to_default(self, state: AppState) -> None:
        """Commit the current working set, then load the default ladder's."""
        self.coordinator.repository.commit_habits(state)
        state.active_ladder = None
        if state.default_ladder is not None:
            state.habits = copy.deepcopy(state.default_ladder[const.DATA_LADDER_HABITS])
            state.habits_source = const.HABITS_SOURCE_DEFAULT_LADDER
        else:
            state.habits = []
            state.habits_source = const.HABITS_SOURCE_NONE

    # -------------------------------------------------------------------------------------
    # Custom ladders
    # -------------------------------------------------------------------------------------

    async def async_create_custom_ladder(
        self,
        name: str,
        habits: list[dict[str, Any]],
        *,
        emoji: str | None = None,
        streak_policy: str | None = None,
        activate: bool = False,
    ) -> LadderOperationResult:
        """Add a user-authored ladder to the library.

        Args:
            name: Ladder name (must not collide with built-in profiles)
            habits: Dicts with "name" and optional "description"
            emoji: Ladder emoji, kept for Premium users only
            streak_policy: Optional per-ladder streak policy
            activate: Start tracking the new ladder right away
        """
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            errors = validate_ladder_input(
                name, habits, state.custom_ladders, streak_policy=streak_policy
            )
            if errors:
                return LadderOperationResult(
                    outcome=const.LADDER_OUTCOME_INVALID_LADDER,
                    message="Invalid ladder",
                    errors=errors,
                )

            is_premium = self.coordinator.is_premium_user
            if not UsageGate.can_use_custom_ladder(is_premium, state.usage_flags):
                return LadderOperationResult(
                    outcome=const.LADDER_OUTCOME_QUOTA_EXCEEDED,
                    message=const.CUSTOM_LADDER_LIMIT_MESSAGE,
                )

            ladder = build_ladder(
                name,
                [
                    build_habit(
                        habit[const.FIELD_NAME], habit.get(const.FIELD_DESCRIPTION)
                    )
                    for habit in habits
                ],
                emoji=emoji if is_premium else None,
                streak_policy=streak_policy,
            )
            ladder = await self._async_add_to_library(state, ladder, activate)

        self._announce_ladder_change(ladder, "custom_ladder_created")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=ladder)

    async def async_add_curated_ladder(
        self, curated_name: str, *, activate: bool = False
    ) -> LadderOperationResult:
        """Copy a Premium curated ladder into the library."""
        template: ProfileData | None = get_curated_ladder(curated_name)
        if template is None:
            return LadderOperationResult(
                outcome=const.LADDER_OUTCOME_PROFILE_NOT_FOUND,
                message=f"Unknown curated ladder '{curated_name}'",
            )
        if not self.coordinator.is_premium_user:
            return LadderOperationResult(
                outcome=const.LADDER_OUTCOME_PREMIUM_REQUIRED,
                message=const.PREMIUM_REQUIRED_MESSAGE,
            )

        async with self.coordinator.write_lock:
            state = self.coordinator.state
            ladder = build_ladder_from_template(template)
            ladder = await self._async_add_to_library(state, ladder, activate)

        self._announce_ladder_change(ladder, "curated_ladder_added")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=ladder)

    async def _async_add_to_library(
        self, state: AppState, ladder: LadderData, activate: bool
    ) -> LadderData:
        """Append to the library, consume the slot, optionally activate, persist."""
        state.custom_ladders.append(ladder)
        UsageGate.consume_custom_slot(state.usage_flags)
        if activate:
            self._activate(state, ladder)
        await self.coordinator.async_persist()
        const.LOGGER.info(
            "INFO: Added custom ladder '%s' (%s habits)",
            ladder[const.DATA_LADDER_NAME],
            len(ladder[const.DATA_LADDER_HABITS]),
        )
        return copy.deepcopy(ladder)

    async def async_rename_custom_ladder(
        self, ladder_ref: str, new_name: str
    ) -> LadderOperationResult:
        """Rename a library ladder (and the active copy if it is tracked)."""
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            ladder = self.find_custom_ladder(ladder_ref)
            if ladder is None:
                return self._not_found(ladder_ref)

            ladder_id = ladder[const.DATA_LADDER_ID]
            errors = validate_ladder_input(
                new_name,
                None,
                state.custom_ladders,
                current_ladder_id=ladder_id,
                check_habits=False,
            )
            if errors:
                return LadderOperationResult(
                    outcome=const.LADDER_OUTCOME_INVALID_LADDER,
                    message="Invalid ladder name",
                    errors=errors,
                )

            ladder[const.DATA_LADDER_NAME] = new_name.strip()
            if (
                state.active_ladder is not None
                and state.active_ladder[const.DATA_LADDER_ID] == ladder_id
            ):
                state.active_ladder[const.DATA_LADDER_NAME] = new_name.strip()
            await self.coordinator.async_persist()
            result_ladder = copy.deepcopy(ladder)

        self._announce_ladder_change(result_ladder, "custom_ladder_renamed")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=result_ladder)

    async def async_delete_custom_ladder(self, ladder_ref: str) -> LadderOperationResult:
        """Delete a library ladder.

        Deleting the tracked ladder switches back to the default ladder.
        Deleting the last library ladder releases the free custom slot.
        """
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            ladder = self.find_custom_ladder(ladder_ref)
            if ladder is None:
                return self._not_found(ladder_ref)

            ladder_id = ladder[const.DATA_LADDER_ID]
            if (
                state.active_ladder is not None
                and state.active_ladder[const.DATA_LADDER_ID] == ladder_id
            ):
                self._switch_to_default(state)

            state.custom_ladders = [
                entry
                for entry in state.custom_ladders
                if entry[const.DATA_LADDER_ID] != ladder_id
            ]
            UsageGate.release_custom_slot(state.usage_flags, len(state.custom_ladders))
            await self.coordinator.async_persist()
            deleted = copy.deepcopy(ladder)

        const.LOGGER.info("INFO: Deleted custom ladder '%s'", deleted[const.DATA_LADDER_NAME])
        self._announce_ladder_change(deleted, "custom_ladder_deleted")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=deleted)

    async def async_activate_custom_ladder(self, ladder_ref: str) -> LadderOperationResult:
        """Track a library ladder instead of the current one."""
        async with self.coordinator.write_lock:
            state = self.coordinator.state
            ladder = self.find_custom_ladder(ladder_ref)
            if ladder is None:
                return self._not_found(ladder_ref)

            self._activate(state, ladder)
            await self.coordinator.async_persist()
            result_ladder = copy.deepcopy(state.active_ladder)

        self._announce_ladder_change(result_ladder, "custom_ladder_activated")
        return LadderOperationResult(outcome=const.LADDER_OUTCOME_OK, ladder=result_ladder)

    def _activate(self, state: AppState, ladder: LadderData) -> None:
        """Commit the current working set, then load the ladder's habits."""
        self.coordinator.repository.commit_habits(state)
        # Re-read after commit: the entry may have been replaced by a fresh copy
        entry = state.find_custom_ladder(ladder[const.DATA_LADDER_ID]) or ladder
        state.active_ladder = copy.deepcopy(entry)
        state.habits = copy.deepcopy(entry[const.DATA_LADDER_HABITS])
        state.habits_source = const.HABITS_SOURCE_ACTIVE_LADDER

    # -------------------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------------------

    @staticmethod
    def _not_found(ladder_ref: str) -> LadderOperationResult:
        const.LOGGER.warning("WARNING: Custom ladder '%s' not found", ladder_ref)
        return LadderOperationResult(
            outcome=const.LADDER_OUTCOME_LADDER_NOT_FOUND,
            message=f"Custom ladder '{ladder_ref}' not found",
        )

    def _announce_ladder_change(self, ladder: LadderData | None, reason: str) -> None:
        """Emit ladder_changed and refresh actionable-habit tracking."""
        self.emit(
            const.SIGNAL_SUFFIX_LADDER_CHANGED,
            ladder_id=ladder[const.DATA_LADDER_ID] if ladder else None,
            ladder_name=ladder[const.DATA_LADDER_NAME] if ladder else None,
            reason=reason,
        )
        self.coordinator.progression_manager.check_actionable_habit()
