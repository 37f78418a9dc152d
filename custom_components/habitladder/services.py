# File: services.py
"""Defines custom services for the HabitLadder integration.

These services allow direct actions through scripts, automations and
dashboards. Core outcomes are translated here: refusals become
HomeAssistantError, while a repeated completion on the same day is logged
and ignored.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant.core import (
    HomeAssistant,
    ServiceCall,
    ServiceResponse,
    SupportsResponse,
)
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from . import const
from .coordinator import HabitLadderCoordinator
from .helpers.entity_helpers import get_coordinator, get_first_habitladder_entry
from .managers import LadderOperationResult

# --- Service Schemas ---
COMPLETE_HABIT_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(const.FIELD_HABIT_ID): cv.string,
            vol.Optional(const.FIELD_HABIT_NAME): cv.string,
        }
    ),
    cv.has_at_least_one_key(const.FIELD_HABIT_ID, const.FIELD_HABIT_NAME),
)

RESET_LADDER_SCHEMA = vol.Schema({})

SELECT_PROFILE_SCHEMA = vol.Schema({vol.Required(const.FIELD_PROFILE): cv.string})

HABIT_ENTRY_SCHEMA = vol.Any(
    cv.string,
    vol.Schema(
        {
            vol.Required(const.FIELD_NAME): cv.string,
            vol.Optional(const.FIELD_DESCRIPTION, default=""): cv.string,
        }
    ),
)

CREATE_CUSTOM_LADDER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_LADDER_NAME): cv.string,
        vol.Required(const.FIELD_HABITS): vol.All(cv.ensure_list, [HABIT_ENTRY_SCHEMA]),
        vol.Optional(const.FIELD_EMOJI): cv.string,
        vol.Optional(const.FIELD_STREAK_POLICY): vol.In(const.STREAK_POLICIES),
        vol.Optional(const.FIELD_ACTIVATE, default=False): cv.boolean,
    }
)

ADD_CURATED_LADDER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_LADDER): cv.string,
        vol.Optional(const.FIELD_ACTIVATE, default=False): cv.boolean,
    }
)

RENAME_CUSTOM_LADDER_SCHEMA = vol.Schema(
    {
        vol.Required(const.FIELD_LADDER): cv.string,
        vol.Required(const.FIELD_NEW_NAME): cv.string,
    }
)

LADDER_REFERENCE_SCHEMA = vol.Schema({vol.Required(const.FIELD_LADDER): cv.string})

SWITCH_TO_DEFAULT_LADDER_SCHEMA = vol.Schema({})


def _get_loaded_coordinator(hass: HomeAssistant) -> HabitLadderCoordinator:
    """Return the coordinator of the loaded entry, or raise."""
    entry_id = get_first_habitladder_entry(hass)
    if not entry_id:
        const.LOGGER.warning("WARNING: HabitLadder service called while not loaded")
        raise HomeAssistantError(const.ERROR_NOT_LOADED)
    return get_coordinator(hass, entry_id)


def _resolve_habit_id(coordinator: HabitLadderCoordinator, call: ServiceCall) -> str:
    """Map habit_id / habit_name service fields to a habit id."""
    habit_id = call.data.get(const.FIELD_HABIT_ID)
    if habit_id:
        return habit_id

    habit_name = call.data[const.FIELD_HABIT_NAME].strip().casefold()
    for habit in coordinator.state.habits:
        if habit[const.DATA_HABIT_NAME].casefold() == habit_name:
            return habit[const.DATA_HABIT_ID]
    raise HomeAssistantError(
        const.ERROR_HABIT_NOT_FOUND_FMT.format(call.data[const.FIELD_HABIT_NAME])
    )


def _ladder_response(
    call: ServiceCall, result: LadderOperationResult
) -> ServiceResponse:
    """Raise on refusal; otherwise return the optional response."""
    if not result.is_success:
        const.LOGGER.warning(
            "WARNING: Service %s refused: %s (%s)",
            call.service,
            result.outcome,
            result.message,
        )
        raise HomeAssistantError(
            const.ERROR_LADDER_OPERATION_FMT.format(result.outcome, result.message)
        )
    return result.as_dict() if call.return_response else None


def async_setup_services(hass: HomeAssistant) -> None:
    """Register HabitLadder services."""
    if hass.services.has_service(const.DOMAIN, const.SERVICE_COMPLETE_HABIT):
        return

    async def handle_complete_habit(call: ServiceCall) -> ServiceResponse:
        """Handle marking a habit complete for today."""
        coordinator = _get_loaded_coordinator(hass)
        habit_id = _resolve_habit_id(coordinator, call)

        result = await coordinator.progression_manager.async_record_completion(habit_id)
        if result.outcome == const.COMPLETION_OUTCOME_HABIT_NOT_FOUND:
            raise HomeAssistantError(const.ERROR_HABIT_NOT_FOUND_FMT.format(habit_id))
        if result.outcome == const.COMPLETION_OUTCOME_HABIT_LOCKED:
            raise HomeAssistantError(const.ERROR_HABIT_LOCKED_FMT.format(habit_id))
        if result.outcome == const.COMPLETION_OUTCOME_ALREADY_COMPLETED_TODAY:
            const.LOGGER.debug(
                "DEBUG: complete_habit ignored, '%s' already completed today", habit_id
            )
        return result.as_dict() if call.return_response else None

    async def handle_reset_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle clearing all progress on the current ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.progression_manager.async_reset_ladder()
        return _ladder_response(call, result)

    async def handle_select_profile(call: ServiceCall) -> ServiceResponse:
        """Handle choosing a built-in profile as the default ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_select_profile(
            call.data[const.FIELD_PROFILE]
        )
        return _ladder_response(call, result)

    async def handle_create_custom_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle adding a user-authored ladder to the library."""
        coordinator = _get_loaded_coordinator(hass)
        habits: list[dict[str, Any]] = [
            {const.FIELD_NAME: entry, const.FIELD_DESCRIPTION: ""}
            if isinstance(entry, str)
            else dict(entry)
            for entry in call.data[const.FIELD_HABITS]
        ]
        result = await coordinator.ladder_manager.async_create_custom_ladder(
            call.data[const.FIELD_LADDER_NAME],
            habits,
            emoji=call.data.get(const.FIELD_EMOJI),
            streak_policy=call.data.get(const.FIELD_STREAK_POLICY),
            activate=call.data[const.FIELD_ACTIVATE],
        )
        return _ladder_response(call, result)

    async def handle_add_curated_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle copying a curated ladder into the library."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_add_curated_ladder(
            call.data[const.FIELD_LADDER], activate=call.data[const.FIELD_ACTIVATE]
        )
        return _ladder_response(call, result)

    async def handle_rename_custom_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle renaming a library ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_rename_custom_ladder(
            call.data[const.FIELD_LADDER], call.data[const.FIELD_NEW_NAME]
        )
        return _ladder_response(call, result)

    async def handle_delete_custom_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle deleting a library ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_delete_custom_ladder(
            call.data[const.FIELD_LADDER]
        )
        return _ladder_response(call, result)

    async def handle_activate_custom_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle tracking a library ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_activate_custom_ladder(
            call.data[const.FIELD_LADDER]
        )
        return _ladder_response(call, result)

    async def handle_switch_to_default_ladder(call: ServiceCall) -> ServiceResponse:
        """Handle going back to the default ladder."""
        coordinator = _get_loaded_coordinator(hass)
        result = await coordinator.ladder_manager.async_switch_to_default_ladder()
        return _ladder_response(call, result)

    # --- Register Services ---
    services: list[tuple[str, Any, vol.Schema]] = [
        (const.SERVICE_COMPLETE_HABIT, handle_complete_habit, COMPLETE_HABIT_SCHEMA),
        (const.SERVICE_RESET_LADDER, handle_reset_ladder, RESET_LADDER_SCHEMA),
        (const.SERVICE_SELECT_PROFILE, handle_select_profile, SELECT_PROFILE_SCHEMA),
        (
            const.SERVICE_CREATE_CUSTOM_LADDER,
            handle_create_custom_ladder,
            CREATE_CUSTOM_LADDER_SCHEMA,
        ),
        (
            const.SERVICE_ADD_CURATED_LADDER,
            handle_add_curated_ladder,
            ADD_CURATED_LADDER_SCHEMA,
        ),
        (
            const.SERVICE_RENAME_CUSTOM_LADDER,
            handle_rename_custom_ladder,
            RENAME_CUSTOM_LADDER_SCHEMA,
        ),
        (
            const.SERVICE_DELETE_CUSTOM_LADDER,
            handle_delete_custom_ladder,
            LADDER_REFERENCE_SCHEMA,
        ),
        (
            const.SERVICE_ACTIVATE_CUSTOM_LADDER,
            handle_activate_custom_ladder,
            LADDER_REFERENCE_SCHEMA,
        ),
        (
            const.SERVICE_SWITCH_TO_DEFAULT_LADDER,
            handle_switch_to_default_ladder,
            SWITCH_TO_DEFAULT_LADDER_SCHEMA,
        ),
    ]
    for service_name, handler, schema in services:
        hass.services.async_register(
            const.DOMAIN,
            service_name,
            handler,
            schema=schema,
            supports_response=SupportsResponse.OPTIONAL,
        )

    const.LOGGER.info("INFO: HabitLadder services have been registered successfully")


async def async_unload_services(hass: HomeAssistant) -> None:
    """Unregister HabitLadder services when unloading the integration."""
    for service in const.SERVICES:
        if hass.services.has_service(const.DOMAIN, service):
            hass.services.async_remove(const.DOMAIN, service)

    const.LOGGER.info("INFO: HabitLadder services have been unregistered")
