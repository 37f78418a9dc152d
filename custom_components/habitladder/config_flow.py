# File: config_flow.py
"""Config flow for the HabitLadder integration.

HabitLadder keeps its state in storage rather than in the config entry, so
setup is a single confirmation step. All tunables live in the options flow.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.core import callback

from . import const
from .options_flow import HabitLadderOptionsFlowHandler


class HabitLadderConfigFlow(config_entries.ConfigFlow, domain=const.DOMAIN):
    """Config Flow for HabitLadder. Only one instance is allowed."""

    VERSION = 1

    async def async_step_user(self, user_input: dict[str, Any] | None = None):
        """Confirm and create the single HabitLadder entry."""
        if any(self._async_current_entries()):
            return self.async_abort(reason=const.TRANS_KEY_ERROR_SINGLE_INSTANCE)

        if user_input is not None:
            const.LOGGER.info("INFO: Creating HabitLadder config entry")
            return self.async_create_entry(
                title=const.HABITLADDER_TITLE,
                data={},
                options={
                    const.CONF_PREMIUM_USER: const.DEFAULT_PREMIUM_USER,
                    const.CONF_STREAK_POLICY: const.DEFAULT_STREAK_POLICY,
                },
            )

        return self.async_show_form(
            step_id=const.CONFIG_FLOW_STEP_USER, data_schema=vol.Schema({})
        )

    @staticmethod
    @callback
    def async_get_options_flow(config_entry):
        """Return the Options Flow."""
        return HabitLadderOptionsFlowHandler(config_entry)
