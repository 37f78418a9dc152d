# File: options_flow.py
"""Options Flow for the HabitLadder integration.

Edits the entitlement flag, the global streak policy and the reminder
settings. Saving options reloads the entry through the update listener.
"""

from __future__ import annotations

from typing import Any

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector
from homeassistant.util import dt as dt_util

from . import const


def build_options_schema(options: dict[str, Any]) -> vol.Schema:
    """Build the options form, pre-filled from current options."""
    return vol.Schema(
        {
            vol.Required(
                const.CONF_PREMIUM_USER,
                default=options.get(const.CONF_PREMIUM_USER, const.DEFAULT_PREMIUM_USER),
            ): selector.BooleanSelector(),
            vol.Required(
                const.CONF_STREAK_POLICY,
                default=options.get(
                    const.CONF_STREAK_POLICY, const.DEFAULT_STREAK_POLICY
                ),
            ): selector.SelectSelector(
                selector.SelectSelectorConfig(
                    options=const.STREAK_POLICIES,
                    mode=selector.SelectSelectorMode.DROPDOWN,
                    translation_key=const.TRANS_KEY_CFOF_STREAK_POLICY,
                )
            ),
            vol.Optional(
                const.CONF_NOTIFY_SERVICE,
                default=options.get(
                    const.CONF_NOTIFY_SERVICE, const.DEFAULT_NOTIFY_SERVICE
                ),
            ): selector.TextSelector(),
            vol.Required(
                const.CONF_REMINDER_TIME,
                default=options.get(
                    const.CONF_REMINDER_TIME, const.DEFAULT_REMINDER_TIME
                ),
            ): selector.TimeSelector(),
            vol.Required(
                const.CONF_NOTIFY_ON_CHANGE,
                default=options.get(
                    const.CONF_NOTIFY_ON_CHANGE, const.DEFAULT_NOTIFY_ON_CHANGE
                ),
            ): selector.BooleanSelector(),
        }
    )


class HabitLadderOptionsFlowHandler(config_entries.OptionsFlow):
    """Options Flow for premium, streak policy and reminders."""

    def __init__(self, _config_entry: config_entries.ConfigEntry):
        """Initialize the options flow."""
        self._entry_options: dict[str, Any] = {}

    async def async_step_init(self, user_input: dict[str, Any] | None = None):
        """Show and save the options form."""
        self._entry_options = dict(self.config_entry.options)
        errors: dict[str, str] = {}

        if user_input is not None:
            if dt_util.parse_time(str(user_input[const.CONF_REMINDER_TIME])) is None:
                errors[const.CONF_REMINDER_TIME] = (
                    const.TRANS_KEY_ERROR_INVALID_REMINDER_TIME
                )
            else:
                self._entry_options.update(
                    {
                        const.CONF_PREMIUM_USER: user_input[const.CONF_PREMIUM_USER],
                        const.CONF_STREAK_POLICY: user_input[const.CONF_STREAK_POLICY],
                        const.CONF_NOTIFY_SERVICE: (
                            user_input.get(const.CONF_NOTIFY_SERVICE) or ""
                        ).strip(),
                        const.CONF_REMINDER_TIME: str(
                            user_input[const.CONF_REMINDER_TIME]
                        ),
                        const.CONF_NOTIFY_ON_CHANGE: user_input[
                            const.CONF_NOTIFY_ON_CHANGE
                        ],
                    }
                )
                const.LOGGER.debug(
                    "DEBUG: HabitLadder options updated: premium=%s, policy=%s, "
                    "notify_service=%s, reminder=%s",
                    self._entry_options[const.CONF_PREMIUM_USER],
                    self._entry_options[const.CONF_STREAK_POLICY],
                    self._entry_options[const.CONF_NOTIFY_SERVICE],
                    self._entry_options[const.CONF_REMINDER_TIME],
                )
                return self.async_create_entry(title="", data=self._entry_options)

        return self.async_show_form(
            step_id=const.OPTIONS_FLOW_STEP_INIT,
            data_schema=build_options_schema(user_input or self._entry_options),
            errors=errors,
        )
