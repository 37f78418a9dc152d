# File: notification_helper.py
"""Sends notifications using Home Assistant's notify services.

This module implements the outbound side of the HabitLadder reminder
scheduler. Sending is fire-and-forget: a missing service or a failing call
is logged and never propagates into ladder state handling.
"""

from __future__ import annotations

from typing import Any

from homeassistant.core import HomeAssistant

from . import const


async def async_send_notification(
    hass: HomeAssistant,
    notify_service: str,
    title: str,
    message: str,
    extra_data: dict[str, str] | None = None,
) -> bool:
    """Send a notification using the specified notify service.

    Gracefully handles missing notification services. If the service doesn't
    exist, logs a warning and returns without raising an exception.

    Returns:
        True if the notify service was called successfully
    """

    # Parse service name into domain and service components
    if "." not in notify_service:
        domain = const.NOTIFY_DOMAIN
        service = notify_service
    else:
        domain, service = notify_service.split(".", 1)

    if not hass.services.has_service(domain, service):
        const.LOGGER.warning(
            "WARNING: Notification service '%s.%s' not available - skipping notification",
            domain,
            service,
        )
        return False

    payload: dict[str, Any] = {const.NOTIFY_TITLE: title, const.NOTIFY_MESSAGE: message}
    if extra_data:
        payload[const.NOTIFY_DATA] = dict(extra_data)

    try:
        await hass.services.async_call(domain, service, payload, blocking=True)
    except Exception as err:  # pylint: disable=broad-exception-caught
        # Runs in fire-and-forget background tasks; never let it escape
        const.LOGGER.error(
            "ERROR: Unexpected error sending notification via '%s.%s': %s",
            domain,
            service,
            err,
        )
        return False

    const.LOGGER.debug("DEBUG: Notification sent via '%s.%s'", domain, service)
    return True
