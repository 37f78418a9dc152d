# File: helpers/__init__.py
"""Home Assistant-bound helper functions for HabitLadder.

This module contains functions that REQUIRE Home Assistant dependencies.

NOTE: Functions that need `hass` object belong here, NOT in utils/.

Submodules:
    - entity_helpers: Signal names and config entry lookup
    - device_helpers: DeviceInfo construction
"""

from . import device_helpers, entity_helpers

__all__ = ["device_helpers", "entity_helpers"]
