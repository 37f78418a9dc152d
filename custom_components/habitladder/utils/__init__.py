# File: utils/__init__.py
"""Pure Python utilities for HabitLadder.

This module contains pure Python functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

Submodules:
    - dt_utils: Calendar-day parsing, normalization and arithmetic

Usage:
    from .utils import dt_utils
    from .utils.dt_utils import to_calendar_day
"""

from . import dt_utils

__all__ = ["dt_utils"]
