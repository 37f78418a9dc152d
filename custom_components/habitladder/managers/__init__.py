"""Manager modules for HabitLadder integration.

Managers orchestrate workflows and coordinate between engines.
They are stateful, event-aware, and handle side effects.
"""

from .base_manager import BaseManager
from .ladder_manager import LadderManager, LadderOperationResult
from .notification_manager import NotificationManager
from .progression_manager import ProgressionManager

__all__ = [
    "BaseManager",
    "LadderManager",
    "LadderOperationResult",
    "NotificationManager",
    "ProgressionManager",
]
