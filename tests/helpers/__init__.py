"""Test helpers for HabitLadder integration tests.

    from tests.helpers import (
        make_habit, make_ladder, three_rung_ladder,
        FROZEN_NOW, TODAY, SignalRecorder, get_test_coordinator, failing_writes,
    )

- builders.py: Stored habit and ladder records
- signals.py: Capturing dispatcher events emitted by managers
- setup.py: Runtime objects of a loaded entry
- storage.py: Write failures underneath the storage layer
"""

from tests.helpers.builders import (
    FROZEN_NOW,
    TODAY,
    make_habit,
    make_ladder,
    three_rung_ladder,
)
from tests.helpers.signals import SignalRecorder
from tests.helpers.setup import get_test_coordinator
from tests.helpers.storage import failing_writes

__all__ = [
    "FROZEN_NOW",
    "TODAY",
    "SignalRecorder",
    "failing_writes",
    "get_test_coordinator",
    "make_habit",
    "make_ladder",
    "three_rung_ladder",
]
