"""Engine modules for HabitLadder integration.

Contains pure computation engines:
- streak_engine: Streak counting policies
- progression_engine: Ladder unlock state machine
- usage_engine: Free/premium slot bookkeeping
"""

# Use relative imports within package to avoid mypy module resolution issues
from .progression_engine import (
    CompletionResult,
    LadderProgress,
    ProgressionEngine,
    UnlockDelta,
)
from .streak_engine import StreakEngine, StreakResult
from .usage_engine import UsageGate

__all__ = [
    "CompletionResult",
    "LadderProgress",
    "ProgressionEngine",
    "StreakEngine",
    "StreakResult",
    "UnlockDelta",
    "UsageGate",
]
