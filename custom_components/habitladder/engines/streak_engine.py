"""Streak Engine - Pure logic for habit streak counting.

This engine provides stateless, pure Python functions for:
- Counting a habit's streak from its completion history
- Deciding whether the streak qualifies the habit to unlock its successor
- Switching between the supported counting policies

Two policies are supported because both have shipped at different times:
- consecutive_day: consecutive calendar days ending at the most recent
  completion. A one-day gap continues the streak, anything larger breaks it.
- total_count_capped: distinct completion days regardless of gaps, capped at
  the unlock threshold.

ARCHITECTURE: This is a pure logic engine with NO Home Assistant dependencies.
All functions are static methods that operate on passed-in data.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import date

from .. import const
from ..utils.dt_utils import CalendarDayInput, normalize_calendar_days, previous_day


@dataclass(frozen=True)
class StreakResult:
    """Outcome of a streak computation.

    Attributes:
        count: Streak length under the selected policy
        has_qualifying_streak: True when count reaches the unlock threshold
    """

    count: int
    has_qualifying_streak: bool


class StreakEngine:
    """Pure logic engine for streak calculations.

    All methods are static - no instance state.
    """

    @staticmethod
    def compute_streak(
        completion_dates: Iterable[CalendarDayInput],
        policy: str = const.DEFAULT_STREAK_POLICY,
        threshold: int = const.UNLOCK_STREAK_THRESHOLD,
    ) -> StreakResult:
        """Compute the streak for a completion history.

        Dates are normalized to calendar days, deduplicated and sorted
        descending before scanning. The input is never mutated.

        Args:
            completion_dates: Completion days (ISO strings, dates or datetimes)
            policy: One of const.STREAK_POLICIES
            threshold: Streak length that qualifies for unlocking the next habit

        Returns:
            StreakResult with the count and qualifying flag

        Raises:
            ValueError: If policy is unknown or a date cannot be parsed
        """
        counter = StreakEngine.get_policy(policy)
        days = normalize_calendar_days(completion_dates, descending=True)
        count = counter(days, threshold)
        return StreakResult(count=count, has_qualifying_streak=count >= threshold)

    @staticmethod
    def get_policy(policy: str) -> Callable[[list[date], int], int]:
        """Return the counting function for a policy name."""
        handlers: dict[str, Callable[[list[date], int], int]] = {
            const.STREAK_POLICY_CONSECUTIVE_DAY: StreakEngine._count_consecutive_days,
            const.STREAK_POLICY_TOTAL_COUNT_CAPPED: StreakEngine._count_total_capped,
        }
        try:
            return handlers[policy]
        except KeyError as err:
            raise ValueError(f"Unknown streak policy: {policy}") from err

    @staticmethod
    def resolve_policy(ladder_policy: str | None, global_policy: str | None) -> str:
        """Pick the per-ladder policy when set, else the global one."""
        for candidate in (ladder_policy, global_policy):
            if candidate in const.STREAK_POLICIES:
                return candidate
        return const.DEFAULT_STREAK_POLICY

    @staticmethod
    def _count_consecutive_days(days_desc: list[date], threshold: int) -> int:
        """Count consecutive days ending at the most recent completion."""
        if not days_desc:
            return 0

        streak = 1
        for newer, older in zip(days_desc, days_desc[1:]):
            if older != previous_day(newer):
                break
            streak += 1
        return streak

    @staticmethod
    def _count_total_capped(days_desc: list[date], threshold: int) -> int:
        """Count distinct completion days, capped at the threshold."""
        return min(len(days_desc), threshold)
