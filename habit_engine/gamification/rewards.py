"""
Reward Calculator

Points awarded for each completed repetition during a session.

Curve:
- Level from lifetime repetitions: beginner (<50), intermediate (<200), experienced
- Base points: 20 / 15 / 10
- Difficulty factor: session repetitions * level value reward, clamped to [0.1, 0.9]
- Ceiling per repetition: 20.0 / 17.5 / 15.0
- Reward = base + ceiling * factor, never below base,
  rounded up to an integer and then up to a multiple of 5

The reward only grows with session repetitions and plateaus once the
difficulty factor reaches 0.9.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict

from habit_engine.interfaces import HistoryStore
from habit_engine.models import UserLevel

logger = logging.getLogger(__name__)

MIN_DIFFICULTY = 0.1
MAX_DIFFICULTY = 0.9


@dataclass(frozen=True)
class RewardBreakdown:
    """Inputs to the reward formula for one repetition"""
    level: UserLevel
    base_points: int
    max_points_per_rep: float
    difficulty_factor: float

    @property
    def raw_points(self) -> float:
        return max(self.base_points + self.max_points_per_rep * self.difficulty_factor, self.base_points)


def difficulty_factor(session_repetitions: int, level: UserLevel) -> float:
    """Clamp session_repetitions * value_reward into [0.1, 0.9]"""
    return max(min(session_repetitions * level.value_reward, MAX_DIFFICULTY), MIN_DIFFICULTY)


def round_reward_points(points: float) -> int:
    """
    Round up to an integer, then up to the next multiple of 5.

    Example:
        >>> round_reward_points(22.0)
        25
        >>> round_reward_points(25.0)
        25
        >>> round_reward_points(25.2)
        30
    """
    # Strip float noise (e.g. 17.5 * 0.4) before ceil
    rounded = math.ceil(round(points, 6))
    remainder = rounded % 5
    if remainder == 0:
        return rounded
    return rounded + (5 - remainder)


def reward_breakdown(total_repetitions: int, session_repetitions: int) -> RewardBreakdown:
    """Level constants and difficulty factor for the current repetition"""
    level = UserLevel.from_total_repetitions(total_repetitions)
    return RewardBreakdown(
        level=level,
        base_points=level.base_points,
        max_points_per_rep=level.max_points_per_rep,
        difficulty_factor=difficulty_factor(session_repetitions, level),
    )


def calculate_reward(total_repetitions: int, session_repetitions: int) -> int:
    """
    Points for the current repetition.

    Args:
        total_repetitions: Lifetime repetitions from history (drives the level)
        session_repetitions: Repetitions completed so far in this session

    Returns:
        A positive multiple of 5, at least the level's base points
    """
    breakdown = reward_breakdown(total_repetitions, session_repetitions)
    return round_reward_points(breakdown.raw_points)


class RewardCalculator:
    """Reward lookups against the user's history"""

    def __init__(self, history: HistoryStore):
        self.history = history

    async def total_repetitions(self) -> int:
        records = await self.history.list_activity_records()
        return sum(record.repetitions for record in records)

    async def reward_for_repetition(self, session_repetitions: int) -> int:
        """Points for the current repetition, reading the lifetime total from history"""
        total = await self.total_repetitions()
        points = calculate_reward(total, session_repetitions)
        logger.debug(f"Rep {session_repetitions} at lifetime total {total}: {points} points")
        return points

    async def level_info(self) -> Dict[str, object]:
        """
        Current level summary

        Returns:
            {
                'level': str,
                'total_repetitions': int,
                'base_points': int,
                'repetitions_to_next_level': int or None
            }
        """
        total = await self.total_repetitions()
        level = UserLevel.from_total_repetitions(total)

        if level == UserLevel.BEGINNER:
            to_next = 50 - total
        elif level == UserLevel.INTERMEDIATE:
            to_next = 200 - total
        else:
            to_next = None

        return {
            "level": level.value,
            "total_repetitions": total,
            "base_points": level.base_points,
            "repetitions_to_next_level": to_next,
        }
