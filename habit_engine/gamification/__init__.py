"""
Gamification

Per-repetition rewards and the daily repetition challenge.
"""
from habit_engine.gamification.rewards import RewardCalculator, calculate_reward
from habit_engine.gamification.challenges import ChallengeEngine, ChallengeState

__all__ = [
    "RewardCalculator",
    "calculate_reward",
    "ChallengeEngine",
    "ChallengeState",
]
