"""User level tiers"""
from enum import Enum


class UserLevel(str, Enum):
    """
    Tier derived from lifetime repetitions. Never stored.

    - beginner: fewer than 50 repetitions
    - intermediate: 50 to 199
    - experienced: 200 and above
    """
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERIENCED = "experienced"

    @classmethod
    def from_total_repetitions(cls, total_repetitions: int) -> "UserLevel":
        if total_repetitions < 50:
            return cls.BEGINNER
        if total_repetitions < 200:
            return cls.INTERMEDIATE
        return cls.EXPERIENCED

    @property
    def base_points(self) -> int:
        return _LEVEL_CONSTANTS[self][0]

    @property
    def max_points_per_rep(self) -> float:
        return _LEVEL_CONSTANTS[self][1]

    @property
    def value_reward(self) -> float:
        """Difficulty sensitivity per repetition in the current session"""
        return _LEVEL_CONSTANTS[self][2]


# level -> (base points, max points per repetition, value reward)
_LEVEL_CONSTANTS = {
    UserLevel.BEGINNER: (20, 20.0, 0.2),
    UserLevel.INTERMEDIATE: (15, 17.5, 0.4),
    # Experienced users earn almost no per-repetition difficulty bonus
    UserLevel.EXPERIENCED: (10, 15.0, 0.001),
}
