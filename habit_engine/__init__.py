"""Habit engine: exercise habit analysis, rewards, challenges and scheduling"""

__version__ = "0.1.0"
