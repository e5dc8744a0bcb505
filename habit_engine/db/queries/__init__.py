"""
PostgreSQL repositories

Module organization:
- activity.py: activity history (read side plus append for session logging)
- challenges.py: single-row daily challenge table
- schedule.py: single-row current restriction window
"""

from habit_engine.db.queries.activity import PostgresHistoryStore
from habit_engine.db.queries.challenges import PostgresChallengeRepository
from habit_engine.db.queries.schedule import PostgresSchedulingWindowRepository

__all__ = [
    "PostgresHistoryStore",
    "PostgresChallengeRepository",
    "PostgresSchedulingWindowRepository",
]
