"""
In-memory stores

Process-local implementations of the collaborator repositories. Nothing is
persisted; used for local runs and tests. Each table is guarded by its own
lock so a replace is never interleaved with another writer.
"""

import asyncio
import logging
from typing import Iterable, Optional

from habit_engine.models import ActivityRecord, DailyChallenge

logger = logging.getLogger(__name__)


class InMemoryHistoryStore:
    """Append-only activity log"""

    def __init__(self, records: Optional[Iterable[ActivityRecord]] = None):
        self._records: list[ActivityRecord] = list(records or [])

    async def list_activity_records(self) -> list[ActivityRecord]:
        return list(self._records)

    async def append(self, record: ActivityRecord) -> None:
        self._records.append(record)
        logger.debug(f"Appended activity record for {record.date} ({record.repetitions} reps)")


class InMemoryChallengeRepository:
    """Daily challenge table"""

    def __init__(self):
        self._challenges: dict[str, DailyChallenge] = {}
        self._lock = asyncio.Lock()

    async def upsert(self, challenge: DailyChallenge) -> None:
        async with self._lock:
            self._challenges[challenge.id] = challenge.model_copy()
        logger.debug(f"Saved challenge {challenge.id} for {challenge.date}")

    async def delete_all(self) -> None:
        async with self._lock:
            self._challenges.clear()

    async def latest(self) -> Optional[DailyChallenge]:
        async with self._lock:
            if not self._challenges:
                return None
            return max(self._challenges.values(), key=lambda c: c.date).model_copy()

    async def replace(self, challenge: DailyChallenge) -> None:
        async with self._lock:
            self._challenges = {challenge.id: challenge.model_copy()}
        logger.debug(f"Replaced stored challenges with {challenge.id} for {challenge.date}")

    async def count(self) -> int:
        async with self._lock:
            return len(self._challenges)


class InMemorySchedulingWindowRepository:
    """Current restriction window table"""

    def __init__(self):
        self._window: Optional[tuple[int, int]] = None
        self._lock = asyncio.Lock()

    async def save_window(self, start_hour: int, start_minute: int) -> None:
        async with self._lock:
            self._window = (start_hour, start_minute)

    async def current_window(self) -> Optional[tuple[int, int]]:
        async with self._lock:
            return self._window

    async def delete_window(self) -> None:
        async with self._lock:
            self._window = None
