"""
Collaborator interfaces

The engine owns no storage format, device API or notification transport.
These protocols are the only contracts it relies on; concrete
implementations live in habit_engine.db and habit_engine.adapters.
"""
from datetime import date, datetime
from typing import Any, Optional, Protocol, Sequence

from habit_engine.models import ActivityRecord, DailyChallenge, SchedulingWindow


class HistoryStore(Protocol):
    """Append-only activity log. Read-only to the engine."""

    async def list_activity_records(self) -> list[ActivityRecord]: ...


class ChallengeRepository(Protocol):
    """Single-row daily challenge table"""

    async def upsert(self, challenge: DailyChallenge) -> None: ...

    async def delete_all(self) -> None: ...

    async def latest(self) -> Optional[DailyChallenge]:
        """Most recent challenge by date, or None"""
        ...

    async def replace(self, challenge: DailyChallenge) -> None:
        """Delete every stored challenge and insert this one in one transaction"""
        ...


class SchedulingWindowRepository(Protocol):
    """Single-row "current restriction window" table"""

    async def save_window(self, start_hour: int, start_minute: int) -> None: ...

    async def current_window(self) -> Optional[tuple[int, int]]: ...

    async def delete_window(self) -> None: ...


class DeviceScheduler(Protocol):
    """Device-level restriction scheduling API"""

    async def apply_window(self, window: SchedulingWindow) -> bool: ...

    async def clear_all(self) -> None:
        """Stop monitoring and drop every scheduled window"""
        ...

    async def currently_active(self) -> bool: ...


class NotificationService(Protocol):
    """Local notification delivery"""

    async def schedule_at(self, hour: int, title: str, body: str, repeats: bool = True) -> None: ...

    async def clear_all(self) -> None: ...

    async def pending_count(self) -> int: ...


class RegressionTrainer(Protocol):
    """Trainable regression backend"""

    def train(
        self,
        feature_names: Sequence[str],
        rows: Sequence[Sequence[float]],
        targets: Sequence[float],
    ) -> Optional[Any]: ...

    def predict(self, model: Any, feature: dict[str, float]) -> float: ...


class Clock(Protocol):
    """Wall clock"""

    def now(self) -> datetime: ...

    def day_of(self, timestamp: datetime) -> date:
        """Calendar day key (year, month, day) for a timestamp"""
        ...
