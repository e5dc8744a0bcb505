"""Exercise reminder notifications at the user's habitual hours"""
import asyncio
import logging
import random
from typing import Optional, Sequence

from habit_engine.analysis.frequency import select_hours
from habit_engine.config import DEFAULT_NOTIFICATION_HOURS, MAX_NOTIFICATION_COUNT, MIN_HOUR_GAP
from habit_engine.interfaces import HistoryStore, NotificationService

logger = logging.getLogger(__name__)

MOTIVATIONAL_TITLES = [
    "Time to move! 🏃",
    "Your daily challenge is waiting 💪",
    "Quick break?",
    "Keep the streak alive 🔥",
]

MOTIVATIONAL_BODIES = [
    "A few jumping jacks now unlock your apps for the rest of the day.",
    "Two minutes of movement is all it takes.",
    "You usually exercise around now. Let's go!",
    "Every repetition counts toward today's goal.",
]


class NotificationScheduler:
    """Derives notification hours from history and keeps them scheduled"""

    def __init__(
        self,
        history: HistoryStore,
        notifications: NotificationService,
        default_hours: Sequence[int] = DEFAULT_NOTIFICATION_HOURS,
        min_gap: int = MIN_HOUR_GAP,
        max_count: int = MAX_NOTIFICATION_COUNT,
        rng: Optional[random.Random] = None,
    ):
        self.history = history
        self.notifications = notifications
        self.default_hours = list(default_hours)
        self.min_gap = min_gap
        self.max_count = max_count
        self.rng = rng or random.Random()
        self._lock = asyncio.Lock()

    async def predict_notification_hours(self) -> list[int]:
        """
        Best notification hours from historical session hours.

        Returns the default hours when there is no usable history.
        """
        records = await self.history.list_activity_records()
        return select_hours(
            (record.hour for record in records),
            self.default_hours,
            min_gap=self.min_gap,
            max_count=self.max_count,
        )

    async def reschedule(self) -> list[int]:
        """
        Replace all pending notifications with one daily notification per predicted hour.

        Returns:
            The hours that were scheduled
        """
        async with self._lock:
            await self.notifications.clear_all()
            hours = await self.predict_notification_hours()

            for hour in hours:
                await self.notifications.schedule_at(
                    hour,
                    self.rng.choice(MOTIVATIONAL_TITLES),
                    self.rng.choice(MOTIVATIONAL_BODIES),
                    repeats=True,
                )

            logger.info(f"Scheduled {len(hours)} daily notifications at hours {hours}")
            return hours

    async def pending_count(self) -> int:
        return await self.notifications.pending_count()
