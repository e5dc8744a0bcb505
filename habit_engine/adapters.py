"""
Local collaborator implementations

Used by habit_engine.main for dry runs on a workstation and by the test
suite. The real device restriction and notification transports belong to
the host application.
"""
import logging
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from habit_engine.models import SchedulingWindow

logger = logging.getLogger(__name__)


class SystemClock:
    """Wall clock in a fixed timezone"""

    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def day_of(self, timestamp: datetime) -> date:
        # Full (year, month, day) key: day-of-month alone collides across months
        return timestamp.astimezone(self.tz).date() if timestamp.tzinfo else timestamp.date()


class LoggingDeviceScheduler:
    """
    Device scheduler that only records the requested window.

    Accepts every request unless constructed with a queue of outcomes, in which
    case each apply_window call pops the next outcome (True = accepted) until
    the queue runs out.
    """

    def __init__(self, outcomes: Optional[list[bool]] = None):
        self._outcomes = list(outcomes) if outcomes is not None else None
        self.active_window: Optional[SchedulingWindow] = None
        self.applied: list[SchedulingWindow] = []
        self.clear_count = 0

    async def apply_window(self, window: SchedulingWindow) -> bool:
        self.applied.append(window)
        accepted = self._outcomes.pop(0) if self._outcomes else True
        self.active_window = window if accepted else None
        logger.info(f"Device scheduler {'accepted' if accepted else 'rejected'} window {window.label()}")
        return accepted

    async def clear_all(self) -> None:
        self.clear_count += 1
        self.active_window = None
        logger.debug("Device scheduler cleared all windows")

    async def currently_active(self) -> bool:
        return self.active_window is not None


class LoggingNotificationService:
    """Notification service that keeps pending notifications in memory"""

    def __init__(self):
        self.pending: list[dict] = []

    async def schedule_at(self, hour: int, title: str, body: str, repeats: bool = True) -> None:
        self.pending.append({"hour": hour, "title": title, "body": body, "repeats": repeats})
        logger.info(f"Notification scheduled at {hour:02d}:00 (repeats={repeats})")

    async def clear_all(self) -> None:
        logger.debug(f"Removing {len(self.pending)} pending notifications")
        self.pending.clear()

    async def pending_count(self) -> int:
        return len(self.pending)
