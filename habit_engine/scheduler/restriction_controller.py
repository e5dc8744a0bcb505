"""
Restriction Window Controller

Keeps one recurring restriction window scheduled on the device even when
the device scheduling API intermittently rejects requests.

    IDLE -> REQUESTING -> SCHEDULED
                       -> RETRY_PENDING -> REQUESTING -> SCHEDULED
                                                      -> FAILED_FINAL

Every request first clears whatever is scheduled (device and stored
window), so at most one window is ever monitored. The first rejection is
retried once:
- young history (< HISTORY_MATURITY_THRESHOLD records): the same-length
  window shifted to start RETRY_OFFSET_MINUTES from now
- mature history: a window at the user's most frequent exercise hour, unless
  that is the window that was already in place

A second rejection is terminal for the cycle and only logged; no window is
left active. The host retries on its next natural trigger (app launch, day
rollover). Device calls have no timeout: a call that never returns leaves
the controller in REQUESTING.
"""

import asyncio
import logging
from datetime import timedelta
from enum import Enum
from typing import Optional

from habit_engine.analysis.frequency import most_frequent_hour
from habit_engine.config import (
    BEST_TIME_WINDOW_HOURS,
    HISTORY_MATURITY_THRESHOLD,
    RETRY_OFFSET_MINUTES,
)
from habit_engine.exceptions import SchedulingRejectedError
from habit_engine.interfaces import Clock, DeviceScheduler, HistoryStore, SchedulingWindowRepository
from habit_engine.models import SchedulingWindow

logger = logging.getLogger(__name__)

# Retries allowed after the first rejection
MAX_RETRIES = 1


class SchedulingState(Enum):
    """Restriction controller state"""
    IDLE = "idle"
    REQUESTING = "requesting"
    SCHEDULED = "scheduled"
    RETRY_PENDING = "retry_pending"
    FAILED_FINAL = "failed_final"


class RestrictionController:
    """Drives the device restriction window through the retry protocol"""

    def __init__(
        self,
        device: DeviceScheduler,
        windows: SchedulingWindowRepository,
        history: HistoryStore,
        clock: Clock,
        maturity_threshold: int = HISTORY_MATURITY_THRESHOLD,
        retry_offset_minutes: int = RETRY_OFFSET_MINUTES,
        best_time_window_hours: int = BEST_TIME_WINDOW_HOURS,
    ):
        self.device = device
        self.windows = windows
        self.history = history
        self.clock = clock
        self.maturity_threshold = maturity_threshold
        self.retry_offset = timedelta(minutes=retry_offset_minutes)
        self.best_time_window_hours = best_time_window_hours

        self.state = SchedulingState.IDLE
        self.current_window: Optional[SchedulingWindow] = None
        self.last_error: Optional[SchedulingRejectedError] = None
        self._lock = asyncio.Lock()

    async def schedule(
        self,
        start_hour: int = 9,
        start_minute: int = 0,
        end_hour: int = 10,
        end_minute: int = 0
    ) -> SchedulingState:
        """
        Replace the current restriction window with a daily repeating one.

        Returns:
            SCHEDULED or FAILED_FINAL
        """
        window = SchedulingWindow(
            start_hour=start_hour,
            start_minute=start_minute,
            end_hour=end_hour,
            end_minute=end_minute,
            repeats=True,
        )
        async with self._lock:
            previous = await self.windows.current_window()
            return await self._schedule(window, attempt=0, previous=previous)

    async def clear(self) -> None:
        """Stop monitoring and forget the stored window"""
        async with self._lock:
            await self._clear()
            self.state = SchedulingState.IDLE

    async def _clear(self) -> None:
        await self.device.clear_all()
        await self.windows.delete_window()
        self.current_window = None
        logger.debug("Cleared all scheduled restrictions")

    async def _request(self, window: SchedulingWindow) -> bool:
        try:
            applied = await self.device.apply_window(window)
            active = await self.device.currently_active()
        except Exception as e:
            logger.warning(f"Device scheduler raised for window {window.label()}: {e}", exc_info=True)
            return False
        return applied and active

    async def _schedule(
        self,
        window: SchedulingWindow,
        attempt: int,
        previous: Optional[tuple[int, int]]
    ) -> SchedulingState:
        await self._clear()
        self.state = SchedulingState.REQUESTING

        if await self._request(window):
            await self.windows.save_window(window.start_hour, window.start_minute)
            self.current_window = window
            self.last_error = None
            self.state = SchedulingState.SCHEDULED
            logger.info(f"Scheduled restriction window {window.label()} (attempt {attempt + 1})")
            return self.state

        if attempt >= MAX_RETRIES:
            return self._fail(window, attempt)

        self.state = SchedulingState.RETRY_PENDING
        logger.warning(f"Restriction window {window.label()} rejected, retrying")
        return await self._retry(window, attempt + 1, previous)

    def _fail(self, window: SchedulingWindow, attempt: int) -> SchedulingState:
        # Logged on creation, kept for the host to report
        self.last_error = SchedulingRejectedError(
            f"Failed to schedule restriction window {window.label()} after {attempt + 1} attempts; "
            f"no window is active",
            window=window.label(),
            attempts=attempt + 1,
            operation="schedule_restriction",
        )
        self.state = SchedulingState.FAILED_FINAL
        return self.state

    async def _retry(
        self,
        window: SchedulingWindow,
        attempt: int,
        previous: Optional[tuple[int, int]]
    ) -> SchedulingState:
        records = await self.history.list_activity_records()

        if len(records) < self.maturity_threshold:
            shifted = SchedulingWindow.starting_at(
                self.clock.now() + self.retry_offset,
                window.duration,
            )
            logger.info(f"Young history ({len(records)} records), retrying at {shifted.label()}")
            return await self._schedule(shifted, attempt, previous)

        best_hour = most_frequent_hour(record.hour for record in records)
        if best_hour is None:
            logger.warning("Failed to predict best exercise time due to missing data")
            return self._fail(window, attempt)

        if previous == (best_hour, 0):
            logger.info(f"Best exercise time {best_hour:02d}:00 is already the scheduled window")
            return self._fail(window, attempt)

        best_window = SchedulingWindow(
            start_hour=best_hour,
            start_minute=0,
            end_hour=(best_hour + self.best_time_window_hours) % 24,
            end_minute=0,
        )
        logger.info(f"Retrying at best exercise time {best_window.label()}")
        return await self._schedule(best_window, attempt, previous)

    async def restriction_needed(self) -> bool:
        """
        Whether the restriction should be enforced when the window opens.

        Users who already logged repetitions today are let through.
        """
        today = self.clock.day_of(self.clock.now())
        records = await self.history.list_activity_records()
        done_today = sum(r.repetitions for r in records if r.date == today)
        if done_today > 0:
            logger.info(f"User already exercised today ({done_today} reps), skipping restriction")
            return False
        return True
