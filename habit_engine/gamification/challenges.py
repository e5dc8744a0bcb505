"""
Daily Challenge Engine

One repetition goal per calendar day:

    NO_CHALLENGE -> ACTIVE -> COMPLETED
                          +-> EXPIRED (day rolled over)

Target sizing:
- Average repetitions and points per historical day (defaults 20 / 100)
- With at least two days of history, a repetitions regression predicts the
  goal from today's averages; a positive prediction is clamped into
  [minimum_jumps, average_repetitions]
- Otherwise the goal is max(average_repetitions, minimum_jumps)
- The stored target overshoots that goal by 20%, rounded up

Expiry is evaluated lazily when the challenge is read. Day comparison uses
the full calendar date; comparing only the day of month would treat the
1st of two consecutive months as the same day.

All reads and writes go through one asyncio.Lock, and a new challenge
replaces the old one in a single repository call, so the store never holds
challenges for two different days.
"""

import asyncio
import logging
import math
from datetime import date
from enum import Enum
from typing import Optional

from habit_engine.analysis.regression import PredictionType, RegressionPredictor
from habit_engine.config import CHALLENGE_OVERSHOOT, MINIMUM_JUMPS
from habit_engine.interfaces import ChallengeRepository, Clock, HistoryStore
from habit_engine.models import DailyChallenge

logger = logging.getLogger(__name__)

# Used as average points when there is no history yet
DEFAULT_AVERAGE_POINTS = 100


class ChallengeState(Enum):
    """Today's challenge status"""
    NO_CHALLENGE = "no_challenge"
    ACTIVE = "active"
    COMPLETED = "completed"
    EXPIRED = "expired"


class ChallengeEngine:
    """Owns the daily challenge lifecycle"""

    def __init__(
        self,
        history: HistoryStore,
        repository: ChallengeRepository,
        predictor: RegressionPredictor,
        clock: Clock,
        minimum_jumps: int = MINIMUM_JUMPS,
        overshoot: float = CHALLENGE_OVERSHOOT,
    ):
        self.history = history
        self.repository = repository
        self.predictor = predictor
        self.clock = clock
        self.minimum_jumps = minimum_jumps
        self.overshoot = overshoot
        self._lock = asyncio.Lock()

    def _today(self) -> date:
        return self.clock.day_of(self.clock.now())

    async def compute_target(self) -> int:
        """
        Size today's repetition target from history.

        Returns:
            Positive target repetitions
        """
        records = await self.history.list_activity_records()
        day_count = len({record.date for record in records})

        if day_count:
            average_repetitions = sum(r.repetitions for r in records) // day_count
            average_points = sum(r.points for r in records) // day_count
        else:
            average_repetitions = self.minimum_jumps
            average_points = DEFAULT_AVERAGE_POINTS

        goal = max(average_repetitions, self.minimum_jumps)

        if day_count >= 2:
            model = await self.predictor.train(PredictionType.REPETITIONS)
            if model is None:
                logger.info("No repetitions model available, using average-based goal")
            else:
                feature = {"points": average_points, "hour": self.clock.now().hour}
                prediction = math.ceil(self.predictor.predict(model, feature, PredictionType.REPETITIONS))
                if prediction > 0:
                    goal = max(self.minimum_jumps, min(average_repetitions, prediction))
                logger.debug(
                    f"Predicted {prediction} reps (average {average_repetitions}), goal {goal}"
                )

        target = math.ceil(round(goal * self.overshoot, 6))
        logger.info(f"Daily target sized at {target} reps from {day_count} days of history")
        return target

    async def _create_challenge(self, today: date) -> DailyChallenge:
        target = await self.compute_target()
        challenge = DailyChallenge(target_repetitions=target, is_completed=False, date=today)
        await self.repository.replace(challenge)
        logger.info(f"Created daily challenge {challenge.id}: {target} reps for {today}")
        return challenge

    async def _rollover_locked(self, today: date) -> Optional[DailyChallenge]:
        stored = await self.repository.latest()
        if stored is None or stored.date == today:
            return None

        if not stored.is_completed:
            await self.repository.delete_all()
            logger.info(f"Deleted unfinished challenge from {stored.date}")
            return None

        logger.info(f"Challenge from {stored.date} closed as completed ({stored.target_repetitions} reps)")
        return stored

    async def rollover(self) -> Optional[DailyChallenge]:
        """
        Expire a challenge left over from a previous day.

        Unfinished stale challenges are deleted. A completed one is returned
        so the host can show the final result; it stays stored until the
        next challenge replaces it.

        Returns:
            The completed challenge of a previous day, or None
        """
        async with self._lock:
            return await self._rollover_locked(self._today())

    async def get_daily_challenge(self) -> DailyChallenge:
        """
        Today's challenge, creating it if needed.

        A challenge already completed today is reported as a zero-target
        completed challenge without sizing a new one. Repeated reads on the
        same day return the stored challenge unchanged.
        """
        async with self._lock:
            today = self._today()
            stored = await self.repository.latest()

            if stored is not None and stored.date == today:
                if stored.is_completed:
                    return DailyChallenge(target_repetitions=0, is_completed=True, date=today)
                return stored

            await self._rollover_locked(today)
            return await self._create_challenge(today)

    async def complete_today(self) -> Optional[DailyChallenge]:
        """
        Mark the stored challenge completed (session finished signal).

        Returns:
            The updated challenge, or None if there is nothing to complete
        """
        async with self._lock:
            stored = await self.repository.latest()
            if stored is None:
                logger.warning("Session finished but no daily challenge is stored")
                return None

            completed = stored.model_copy(update={"is_completed": True})
            await self.repository.upsert(completed)
            logger.info(f"Daily challenge {completed.id} completed")
            return completed

    async def state(self) -> ChallengeState:
        """Today's challenge state without creating or deleting anything"""
        async with self._lock:
            stored = await self.repository.latest()
            if stored is None:
                return ChallengeState.NO_CHALLENGE
            if stored.date != self._today():
                return ChallengeState.EXPIRED
            return ChallengeState.COMPLETED if stored.is_completed else ChallengeState.ACTIVE
