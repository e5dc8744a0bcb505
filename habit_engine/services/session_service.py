"""
Exercise session tracking

Turns classifier detection events into counted repetitions and points, and
produces the activity record for the finished session. Completing the
daily target marks today's challenge as completed.
"""

import logging
from typing import Optional

from habit_engine.config import DETECTION_CONFIDENCE, REPETITION_LABEL
from habit_engine.gamification.challenges import ChallengeEngine
from habit_engine.gamification.rewards import RewardCalculator, calculate_reward
from habit_engine.interfaces import Clock
from habit_engine.models import ActivityRecord, DailyChallenge, DetectionEvent

logger = logging.getLogger(__name__)


class ExerciseSession:
    """One camera session of repetitions"""

    def __init__(
        self,
        rewards: RewardCalculator,
        challenges: ChallengeEngine,
        clock: Clock,
        label: str = REPETITION_LABEL,
        confidence_threshold: float = DETECTION_CONFIDENCE,
    ):
        self.rewards = rewards
        self.challenges = challenges
        self.clock = clock
        self.label = label
        self.confidence_threshold = confidence_threshold

        self.started_at = clock.now()
        self.repetitions = 0
        self.points = 0
        self.lifetime_repetitions = 0
        self.challenge: Optional[DailyChallenge] = None

    async def start(self) -> DailyChallenge:
        """Load today's challenge and the lifetime total used for rewards"""
        self.started_at = self.clock.now()
        self.lifetime_repetitions = await self.rewards.total_repetitions()
        self.challenge = await self.challenges.get_daily_challenge()
        logger.info(
            f"Session started: target {self.challenge.target_repetitions} reps, "
            f"lifetime {self.lifetime_repetitions} reps"
        )
        return self.challenge

    def is_repetition(self, event: DetectionEvent) -> bool:
        return event.label == self.label and event.confidence >= self.confidence_threshold

    def handle_detection(self, event: DetectionEvent) -> int:
        """
        Count a detection event.

        Returns:
            Points awarded for this event (0 when it is not a repetition)
        """
        if not self.is_repetition(event):
            return 0

        self.repetitions += 1
        awarded = calculate_reward(self.lifetime_repetitions, self.repetitions)
        self.points += awarded
        logger.debug(f"Repetition {self.repetitions}: +{awarded} points")
        return awarded

    @property
    def target_reached(self) -> bool:
        if self.challenge is None or self.challenge.is_completed:
            return False
        return self.repetitions >= self.challenge.target_repetitions

    async def finish(self) -> ActivityRecord:
        """
        End the session.

        Returns:
            The activity record to append to history
        """
        if self.target_reached:
            await self.challenges.complete_today()

        record = ActivityRecord(
            date=self.clock.day_of(self.started_at),
            hour=self.started_at.hour,
            repetitions=self.repetitions,
            points=self.points,
        )
        logger.info(f"Session finished: {record.repetitions} reps, {record.points} points")
        return record
