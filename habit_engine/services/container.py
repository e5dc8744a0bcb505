"""
Service Container

Holds the collaborators of one user's engine and builds the components on
first access. Each container is independent; nothing is shared at module
level.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from habit_engine.adapters import LoggingDeviceScheduler, LoggingNotificationService, SystemClock
from habit_engine.db.connection import Database
from habit_engine.db.memory import (
    InMemoryChallengeRepository,
    InMemoryHistoryStore,
    InMemorySchedulingWindowRepository,
)
from habit_engine.interfaces import (
    ChallengeRepository,
    Clock,
    DeviceScheduler,
    HistoryStore,
    NotificationService,
    SchedulingWindowRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """
    Dependency container for the engine components.

    Collaborators are injected; components are lazy-loaded via properties so
    every component of one container shares the same stores and clock.
    """

    # Collaborators (injected)
    history: HistoryStore
    challenges: ChallengeRepository
    windows: SchedulingWindowRepository
    device: DeviceScheduler
    notifications: NotificationService
    clock: Clock

    # Components (lazy-loaded via properties)
    _predictor: Optional[object] = field(default=None, init=False, repr=False)
    _reward_calculator: Optional[object] = field(default=None, init=False, repr=False)
    _challenge_engine: Optional[object] = field(default=None, init=False, repr=False)
    _restriction_controller: Optional[object] = field(default=None, init=False, repr=False)
    _notification_scheduler: Optional[object] = field(default=None, init=False, repr=False)

    @property
    def predictor(self):
        """Get RegressionPredictor instance (lazy-loaded)"""
        if self._predictor is None:
            from habit_engine.analysis.regression import RegressionPredictor
            self._predictor = RegressionPredictor(self.history)
            logger.debug("RegressionPredictor instantiated")
        return self._predictor

    @property
    def reward_calculator(self):
        """Get RewardCalculator instance (lazy-loaded)"""
        if self._reward_calculator is None:
            from habit_engine.gamification.rewards import RewardCalculator
            self._reward_calculator = RewardCalculator(self.history)
            logger.debug("RewardCalculator instantiated")
        return self._reward_calculator

    @property
    def challenge_engine(self):
        """Get ChallengeEngine instance (lazy-loaded)"""
        if self._challenge_engine is None:
            from habit_engine.gamification.challenges import ChallengeEngine
            self._challenge_engine = ChallengeEngine(
                self.history,
                self.challenges,
                self.predictor,
                self.clock
            )
            logger.debug("ChallengeEngine instantiated")
        return self._challenge_engine

    @property
    def restriction_controller(self):
        """Get RestrictionController instance (lazy-loaded)"""
        if self._restriction_controller is None:
            from habit_engine.scheduler.restriction_controller import RestrictionController
            self._restriction_controller = RestrictionController(
                self.device,
                self.windows,
                self.history,
                self.clock
            )
            logger.debug("RestrictionController instantiated")
        return self._restriction_controller

    @property
    def notification_scheduler(self):
        """Get NotificationScheduler instance (lazy-loaded)"""
        if self._notification_scheduler is None:
            from habit_engine.scheduler.notification_scheduler import NotificationScheduler
            self._notification_scheduler = NotificationScheduler(self.history, self.notifications)
            logger.debug("NotificationScheduler instantiated")
        return self._notification_scheduler

    def new_session(self):
        """Start tracking a new exercise session"""
        from habit_engine.services.session_service import ExerciseSession
        return ExerciseSession(self.reward_calculator, self.challenge_engine, self.clock)


def build_in_memory_container(
    history: Optional[InMemoryHistoryStore] = None,
    clock: Optional[Clock] = None,
    device: Optional[DeviceScheduler] = None,
    notifications: Optional[NotificationService] = None,
) -> ServiceContainer:
    """Container over process-local stores and logging device adapters"""
    return ServiceContainer(
        history=history or InMemoryHistoryStore(),
        challenges=InMemoryChallengeRepository(),
        windows=InMemorySchedulingWindowRepository(),
        device=device or LoggingDeviceScheduler(),
        notifications=notifications or LoggingNotificationService(),
        clock=clock or SystemClock(),
    )


def build_postgres_container(
    db: Database,
    clock: Optional[Clock] = None,
    device: Optional[DeviceScheduler] = None,
    notifications: Optional[NotificationService] = None,
) -> ServiceContainer:
    """Container over PostgreSQL repositories sharing one connection pool"""
    from habit_engine.db.queries import (
        PostgresChallengeRepository,
        PostgresHistoryStore,
        PostgresSchedulingWindowRepository,
    )

    return ServiceContainer(
        history=PostgresHistoryStore(db),
        challenges=PostgresChallengeRepository(db),
        windows=PostgresSchedulingWindowRepository(db),
        device=device or LoggingDeviceScheduler(),
        notifications=notifications or LoggingNotificationService(),
        clock=clock or SystemClock(),
    )
