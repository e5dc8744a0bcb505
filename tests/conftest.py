"""Global test fixtures and utilities for habit-engine tests"""
import pytest
from datetime import date, datetime, timedelta, timezone

from habit_engine.adapters import LoggingDeviceScheduler, LoggingNotificationService
from habit_engine.analysis.regression import RegressionPredictor
from habit_engine.db.memory import (
    InMemoryChallengeRepository,
    InMemoryHistoryStore,
    InMemorySchedulingWindowRepository,
)
from habit_engine.gamification.challenges import ChallengeEngine
from habit_engine.models import ActivityRecord


class FixedClock:
    """Clock pinned to a settable instant"""

    def __init__(self, now: datetime):
        self.current = now

    def now(self) -> datetime:
        return self.current

    def day_of(self, timestamp: datetime) -> date:
        return timestamp.date()

    def advance(self, **kwargs) -> None:
        self.current = self.current + timedelta(**kwargs)


class NoModelTrainer:
    """Trainer that never produces a model"""

    def train(self, feature_names, rows, targets):
        return None

    def predict(self, model, feature):
        raise AssertionError("predict called without a model")


class FailingTrainer:
    """Trainer whose fit raises"""

    def train(self, feature_names, rows, targets):
        raise RuntimeError("trainer exploded")

    def predict(self, model, feature):
        raise RuntimeError("trainer exploded")


# ============================================================================
# Clock Fixtures
# ============================================================================

@pytest.fixture
def frozen_now():
    """Standard 'now' for tests: 2024-01-15 11:30 UTC"""
    return datetime(2024, 1, 15, 11, 30, tzinfo=timezone.utc)


@pytest.fixture
def clock(frozen_now):
    """Clock fixed at frozen_now"""
    return FixedClock(frozen_now)


# ============================================================================
# History Fixtures
# ============================================================================

@pytest.fixture
def two_day_history():
    """Two sessions on consecutive days (45 lifetime repetitions)"""
    return [
        ActivityRecord(date=date(2024, 1, 13), hour=9, repetitions=20, points=100),
        ActivityRecord(date=date(2024, 1, 14), hour=9, repetitions=25, points=120),
    ]


@pytest.fixture
def mature_history():
    """Twelve sessions, most of them at 18:00"""
    records = []
    for day in range(1, 13):
        hour = 18 if day % 3 else 7
        records.append(
            ActivityRecord(date=date(2024, 1, day), hour=hour, repetitions=20 + day, points=100 + day * 5)
        )
    return records


@pytest.fixture
def history_store():
    """Empty in-memory history"""
    return InMemoryHistoryStore()


# ============================================================================
# Repository & Device Fixtures
# ============================================================================

@pytest.fixture
def challenge_repository():
    return InMemoryChallengeRepository()


@pytest.fixture
def window_repository():
    return InMemorySchedulingWindowRepository()


@pytest.fixture
def device():
    """Device scheduler accepting every request"""
    return LoggingDeviceScheduler()


@pytest.fixture
def notifications():
    return LoggingNotificationService()


# ============================================================================
# Engine Factories
# ============================================================================

@pytest.fixture
def challenge_engine_factory(challenge_repository, clock):
    """Build a ChallengeEngine over a given history and trainer"""
    def _create(records=None, trainer=None, repository=None):
        history = InMemoryHistoryStore(records or [])
        predictor = RegressionPredictor(history, trainer=trainer)
        return ChallengeEngine(history, repository or challenge_repository, predictor, clock)
    return _create


# ============================================================================
# Trainer Fixtures
# ============================================================================

@pytest.fixture
def no_model_trainer():
    return NoModelTrainer()


@pytest.fixture
def failing_trainer():
    return FailingTrainer()
