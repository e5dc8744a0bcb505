"""End-to-end daily cycle over in-memory stores"""
import pytest

from habit_engine.adapters import LoggingDeviceScheduler, LoggingNotificationService
from habit_engine.db.memory import InMemoryHistoryStore
from habit_engine.exceptions import ConfigurationError
from habit_engine.gamification.challenges import ChallengeState
from habit_engine.main import daily_refresh
from habit_engine.models import DetectionEvent
from habit_engine.scheduler.restriction_controller import SchedulingState
from habit_engine.services.container import ServiceContainer, build_in_memory_container

JUMP = DetectionEvent(label="Jumping Jacks", confidence=0.95)


@pytest.mark.asyncio
async def test_daily_refresh_with_history(clock, two_day_history):
    """Test one refresh sizes the challenge, schedules notifications and the restriction"""
    notifications = LoggingNotificationService()
    container = build_in_memory_container(
        history=InMemoryHistoryStore(two_day_history),
        clock=clock,
        notifications=notifications,
    )

    summary = await daily_refresh(container)

    assert 24 <= summary["challenge"].target_repetitions <= 27
    assert summary["notification_hours"] == [9, 12, 16, 20]
    assert await notifications.pending_count() == 4
    assert summary["restriction_state"] == SchedulingState.SCHEDULED
    assert await container.windows.current_window() == (9, 0)
    assert summary["level"]["level"] == "beginner"
    best_hour = summary["predicted_best_hour"]
    assert best_hour is None or 0 <= best_hour <= 23


@pytest.mark.asyncio
async def test_daily_refresh_new_user(clock):
    """Test a user without history gets the default schedule"""
    container = build_in_memory_container(clock=clock)

    summary = await daily_refresh(container, window="7:30-8:15")

    assert summary["challenge"].target_repetitions == 24
    assert summary["notification_hours"] == [8, 10, 12, 16, 20]
    assert await container.windows.current_window() == (7, 30)
    assert summary["predicted_best_hour"] is None


@pytest.mark.asyncio
async def test_daily_refresh_out_of_range_window(clock):
    """Test an out-of-range window fails before any state is written"""
    container = build_in_memory_container(clock=clock)

    with pytest.raises(ConfigurationError) as exc_info:
        await daily_refresh(container, window="25:99-26:00")

    assert exc_info.value.config_key == "DEFAULT_WINDOW"
    assert await container.challenges.count() == 0
    assert await container.notifications.pending_count() == 0
    assert await container.windows.current_window() is None

@pytest.mark.asyncio
async def test_daily_refresh_rejected_restriction(clock):
    """Test a device that keeps rejecting leaves no restriction behind"""
    device = LoggingDeviceScheduler(outcomes=[False, False])
    container = build_in_memory_container(clock=clock, device=device)

    summary = await daily_refresh(container)

    assert summary["restriction_state"] == SchedulingState.FAILED_FINAL
    assert await container.windows.current_window() is None
    # Challenge and notifications are unaffected
    assert summary["challenge"].target_repetitions == 24
    assert await container.notifications.pending_count() == 5


@pytest.mark.asyncio
async def test_session_to_next_day(clock, two_day_history, no_model_trainer):
    """Test exercise completes the challenge, is logged, and rolls over the next day"""
    history = InMemoryHistoryStore(two_day_history)
    container = build_in_memory_container(history=history, clock=clock)
    container.predictor.trainer = no_model_trainer

    session = container.new_session()
    challenge = await session.start()
    assert challenge.target_repetitions == 27

    for _ in range(challenge.target_repetitions):
        session.handle_detection(JUMP)
    record = await session.finish()
    await history.append(record)

    assert await container.challenge_engine.state() == ChallengeState.COMPLETED
    assert await container.restriction_controller.restriction_needed() is False
    assert await container.reward_calculator.total_repetitions() == 45 + 27

    clock.advance(days=1)
    summary = await daily_refresh(container)

    assert summary["challenge"].date != challenge.date
    assert summary["challenge"].is_completed is False
    assert await container.challenge_engine.state() == ChallengeState.ACTIVE
    assert await container.challenges.count() == 1


def test_container_components_are_shared(clock):
    """Test lazy components are built once per container"""
    container = build_in_memory_container(clock=clock)

    assert isinstance(container, ServiceContainer)
    assert container.challenge_engine is container.challenge_engine
    assert container.challenge_engine.predictor is container.predictor
    assert container.restriction_controller.history is container.history
