"""Device restriction windows and exercise reminder notifications"""
from habit_engine.scheduler.restriction_controller import RestrictionController, SchedulingState
from habit_engine.scheduler.notification_scheduler import NotificationScheduler

__all__ = [
    "RestrictionController",
    "SchedulingState",
    "NotificationScheduler",
]
