"""Domain models"""
from habit_engine.models.activity import ActivityRecord, DetectionEvent
from habit_engine.models.challenge import DailyChallenge
from habit_engine.models.level import UserLevel
from habit_engine.models.schedule import SchedulingWindow

__all__ = [
    "ActivityRecord",
    "DetectionEvent",
    "DailyChallenge",
    "UserLevel",
    "SchedulingWindow",
]
