"""Restriction window models"""
from datetime import datetime, timedelta
from pydantic import BaseModel, Field


class SchedulingWindow(BaseModel):
    """Recurring daily interval during which device restriction is enforced"""
    start_hour: int = Field(ge=0, le=23)
    start_minute: int = Field(ge=0, le=59)
    end_hour: int = Field(ge=0, le=23)
    end_minute: int = Field(ge=0, le=59)
    repeats: bool = True

    @property
    def duration(self) -> timedelta:
        """Length of the window, wrapping past midnight"""
        start = self.start_hour * 60 + self.start_minute
        end = self.end_hour * 60 + self.end_minute
        return timedelta(minutes=(end - start) % (24 * 60))

    @classmethod
    def starting_at(cls, start: datetime, duration: timedelta, repeats: bool = True) -> "SchedulingWindow":
        """Build a window of the given duration starting at a wall-clock time"""
        end = start + duration
        return cls(
            start_hour=start.hour,
            start_minute=start.minute,
            end_hour=end.hour,
            end_minute=end.minute,
            repeats=repeats,
        )

    def label(self) -> str:
        return f"{self.start_hour:02d}:{self.start_minute:02d}-{self.end_hour:02d}:{self.end_minute:02d}"
