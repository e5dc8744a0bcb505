"""Daily challenge models"""
from datetime import date as dt_date
from pydantic import BaseModel, Field, model_validator
from uuid import uuid4


class DailyChallenge(BaseModel):
    """
    The day's repetition goal and its completion state.

    A zero target is only valid for the completed "done for today" view
    returned by the challenge engine; stored challenges are always positive.
    """
    id: str = Field(default_factory=lambda: str(uuid4()))
    target_repetitions: int = Field(ge=0)
    is_completed: bool = False
    date: dt_date

    @model_validator(mode='after')
    def validate_target(self) -> "DailyChallenge":
        """Only completed challenges may carry a zero target"""
        if self.target_repetitions == 0 and not self.is_completed:
            raise ValueError("An active challenge must have a positive target")
        return self
