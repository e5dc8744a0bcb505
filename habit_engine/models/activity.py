"""Activity history models"""
from datetime import date as dt_date
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ActivityRecord(BaseModel):
    """One logged exercise session. Immutable once written."""
    model_config = ConfigDict(frozen=True)

    date: dt_date
    hour: int = Field(ge=0, le=23, description="Hour of day the session started")
    repetitions: int = Field(ge=0)
    points: int = Field(ge=0)


class DetectionEvent(BaseModel):
    """Raw classifier output for one window of camera frames"""
    label: str
    confidence: float

    @field_validator('confidence')
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        """Ensure confidence is a probability"""
        if v < 0.0 or v > 1.0:
            raise ValueError(f"Invalid confidence: {v}. Must be between 0 and 1")
        return v
