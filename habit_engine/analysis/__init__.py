"""History analysis: hour-of-day frequencies and regression forecasts"""
from habit_engine.analysis.frequency import select_hours, most_frequent_hour
from habit_engine.analysis.regression import (
    PredictionType,
    RegressionPredictor,
    LinearRegressionTrainer,
)

__all__ = [
    "select_hours",
    "most_frequent_hour",
    "PredictionType",
    "RegressionPredictor",
    "LinearRegressionTrainer",
]
