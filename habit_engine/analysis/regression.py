"""
Regression Predictor

Forecasts a single scalar from the activity history:
- REPETITIONS: features (points, hour) -> repetitions
- TIME: features (points, repetitions) -> hour of day

The model is retrained from the full history on every request. Having no
model is an expected outcome (too little data, degenerate data, trainer
error); callers fall back to their own heuristic when train() returns None
or predict() returns 0.0.

Training runs on a worker thread via asyncio.to_thread and resumes on the
event loop, so callers awaiting train() see the result in order with every
other coroutine scheduled on the loop.
"""

import asyncio
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from habit_engine.interfaces import HistoryStore, RegressionTrainer
from habit_engine.models import ActivityRecord

logger = logging.getLogger(__name__)


class PredictionType(Enum):
    """What the regression forecasts"""
    REPETITIONS = "repetitions"
    TIME = "time"


FEATURES = {
    PredictionType.REPETITIONS: ("points", "hour"),
    PredictionType.TIME: ("points", "repetitions"),
}

TARGETS = {
    PredictionType.REPETITIONS: "repetitions",
    PredictionType.TIME: "hour",
}


@dataclass(frozen=True)
class LinearModel:
    """Fitted ordinary least squares model"""
    feature_names: Tuple[str, ...]
    coefficients: Tuple[float, ...]
    intercept: float


def build_training_table(
    records: Sequence[ActivityRecord],
    prediction_type: PredictionType
) -> Tuple[Tuple[str, ...], List[List[float]], List[float]]:
    """
    Build a feature/target table from history.

    Returns:
        (feature_names, rows, targets), one row per record

    Example:
        >>> rec = ActivityRecord(date=date(2024, 1, 1), hour=9, repetitions=20, points=100)
        >>> build_training_table([rec], PredictionType.REPETITIONS)
        (('points', 'hour'), [[100.0, 9.0]], [20.0])
    """
    feature_names = FEATURES[prediction_type]
    target_name = TARGETS[prediction_type]

    rows = [[float(getattr(record, name)) for name in feature_names] for record in records]
    targets = [float(getattr(record, target_name)) for record in records]
    return feature_names, rows, targets


class LinearRegressionTrainer:
    """Multivariate linear regression with an intercept, solved with numpy least squares"""

    def train(
        self,
        feature_names: Sequence[str],
        rows: Sequence[Sequence[float]],
        targets: Sequence[float],
    ) -> Optional[LinearModel]:
        if not rows or len(rows) != len(targets):
            logger.debug("Not enough rows to fit a linear model")
            return None

        x = np.asarray(rows, dtype=float)
        y = np.asarray(targets, dtype=float)
        design = np.column_stack([x, np.ones(len(x))])

        solution, _residuals, _rank, _sv = np.linalg.lstsq(design, y, rcond=None)
        if not np.all(np.isfinite(solution)):
            logger.warning("Linear fit produced non-finite coefficients")
            return None

        return LinearModel(
            feature_names=tuple(feature_names),
            coefficients=tuple(float(c) for c in solution[:-1]),
            intercept=float(solution[-1]),
        )

    def predict(self, model: LinearModel, feature: dict[str, float]) -> float:
        values = np.asarray([feature[name] for name in model.feature_names], dtype=float)
        return float(values @ np.asarray(model.coefficients) + model.intercept)


class RegressionPredictor:
    """Trains on demand from the History Store and predicts a single value"""

    def __init__(self, history: HistoryStore, trainer: Optional[RegressionTrainer] = None):
        self.history = history
        self.trainer = trainer or LinearRegressionTrainer()

    async def train(self, prediction_type: PredictionType) -> Optional[Any]:
        """
        Train a model for the prediction type from the full history.

        Returns:
            Fitted model, or None if the table could not be built or the
            trainer failed. Never raises for training problems.
        """
        records = await self.history.list_activity_records()

        try:
            feature_names, rows, targets = build_training_table(records, prediction_type)
            model = await asyncio.to_thread(self.trainer.train, feature_names, rows, targets)
        except Exception as e:
            logger.warning(f"Training {prediction_type.value} model failed: {e}", exc_info=True)
            return None

        if model is None:
            logger.info(f"No {prediction_type.value} model trained from {len(records)} records")
        else:
            logger.debug(f"Trained {prediction_type.value} model from {len(records)} records")
        return model

    def predict(self, model: Any, feature: dict[str, float], prediction_type: PredictionType) -> float:
        """
        Predict one value. Any failure yields 0.0 so the caller can apply its fallback.

        Args:
            model: A model returned by train()
            feature: Feature values keyed by name; only the features of
                `prediction_type` are used
            prediction_type: Which forecast the model was trained for
        """
        try:
            selected = {name: float(feature[name]) for name in FEATURES[prediction_type]}
            prediction = float(self.trainer.predict(model, selected))
        except Exception as e:
            logger.warning(f"Error making {prediction_type.value} prediction: {e}")
            return 0.0

        if not math.isfinite(prediction):
            logger.warning(f"Non-finite {prediction_type.value} prediction discarded")
            return 0.0
        return prediction

    async def predict_best_hour(self) -> Optional[int]:
        """
        Forecast the hour the user is most likely to exercise, from their
        average points and repetitions per session.
        Reported to the host in the daily refresh summary.

        Returns:
            Hour 0-23, or None without a usable model
        """
        records = await self.history.list_activity_records()
        if not records:
            return None

        model = await self.train(PredictionType.TIME)
        if model is None:
            return None

        feature = {
            "points": sum(r.points for r in records) / len(records),
            "repetitions": sum(r.repetitions for r in records) / len(records),
        }
        prediction = self.predict(model, feature, PredictionType.TIME)
        if prediction <= 0:
            return None
        return min(23, max(0, round(prediction)))
