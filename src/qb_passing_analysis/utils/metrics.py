"""
Metrics utilities for QB passing analysis.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
import logging
from typing import Dict, Tuple, cast

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score
from sklearn.model_selection import train_test_split

from qb_passing_analysis.exceptions import (
    EmptyEvaluationSetError,
    InsufficientDataError,
    UndefinedMetricError,
)

logger = logging.getLogger(__name__)

METRIC_ORDER = ("rmse", "rsq", "mae")


@dataclass(frozen=True)
class EvaluationResult:
    """Accuracy of one fitted model on its held-out partition."""
    rmse: float
    rsq:  float
    mae:  float
    n:    int = 0

    def as_dict(self) -> Dict[str, float]:
        return {k: v for k, v in asdict(self).items() if k in METRIC_ORDER}

    def to_table(self) -> pd.DataFrame:
        """Tidy table with one row per metric and an ``estimate`` column."""
        return pd.DataFrame({
            "metric":    list(METRIC_ORDER),
            "estimator": ["standard"] * len(METRIC_ORDER),
            "estimate":  [getattr(self, m) for m in METRIC_ORDER],
        })


class RegressionEvaluator:
    """Compute regression accuracy metrics from (predicted, actual) pairs."""

    @staticmethod
    def _pairs(predicted: ArrayLike, actual: ArrayLike) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
        pred = np.asarray(predicted, dtype=float).ravel()
        act  = np.asarray(actual, dtype=float).ravel()
        if pred.size == 0 or act.size == 0:
            raise EmptyEvaluationSetError("Cannot evaluate an empty set of predictions")
        if pred.size != act.size:
            raise EmptyEvaluationSetError(
                f"Predicted and actual differ in length: {pred.size} vs {act.size}"
            )
        return pred, act

    # ---------- single-metric helpers ----------
    @classmethod
    def calculate_rmse(cls, predicted, actual) -> float:
        pred, act = cls._pairs(predicted, actual)
        return float(np.sqrt(mean_squared_error(act, pred)))

    @classmethod
    def calculate_mae(cls, predicted, actual) -> float:
        pred, act = cls._pairs(predicted, actual)
        return float(mean_absolute_error(act, pred))

    @classmethod
    def calculate_rsq(cls, predicted, actual) -> float:
        """
        Coefficient of determination, 1 - SS_res / SS_tot.

        Raises UndefinedMetricError when the actual values are constant.
        """
        pred, act = cls._pairs(predicted, actual)
        if np.all(act == act[0]):
            raise UndefinedMetricError(
                f"R² is undefined: all {act.size} actual values equal {act[0]:.3f}"
            )
        return float(r2_score(act, pred))

    # ---------- public aggregator ----------
    def calculate_regression_metrics(self, predicted, actual) -> EvaluationResult:
        """Return RMSE, R² and MAE for one held-out partition."""
        pred, act = self._pairs(predicted, actual)
        result = EvaluationResult(
            rmse=self.calculate_rmse(pred, act),
            rsq=self.calculate_rsq(pred, act),
            mae=self.calculate_mae(pred, act),
            n=int(act.size),
        )
        logger.info(
            "Held-out metrics (n=%d): rmse=%.3f rsq=%.3f mae=%.3f",
            result.n, result.rmse, result.rsq, result.mae,
        )
        return result


def split_train_test(
    df: pd.DataFrame,
    *,
    train_fraction: float,
    random_state: int | np.random.RandomState | None = None,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Random train/test partition of player-season rows.

    The training fold gets ``floor(n * train_fraction)`` rows, clamped so
    that both folds are non-empty; the test fold gets the rest. Folds are
    disjoint and together contain every input row exactly once.

    ``random_state=None`` draws a fresh permutation on every call, so
    repeated runs score the model on different rows. Pass an int for a
    reproducible split.
    """
    if not 0.0 < train_fraction < 1.0:
        raise ValueError(f"train_fraction must be in (0, 1), got {train_fraction}")
    n = len(df)
    if n < 2:
        raise InsufficientDataError(f"Need at least 2 rows to split, got {n}")

    n_train = int(np.floor(n * train_fraction))
    n_train = min(max(n_train, 1), n - 1)

    train, test = train_test_split(
        df, train_size=n_train, random_state=random_state, shuffle=True
    )
    logger.info("Split %d rows into %d train / %d test", n, len(train), len(test))
    return cast(pd.DataFrame, train), cast(pd.DataFrame, test)
