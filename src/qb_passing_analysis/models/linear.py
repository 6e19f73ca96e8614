"""
Ordinary least-squares model for QB passing analysis.

Predicts average passing yards per game of a player-season from its season
totals (yards, touchdowns, interceptions by default):

    avg_yds ≈ β0 + β1·tot_yds + β2·tot_td + β3·tot_int
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from numpy.typing import NDArray
from scipy import stats
from sklearn.linear_model import LinearRegression

from qb_passing_analysis.config import config
from qb_passing_analysis.exceptions import DegenerateFitError, require_columns

logger = logging.getLogger(__name__)

__all__ = ["LinearModelArtifact", "PassingYardsModel"]


@dataclass(frozen=True)
class LinearModelArtifact:
    """Fitted intercept and coefficients; immutable once created."""
    intercept:    float
    coefficients: Tuple[Tuple[str, float], ...]
    target:       str

    @property
    def predictors(self) -> List[str]:
        return [name for name, _ in self.coefficients]

    @property
    def coef_dict(self) -> Dict[str, float]:
        return dict(self.coefficients)

    def predict(self, records: pd.DataFrame) -> NDArray[np.float64]:
        """Predicted target for every row of *records*; pure."""
        require_columns(records, self.predictors, where="prediction input")
        X = records[self.predictors].to_numpy(dtype=float)
        beta = np.array([b for _, b in self.coefficients], dtype=float)
        return self.intercept + X @ beta


def _design_matrix(X: NDArray[np.float64]) -> NDArray[np.float64]:
    return np.column_stack([np.ones(len(X)), X])


def _has_full_rank(design: NDArray[np.float64]) -> bool:
    """Rank check on column-normalised design so yardage scale doesn't mask collinearity."""
    norms = np.linalg.norm(design, axis=0)
    if np.any(norms == 0):
        return False
    return int(np.linalg.matrix_rank(design / norms)) == design.shape[1]


class PassingYardsModel:
    """Linear regression of per-game passing yards on season aggregates."""

    def __init__(self,
                 predictors: Optional[Sequence[str]] = None,
                 target: Optional[str] = None):
        self.predictors: List[str] = list(predictors if predictors is not None else config.PREDICTORS)
        self.target: str = target if target is not None else config.TARGET
        if not self.predictors:
            raise ValueError("At least one predictor column is required")

        self.model_: LinearRegression | None = None
        self.artifact_: LinearModelArtifact | None = None
        self.n_train_: int = 0
        self._coef_table: pd.DataFrame | None = None

    # ------------------------------------------------------------------
    def fit(self, train: pd.DataFrame) -> "PassingYardsModel":
        """
        Fit by ordinary least squares on the training partition.

        Raises:
            SchemaMismatchError: predictor or target columns are missing
            DegenerateFitError: fewer rows than predictors + 1, or the
                predictors are perfectly collinear (singular normal equations)
        """
        require_columns(train, self.predictors + [self.target], where="training partition")
        X = train[self.predictors].to_numpy(dtype=float)
        y = train[self.target].to_numpy(dtype=float)
        n, k = X.shape

        if n < k + 1:
            raise DegenerateFitError(
                f"Need at least {k + 1} training rows for {k} predictors, got {n}"
            )
        design = _design_matrix(X)
        if not _has_full_rank(design):
            raise DegenerateFitError(
                f"Predictors {self.predictors} are collinear on the training partition"
            )

        self.model_ = LinearRegression().fit(X, y)
        self.artifact_ = LinearModelArtifact(
            intercept=float(self.model_.intercept_),
            coefficients=tuple(
                (name, float(b)) for name, b in zip(self.predictors, self.model_.coef_)
            ),
            target=self.target,
        )
        self.n_train_ = n
        self._coef_table = self._summarize(design, y)

        logger.info(
            "Fitted OLS on %d rows: intercept=%.4f %s",
            n, self.artifact_.intercept,
            " ".join(f"{p}={b:.4f}" for p, b in self.artifact_.coefficients),
        )
        return self

    def predict(self, records: pd.DataFrame) -> NDArray[np.float64]:
        """Predict the target for any frame carrying the predictor columns."""
        if self.artifact_ is None:
            raise ValueError("Model has not been fit yet")
        return self.artifact_.predict(records)

    # ------------------------------------------------------------------
    def _summarize(self, design: NDArray[np.float64], y: NDArray[np.float64]) -> pd.DataFrame:
        assert self.artifact_ is not None
        beta = np.array(
            [self.artifact_.intercept] + [b for _, b in self.artifact_.coefficients]
        )
        n, p = design.shape
        dof = n - p
        resid = y - design @ beta

        if dof > 0:
            sigma2 = float(resid @ resid) / dof
            cov = sigma2 * np.linalg.inv(design.T @ design)
            se = np.sqrt(np.clip(np.diag(cov), 0.0, None))
            with np.errstate(divide="ignore", invalid="ignore"):
                t_stat = beta / se
            p_value = 2 * stats.t.sf(np.abs(t_stat), dof)
        else:
            se = t_stat = p_value = np.full(p, np.nan)

        return pd.DataFrame({
            "term":      ["(Intercept)"] + self.predictors,
            "estimate":  beta,
            "std_error": se,
            "statistic": t_stat,
            "p_value":   p_value,
        })

    def coefficient_table(self) -> pd.DataFrame:
        """Estimate, standard error, t statistic and p-value per term."""
        if self._coef_table is None:
            raise ValueError("Model has not been fit yet")
        return self._coef_table.copy()
