"""
End-to-end QB passing report.

raw rows → filter → aggregate → plot → split → fit → predict → score → tabulate
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Dict, Optional, Sequence, cast

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from numpy.typing import NDArray

from qb_passing_analysis.config import config
from qb_passing_analysis.data.preprocessor import DataPreprocessor
from qb_passing_analysis.models.linear import PassingYardsModel
from qb_passing_analysis.utils.metrics import (
    EvaluationResult,
    RegressionEvaluator,
    split_train_test,
)
from qb_passing_analysis.viz import plot_predicted_vs_actual, plot_season_leaders

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Everything one report run produces."""
    filtered:       pd.DataFrame
    aggregates:     pd.DataFrame
    train:          pd.DataFrame
    test:           pd.DataFrame
    model:          PassingYardsModel
    predictions:    NDArray[np.float64]
    evaluation:     EvaluationResult
    leaders:        pd.DataFrame
    leaders_fig:    plt.Figure
    prediction_fig: plt.Figure
    artifacts:      Dict[str, Path] = field(default_factory=dict)

    @property
    def metrics_table(self) -> pd.DataFrame:
        return self.evaluation.to_table()

    def close_figures(self) -> None:
        plt.close(self.leaders_fig)
        plt.close(self.prediction_fig)


def fit_and_evaluate(
    aggregates: pd.DataFrame,
    *,
    train_fraction: float,
    random_state: int | None,
    predictors: Optional[Sequence[str]] = None,
    target: Optional[str] = None,
):
    """Split, fit on train, predict and score on test."""
    train, test = split_train_test(
        aggregates, train_fraction=train_fraction, random_state=random_state
    )
    model = PassingYardsModel(predictors=predictors, target=target).fit(train)
    predictions = model.predict(test)
    evaluation = RegressionEvaluator().calculate_regression_metrics(
        predictions, test[model.target].to_numpy(dtype=float)
    )
    return train, test, model, predictions, evaluation


def run_full_analysis(
    raw_df: pd.DataFrame,
    *,
    position: str = config.TARGET_POSITION,
    min_season: int = config.MIN_SEASON,
    max_season: int | None = config.MAX_SEASON,
    ranked_season: int | None = config.RANKED_SEASON,
    top_n: int | None = config.TOP_N_LEADERS,
    train_fraction: float = config.TRAIN_FRACTION,
    random_state: int | None = config.RANDOM_SEED,
    predictors: Optional[Sequence[str]] = None,
    output_dir: Path | str | None = None,
) -> PipelineResult:
    """
    Single convenience entry for the whole report.

    When *output_dir* is given the figures, metrics table, aggregates and
    coefficient table are written there. Stage errors propagate unchanged.
    """
    out: Path | None = None
    if output_dir is not None:
        out = Path(output_dir)
        out.mkdir(parents=True, exist_ok=True)

    logger.info("── Filter & Aggregate ──")
    pre = DataPreprocessor()
    pre.update_config(target_position=position, min_season=min_season, max_season=max_season)
    if max_season is None:
        pre.clear_max_season()
    aggregates = pre.preprocess_complete(raw_df)
    filtered = cast(pd.DataFrame, pre.filtered_data)
    logger.info("Preprocessing summary: %s", pre.get_preprocessing_summary())

    logger.info("── Season Leaders ──")
    if ranked_season is None:
        ranked_season = int(aggregates["season"].max()) if len(aggregates) else min_season
    leaders, leaders_fig = plot_season_leaders(
        aggregates, ranked_season, top_n=top_n,
        savefig=out / config.LEADERS_FIGURE if out else None,
    )

    try:
        logger.info("── Split, Fit & Evaluate ──")
        train, test, model, predictions, evaluation = fit_and_evaluate(
            aggregates,
            train_fraction=train_fraction,
            random_state=random_state,
            predictors=predictors,
        )

        logger.info("── Predicted vs Actual ──")
        _, prediction_fig = plot_predicted_vs_actual(
            test[model.target].to_numpy(dtype=float), predictions,
            savefig=out / config.PREDICTION_FIGURE if out else None,
        )
    except Exception:
        plt.close(leaders_fig)
        raise

    result = PipelineResult(
        filtered=filtered,
        aggregates=aggregates,
        train=train,
        test=test,
        model=model,
        predictions=predictions,
        evaluation=evaluation,
        leaders=leaders,
        leaders_fig=leaders_fig,
        prediction_fig=prediction_fig,
    )

    if out is not None:
        result.artifacts = write_tables(result, out)
        result.artifacts["leaders_figure"] = out / config.LEADERS_FIGURE
        result.artifacts["prediction_figure"] = out / config.PREDICTION_FIGURE
        logger.info("All artifacts saved in %s", out.resolve())

    return result


def write_tables(result: PipelineResult, out: Path) -> Dict[str, Path]:
    """Write metrics, aggregates and coefficients as CSV."""
    paths = {
        "metrics": out / config.METRICS_FILE,
        "aggregates": out / config.AGGREGATES_FILE,
        "coefficients": out / config.COEFFICIENTS_FILE,
    }
    result.metrics_table.to_csv(paths["metrics"], index=False)
    result.aggregates.to_csv(paths["aggregates"], index=False)
    result.model.coefficient_table().to_csv(paths["coefficients"], index=False)
    return paths
