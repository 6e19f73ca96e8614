"""
MLflow logging helpers for report runs.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import mlflow
from matplotlib.figure import Figure

from qb_passing_analysis.config import config

logger = logging.getLogger(__name__)


def setup_mlflow_experiment(
    experiment_name: Optional[str] = None,
    tracking_uri: Optional[str] = None,
) -> None:
    """Point MLflow at the tracking store and make sure the experiment exists."""
    uri = tracking_uri or config.MLFLOW_TRACKING_URI
    if uri:
        mlflow.set_tracking_uri(uri)
    mlflow.set_experiment(experiment_name or config.MLFLOW_EXPERIMENT_NAME)
    logger.info("MLflow experiment '%s' at %s",
                experiment_name or config.MLFLOW_EXPERIMENT_NAME, mlflow.get_tracking_uri())


def _log_fig(fig: Figure, name: str) -> None:
    """Log a Matplotlib figure directly without temp files."""
    mlflow.log_figure(fig, artifact_file=name)


def log_pipeline_run(
    result: Any,
    params: Dict[str, Any],
    *,
    run_name: Optional[str] = None,
) -> str:
    """
    Log one report run: parameters, held-out metrics, coefficients and figures.

    Args:
        result: PipelineResult from run_full_analysis()
        params: Run configuration (seasons, split fraction, seed, ...)
        run_name: Optional MLflow run name

    Returns:
        The MLflow run id
    """
    with mlflow.start_run(run_name=run_name) as run:
        mlflow.log_params(params)
        mlflow.log_metrics(result.evaluation.as_dict())
        mlflow.log_metrics({
            "n_train": float(len(result.train)),
            "n_test": float(len(result.test)),
        })
        mlflow.log_dict(
            result.model.artifact_.coef_dict | {"(Intercept)": result.model.artifact_.intercept},
            "coefficients.json",
        )
        mlflow.log_text(result.metrics_table.to_csv(index=False), config.METRICS_FILE)
        _log_fig(result.leaders_fig, config.LEADERS_FIGURE)
        _log_fig(result.prediction_fig, config.PREDICTION_FIGURE)
        run_id = run.info.run_id

    logger.info("Logged run %s to MLflow", run_id)
    return run_id
