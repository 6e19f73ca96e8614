"""
Model persistence utilities for QB passing analysis.

Fitted models are stored with joblib next to a ``.meta.json`` sidecar, so the
coefficients and metrics can be read without unpickling the model.
"""
from __future__ import annotations

import datetime as _dt
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import joblib

from qb_passing_analysis.config import config
from qb_passing_analysis.models.linear import PassingYardsModel

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    """Current timestamp for metadata."""
    return _dt.datetime.now().strftime("%Y%m%d_%H%M%S")


def _meta_path(path: Path) -> Path:
    return path.with_suffix(".meta.json")


def save_model(
    model: PassingYardsModel,
    path: Optional[Path] = None,
    *,
    metrics: Optional[Dict[str, float]] = None,
) -> Path:
    """
    Persist a fitted model and its metadata.

    Args:
        model: Fitted PassingYardsModel
        path: Target .joblib file; defaults to config.MODEL_FILE
        metrics: Optional held-out metrics to record alongside

    Returns:
        Path of the saved model file
    """
    if model.artifact_ is None:
        raise ValueError("Cannot save a model that has not been fit")

    path = Path(path) if path is not None else config.MODEL_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump(model, path)

    meta = {
        "predictors": model.predictors,
        "target": model.target,
        "intercept": model.artifact_.intercept,
        "coefficients": model.artifact_.coef_dict,
        "n_train": model.n_train_,
        "metrics": metrics or {},
        "saved_at": _timestamp(),
    }
    with _meta_path(path).open("w") as fp:
        json.dump(meta, fp, indent=2)

    logger.info("Saved model to %s", path)
    return path


def load_model(path: Optional[Path] = None) -> PassingYardsModel:
    """Load a model written by save_model()."""
    path = Path(path) if path is not None else config.MODEL_FILE
    if not path.exists():
        raise FileNotFoundError(f"No saved model found at {path}")

    model = joblib.load(path)
    if not isinstance(model, PassingYardsModel):
        raise TypeError(f"{path} does not contain a PassingYardsModel (got {type(model).__name__})")
    return model


def get_model_metadata(path: Optional[Path] = None) -> dict[str, Any]:
    """
    Load metadata for a saved model without loading the model itself.

    Returns an empty dict when no sidecar exists.
    """
    path = Path(path) if path is not None else config.MODEL_FILE
    meta_path = _meta_path(path)
    if not meta_path.exists():
        return {}
    with meta_path.open("r") as fp:
        return json.load(fp)
