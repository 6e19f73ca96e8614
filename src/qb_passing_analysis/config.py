"""
Configuration module for the QB passing analysis package.
Contains all constants, paths, and configuration parameters.
"""
from pathlib import Path
from typing import List
import os


class Config:
    """Main configuration class for the QB passing analysis package."""
    MLFLOW_EXPERIMENT_NAME = "qb_passing_analysis"
    MLFLOW_TRACKING_URI = os.getenv("MLFLOW_TRACKING_URI")  # None -> local ./mlruns

    # Base paths - go up from this file to the project root
    _CONFIG_DIR = Path(__file__).parent.parent.parent
    PROJECT_ROOT = _CONFIG_DIR.resolve()

    DATA_DIR = PROJECT_ROOT / "data"
    RAW_DATA_DIR = DATA_DIR / "raw"
    OUTPUT_DIR = Path(os.getenv("QB_OUTPUT_DIR", str(PROJECT_ROOT / "output")))
    MODELS_DIR = PROJECT_ROOT / "models"
    MODEL_FILE = MODELS_DIR / "passing_yards_ols.joblib"

    # Output artifacts
    LEADERS_FIGURE = "season_leaders.png"
    PREDICTION_FIGURE = "predicted_vs_actual.png"
    METRICS_FILE = "metrics.csv"
    AGGREGATES_FILE = "aggregates.csv"
    COEFFICIENTS_FILE = "coefficients.csv"

    # Filter parameters
    TARGET_POSITION = "QB"
    SEASON_TYPE = "REG"
    MIN_SEASON = 2020
    MAX_SEASON = 2023

    # Bar chart
    RANKED_SEASON = 2023
    TOP_N_LEADERS = 20

    # Split parameters
    TRAIN_FRACTION = 0.75
    RANDOM_SEED = 42

    # Regression columns
    PREDICTORS: List[str] = ["tot_yds", "tot_td", "tot_int"]
    TARGET = "avg_yds"

    # Visualization settings
    FIGURE_SIZE = (12, 8)
    DPI = 150


# Create global config instance
config = Config()

# ───────────────────────── Column catalogue ─────────────────────────
# Single source of truth for the StatRecord / AggregateRecord schemas
STAT_COLUMNS: List[str] = ["passing_yards", "passing_tds", "interceptions"]
ID_COLUMNS: List[str] = ["player_id", "player_name", "season", "season_type", "position"]
AGGREGATE_COLUMNS: List[str] = [
    "player_id", "player_name", "season",
    "tot_yds", "tot_td", "tot_int", "avg_yds", "games",
]
