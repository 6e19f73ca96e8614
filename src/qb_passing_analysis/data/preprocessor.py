"""
Data preprocessing module for QB passing analysis.
Handles filtering of player-game rows and aggregation to player-seasons.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, cast

import pandas as pd

from qb_passing_analysis.config import config, AGGREGATE_COLUMNS, STAT_COLUMNS
from qb_passing_analysis.exceptions import require_columns

logger = logging.getLogger(__name__)

_FILTER_COLUMNS = ["position", "season_type", "season"]
_GROUP_KEYS = ["player_id", "season"]


def filter_stat_records(
    df: pd.DataFrame,
    *,
    position: str,
    min_season: int,
    max_season: int | None = None,
    season_type: str = "REG",
) -> pd.DataFrame:
    """
    Keep rows with ``position == position``, ``season_type == season_type``
    and ``min_season <= season`` (``<= max_season`` when given).

    The input frame is not modified and the original index is preserved, so
    the result is always a subset of the input. Zero matches give an empty
    frame rather than an error.
    """
    if df.empty:
        return df.copy()
    require_columns(df, _FILTER_COLUMNS, where="filter input")
    mask = (
        (df["position"] == position)
        & (df["season_type"] == season_type)
        & (df["season"] >= min_season)
    )
    if max_season is not None:
        mask &= df["season"] <= max_season
    return cast(pd.DataFrame, df[mask].copy())


def aggregate_player_seasons(df: pd.DataFrame) -> pd.DataFrame:
    """
    Collapse player-game rows to one row per (player_id, season).

    Yards, touchdowns and interceptions are summed; ``avg_yds`` is the mean
    passing yards over the group's rows and ``games`` is the row count.
    Duplicate rows are not removed: each contributes to both sums and mean.
    Groups appear in order of first appearance of their key.
    """
    if df.empty:
        return pd.DataFrame(columns=AGGREGATE_COLUMNS)
    require_columns(df, _GROUP_KEYS + ["player_name"] + STAT_COLUMNS, where="aggregation input")

    df = df.copy()
    missing_stats = int(df[STAT_COLUMNS].isna().any(axis=1).sum())
    if missing_stats:
        logger.warning("%d rows with missing passing stats counted as zero", missing_stats)
    df[STAT_COLUMNS] = df[STAT_COLUMNS].fillna(0)

    agg = (
        df.groupby(_GROUP_KEYS, sort=False, dropna=False)
        .agg(
            player_name=("player_name", "first"),
            tot_yds=("passing_yards", "sum"),
            tot_td=("passing_tds", "sum"),
            tot_int=("interceptions", "sum"),
            avg_yds=("passing_yards", "mean"),
            games=("passing_yards", "size"),
        )
        .reset_index()
    )
    return cast(pd.DataFrame, agg[AGGREGATE_COLUMNS])


class DataPreprocessor:
    """Runs the filter and aggregation stages with settings from config."""

    def __init__(self):
        """Create a preprocessor with defaults from central config."""
        self.TARGET_POSITION: str | None = None
        self.SEASON_TYPE: str | None = None
        self.MIN_SEASON: int | None = None
        self.MAX_SEASON: int | None = None

        # Runtime artifacts
        self.raw_data: pd.DataFrame | None = None
        self.filtered_data: pd.DataFrame | None = None
        self.aggregated_data: pd.DataFrame | None = None

        self.update_config(
            target_position=config.TARGET_POSITION,
            season_type=config.SEASON_TYPE,
            min_season=config.MIN_SEASON,
            max_season=config.MAX_SEASON,
        )

    def update_config(self,
                      target_position: Optional[str] = None,
                      season_type: Optional[str] = None,
                      min_season: Optional[int] = None,
                      max_season: Optional[int] = None):
        """
        Update preprocessing configuration.

        Args:
            target_position: Roster position to keep (e.g. "QB")
            season_type: Season type to keep (e.g. "REG")
            min_season: First season to include
            max_season: Last season to include
        """
        if target_position is not None:
            self.TARGET_POSITION = target_position
        if season_type is not None:
            self.SEASON_TYPE = season_type
        if min_season is not None:
            self.MIN_SEASON = min_season
        if max_season is not None:
            self.MAX_SEASON = max_season

        logger.debug("Preprocessor configuration updated: %s", self._config_dict())

    def clear_max_season(self):
        """Drop the upper season bound; every season from MIN_SEASON on is kept."""
        self.MAX_SEASON = None
        logger.debug("Preprocessor configuration updated: %s", self._config_dict())

    def _config_dict(self) -> Dict:
        return {
            'target_position': self.TARGET_POSITION,
            'season_type': self.SEASON_TYPE,
            'min_season': self.MIN_SEASON,
            'max_season': self.MAX_SEASON,
        }

    def _validate_config(self):
        """Validate that required configuration is set."""
        missing = []
        if self.TARGET_POSITION is None:
            missing.append("TARGET_POSITION")
        if self.SEASON_TYPE is None:
            missing.append("SEASON_TYPE")
        if self.MIN_SEASON is None:
            missing.append("MIN_SEASON")

        if missing:
            raise ValueError(f"Configuration not set. Please call update_config() first. Missing: {missing}")
        if self.MAX_SEASON is not None and self.MAX_SEASON < self.MIN_SEASON:
            raise ValueError(f"max_season {self.MAX_SEASON} is before min_season {self.MIN_SEASON}")

    def filter_records(self, df: pd.DataFrame) -> pd.DataFrame:
        """Filter to the configured position, season type and season range."""
        self._validate_config()
        filtered = filter_stat_records(
            df,
            position=cast(str, self.TARGET_POSITION),
            min_season=cast(int, self.MIN_SEASON),
            max_season=self.MAX_SEASON,
            season_type=cast(str, self.SEASON_TYPE),
        )
        logger.info(
            "Filtered to %s %s rows from %s: kept %d of %d",
            self.TARGET_POSITION, self.SEASON_TYPE, self.MIN_SEASON, len(filtered), len(df),
        )
        if filtered.empty:
            logger.warning("No rows matched the filter; downstream aggregates will be empty")
        return filtered

    def aggregate(self, df: pd.DataFrame) -> pd.DataFrame:
        """Aggregate filtered rows to player-seasons."""
        agg = aggregate_player_seasons(df)
        logger.info("Aggregated %d rows into %d player-seasons", len(df), len(agg))
        return agg

    def preprocess_complete(self, raw_df: pd.DataFrame) -> pd.DataFrame:
        """
        Complete preprocessing pipeline: filter then aggregate.

        Args:
            raw_df: Player-game rows from the DataLoader

        Returns:
            One row per player-season, ready for modeling
        """
        self.raw_data = raw_df
        self.filtered_data = self.filter_records(raw_df)
        self.aggregated_data = self.aggregate(self.filtered_data)
        return self.aggregated_data

    def get_preprocessing_summary(self) -> Dict:
        """Get summary of preprocessing steps and results."""
        if self.aggregated_data is None or self.filtered_data is None:
            raise ValueError("No processed data available")

        agg = self.aggregated_data
        summary = {
            'original_size': len(self.raw_data) if self.raw_data is not None else 0,
            'filtered_size': len(self.filtered_data),
            'player_seasons': len(agg),
            'unique_players': agg['player_id'].nunique(),
            'seasons': sorted(int(s) for s in agg['season'].unique()),
            'mean_avg_yds': float(agg['avg_yds'].mean()) if len(agg) else float("nan"),
            'config': self._config_dict(),
        }
        return summary
