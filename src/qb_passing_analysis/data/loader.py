"""
Data loading module for QB passing analysis.
Fetches weekly player statistics and normalises them to the StatRecord schema.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from qb_passing_analysis.config import config, ID_COLUMNS, STAT_COLUMNS
from qb_passing_analysis.exceptions import require_columns

logger = logging.getLogger(__name__)

# nflverse column name -> StatRecord column name
_SOURCE_RENAMES = {
    "passing_interceptions": "interceptions",
}


def normalize_stat_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    Map a raw weekly player-stats frame onto the StatRecord schema.

    - ``passing_interceptions`` (newer nflverse releases) becomes ``interceptions``.
    - ``player_display_name`` wins over the abbreviated ``player_name`` when present.
    - ``season_type`` is upper-cased so ``"Reg"`` and ``"REG"`` compare equal.
    """
    df = df.copy()
    renames = {
        src: dst for src, dst in _SOURCE_RENAMES.items()
        if src in df.columns and dst not in df.columns
    }
    if renames:
        df = df.rename(columns=renames)

    if "player_display_name" in df.columns:
        display = df["player_display_name"]
        if "player_name" in df.columns:
            display = display.fillna(df["player_name"])
        df["player_name"] = display

    if "player_id" not in df.columns and "player_name" in df.columns:
        # CSV exports without ids: fall back to the name as identity
        df["player_id"] = df["player_name"]

    if "season_type" in df.columns:
        df["season_type"] = df["season_type"].astype(str).str.upper()

    return df


class DataLoader:
    """Handles loading of season-level player statistical rows."""

    def __init__(self):
        """Initialize the data loader."""
        self.stats_df: pd.DataFrame | None = None

    def load_weekly_stats(self, seasons: Optional[Iterable[int]] = None) -> pd.DataFrame:
        """
        Load weekly player stats from nflverse.

        Args:
            seasons: Seasons to fetch; defaults to MIN_SEASON..MAX_SEASON from config

        Returns:
            DataFrame with one row per player per game
        """
        import nflreadpy as nfl

        if seasons is None:
            seasons = range(config.MIN_SEASON, config.MAX_SEASON + 1)
        seasons = [int(s) for s in seasons]

        logger.info("Fetching nflverse weekly player stats for seasons %s", seasons)
        raw = nfl.load_player_stats(seasons, summary_level="week")
        if not isinstance(raw, pd.DataFrame):
            raw = raw.to_pandas()

        self.stats_df = self._validate(normalize_stat_columns(raw), f"nflverse {seasons}")
        logger.info("Loaded %d player-game rows", len(self.stats_df))
        return self.stats_df

    def load_csv(self, filepath: Optional[Path] = None) -> pd.DataFrame:
        """
        Load player-game rows from a CSV export.

        Args:
            filepath: Path to the CSV; defaults to data/raw/player_stats.csv

        Returns:
            DataFrame with one row per player per game
        """
        if filepath is None:
            filepath = config.RAW_DATA_DIR / "player_stats.csv"

        try:
            raw = pd.read_csv(filepath)
        except FileNotFoundError:
            raise FileNotFoundError(f"Player stats file not found: {filepath}")

        self.stats_df = self._validate(normalize_stat_columns(raw), str(filepath))
        logger.info("Loaded %d player-game rows from %s", len(self.stats_df), filepath)
        return self.stats_df

    @staticmethod
    def _validate(df: pd.DataFrame, source: str) -> pd.DataFrame:
        require_columns(df, ID_COLUMNS + STAT_COLUMNS, where=source)
        return df

    def get_data_summary(self) -> dict:
        """
        Get summary statistics of loaded data.

        Returns:
            Dictionary with data summary information
        """
        if self.stats_df is None:
            raise ValueError("No data loaded. Call load_weekly_stats() or load_csv() first.")

        df = self.stats_df
        summary = {
            'total_rows': len(df),
            'unique_players': df['player_id'].nunique(),
            'unique_seasons': sorted(int(s) for s in df['season'].unique()),
            'season_types': df['season_type'].unique().tolist(),
            'positions': df['position'].value_counts().to_dict(),
        }
        return summary
