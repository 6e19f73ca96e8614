"""
Data module for QB passing analysis.
"""

from .loader import DataLoader
from .preprocessor import DataPreprocessor, aggregate_player_seasons, filter_stat_records

__all__ = ['DataLoader', 'DataPreprocessor', 'aggregate_player_seasons', 'filter_stat_records']
