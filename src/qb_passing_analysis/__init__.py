"""
QB Passing Analysis Package
Season aggregates and a linear model of NFL quarterback passing yards per game.
"""

__version__ = "1.0.0"
__author__ = "NFL Analytics Team"

# Import main classes for easy access
from .config import config
from .data.loader import DataLoader
from .data.preprocessor import DataPreprocessor
from .models.linear import PassingYardsModel
from .pipeline import run_full_analysis

__all__ = [
    'config',
    'DataLoader',
    'DataPreprocessor',
    'PassingYardsModel',
    'run_full_analysis',
]
