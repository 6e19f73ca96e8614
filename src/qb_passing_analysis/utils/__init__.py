"""Utils module for QB passing analysis."""

from .metrics import EvaluationResult, RegressionEvaluator, split_train_test

__all__ = ['EvaluationResult', 'RegressionEvaluator', 'split_train_test']
