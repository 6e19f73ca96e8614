"""
Error kinds raised by the pipeline stages.

Every stage validates its input at the boundary and raises one of these
instead of attempting recovery; the report command decides what to do.
"""
from typing import Iterable


class QBAnalysisError(ValueError):
    """Base class for all pipeline errors."""


class SchemaMismatchError(QBAnalysisError, KeyError):
    """Input rows are missing one or more required columns."""

    def __init__(self, missing: Iterable[str], where: str = "input"):
        self.missing = sorted(missing)
        self.where = where
        super().__init__(f"{where} is missing required columns: {self.missing}")

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class InsufficientDataError(QBAnalysisError):
    """Too few rows to split into train and test partitions."""


class DegenerateFitError(QBAnalysisError):
    """The regression is underdetermined or its design matrix is singular."""


class EmptyEvaluationSetError(QBAnalysisError):
    """No (predicted, actual) pairs to score, or the sequences differ in length."""


class UndefinedMetricError(QBAnalysisError):
    """A metric has a zero denominator, e.g. R² on constant actual values."""


def require_columns(df, columns: Iterable[str], where: str = "input") -> None:
    """Raise SchemaMismatchError if any of *columns* is absent from df."""
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaMismatchError(missing, where=where)
