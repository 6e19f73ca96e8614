"""Models module for QB passing analysis."""

from .linear import LinearModelArtifact, PassingYardsModel

__all__ = ['LinearModelArtifact', 'PassingYardsModel']
