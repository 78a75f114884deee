"""Projection infrastructure for building read models.

This package provides:
- Projection: Base class consuming events into a view
- ProjectionState: Restore lifecycle of a projection
- ProjectionRegistry: Registry of projection instances
"""

from .projection import Projection, ProjectionState
from .registry import ProjectionRegistry

__all__ = [
    "Projection",
    "ProjectionRegistry",
    "ProjectionState",
]
