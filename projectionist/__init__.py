"""Projectionist - CQRS projections for Python.

This module provides the public API for building read models that are
restored from event history and kept up to date from live events.
"""

from .application import (
    EventBus,
    InMemoryEventBus,
    InMemoryView,
    Projection,
    ProjectionRegistry,
    ProjectionState,
    ReadinessSignal,
    View,
)
from .config import ProjectionSettings
from .domain import (
    ConfigurationError,
    Event,
    PreconditionError,
    ProjectionistError,
    RestoreError,
    UnhandledEventError,
)
from .routing import handles_event

__all__ = [
    # Projections
    "Projection",
    "ProjectionRegistry",
    "ProjectionSettings",
    "ProjectionState",
    # Collaborators
    "EventBus",
    "InMemoryEventBus",
    "InMemoryView",
    "ReadinessSignal",
    "View",
    # Domain primitives
    "Event",
    # Errors
    "ConfigurationError",
    "PreconditionError",
    "ProjectionistError",
    "RestoreError",
    "UnhandledEventError",
    # Decorators
    "handles_event",
]
