"""Application layer: projections and the collaborators they consume.

- events: Event bus contract and in-memory implementation
- views: View contract and in-memory implementation
- projections: Projection base class and registry
"""

from .events import EventBus, InMemoryEventBus
from .projections import Projection, ProjectionRegistry, ProjectionState
from .views import InMemoryView, ReadinessSignal, View

__all__ = [
    "EventBus",
    "InMemoryEventBus",
    "InMemoryView",
    "Projection",
    "ProjectionRegistry",
    "ProjectionState",
    "ReadinessSignal",
    "View",
]
