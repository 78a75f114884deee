"""Views: materialized stores maintained by projections.

- View: Abstract contract of a projection's store
- InMemoryView: Dictionary-backed default implementation
- ReadinessSignal: Broadcast-once latch used for view readiness
"""

from .memory import InMemoryView
from .signal import ReadinessSignal
from .view import FilterFn, UpdateFn, View

__all__ = [
    "FilterFn",
    "InMemoryView",
    "ReadinessSignal",
    "UpdateFn",
    "View",
]
