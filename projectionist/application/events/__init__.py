"""Event bus contract and implementations.

- EventBus: Abstract source of live and historical events
- InMemoryEventBus: In-memory implementation for testing
"""

from .bus import EventBus, EventHandler, InMemoryEventBus

__all__ = [
    "EventBus",
    "EventHandler",
    "InMemoryEventBus",
]
