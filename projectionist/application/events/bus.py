"""Event bus contract consumed by projections, and an in-memory implementation."""

import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from typing import Any

from ...domain import Event

LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[Event], Any]


class EventBus(ABC):
    """Abstract source of historical and live domain events.

    A projection uses the bus two ways:

    1. **Live delivery**: ``subscribe()`` registers a handler that the bus
       calls once per newly published event. The ``event_types`` filter is
       optional: buses exposing a plain ``subscribe(handler)`` also work,
       projections then reject undeclared events themselves.
    2. **History**: ``get_all_events()`` returns every past event of the
       given types, in the order they were originally published. Projections
       replay this history to rebuild their views.

    Implementations might wrap an event store plus a message broker, or, for
    tests and single-process apps, keep everything in memory.
    """

    @abstractmethod
    def subscribe(
        self,
        handler: EventHandler,
        event_types: Iterable[str] | None = None,
    ) -> None:
        """Register a handler for live events.

        Args:
            handler: Called with each delivered event as its only argument.
                May return an awaitable, which the bus should await.
            event_types: Only deliver events of these types. None delivers
                every event.
        """
        ...

    @abstractmethod
    async def get_all_events(self, event_types: Iterable[str]) -> list[Event]:
        """Load the complete ordered history of events of the given types.

        Args:
            event_types: Event types to include.

        Returns:
            Events in original publication order.
        """
        ...


class InMemoryEventBus(EventBus):
    """Simple in-memory event bus for testing and single-process apps.

    Keeps every published event in one ordered list that serves as the
    history, and delivers each event to matching subscribers as it is
    published.

    Delivery is sequential: each event goes to each subscriber in
    registration order, and every handler is awaited before the next one
    runs. Handler errors propagate to the publisher.

    Example:
        >>> bus = InMemoryEventBus()
        >>> await bus.publish(Event(type="itemAdded", listId="L1", name="a"))
        >>> projection = TodoListProjection()
        >>> await projection.subscribe(bus)  # replays the history
        >>> await bus.publish(Event(type="itemAdded", listId="L1", name="b"))
    """

    def __init__(self, events: Iterable[Event] = ()) -> None:
        """Initialize the bus, optionally with a pre-existing history.

        Args:
            events: Historical events, in publication order. They are not
                delivered to subscribers.
        """
        self.events_in_order: list[Event] = list(events)
        self.subscribers: list[tuple[EventHandler, frozenset[str] | None]] = []

    def subscribe(
        self,
        handler: EventHandler,
        event_types: Iterable[str] | None = None,
    ) -> None:
        types = frozenset(event_types) if event_types is not None else None
        self.subscribers.append((handler, types))
        LOGGER.debug(
            "Subscribed %s to %s",
            getattr(handler, "__qualname__", repr(handler)),
            "all events" if types is None else sorted(types),
        )

    async def publish(self, *events: Event) -> None:
        """Append events to the history and deliver them to subscribers.

        Args:
            *events: Events to publish, in order.

        Raises:
            Any exception raised by a subscriber. Events earlier in the call
            remain published.
        """
        for event in events:
            self.events_in_order.append(event)
            for handler, types in list(self.subscribers):
                if types is not None and event.type not in types:
                    continue
                result = handler(event)
                if inspect.isawaitable(result):
                    await result

    async def get_all_events(self, event_types: Iterable[str]) -> list[Event]:
        types = frozenset(event_types)
        return [event for event in self.events_in_order if event.type in types]

