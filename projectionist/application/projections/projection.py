"""Projection base class for building read models from event streams.

A projection consumes domain events and maintains a derived view. Events
reach it two ways: a one-time replay of the full history when the view is
not ready yet, and live delivery from the event bus afterwards. Both paths
go through ``Projection.project`` so they share the same handler logic.
"""

import asyncio
import inspect
import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any, ClassVar

from ...config import ProjectionSettings
from ...domain import (
    ConfigurationError,
    Event,
    PreconditionError,
    RestoreError,
    UnhandledEventError,
)
from ...routing import MessageRouter, setup_event_routing, validate_routing
from ..events import EventBus
from ..views import InMemoryView, View

LOGGER = logging.getLogger(__name__)


class ProjectionState(str, Enum):
    """Lifecycle of a projection's view restore."""

    NOT_READY = "not-ready"
    RESTORING = "restoring"
    READY = "ready"
    FAILED = "failed"


class Projection:
    """Base class for read models built from domain events.

    Subclasses declare the event types they handle in the ``handles`` class
    attribute and provide one handler per type, either as a method named
    after the type or as a method decorated with ``@handles_event``. Handlers
    may be plain functions or coroutines; they receive the event and update
    ``self.view``.

    **Handler contract:**
    The contract is checked when the projection is constructed. A missing or
    empty ``handles`` declaration, or a declared type without a handler,
    raises ConfigurationError, so a misconfigured projection can never
    subscribe to a bus.

    **Restore and readiness:**
    ``subscribe()`` registers ``project`` with the event bus for live events
    and, if the view is not ready, replays the whole history before returning.
    Replayed events are applied strictly one after another. Live events that
    arrive before the replay completes wait on the view's readiness signal,
    so they are applied only after the entire history. A failed replay raises
    RestoreError and leaves the view not ready.

    **Concurrency:**
    The view is not locked. Live dispatches that run concurrently (for
    example from a bus delivering events in parallel tasks) may interleave,
    and handlers must tolerate that.

    Example:
        >>> class TodoListProjection(Projection):
        ...     handles = ("itemAdded",)
        ...
        ...     def itemAdded(self, event: Event) -> None:
        ...         self.view.update_enforcing_new(
        ...             event.listId,
        ...             lambda items: (items or []) + [event.name],
        ...         )
        >>>
        >>> bus = InMemoryEventBus([
        ...     Event(type="itemAdded", listId="L1", name="a"),
        ...     Event(type="itemAdded", listId="L1", name="b"),
        ... ])
        >>> projection = TodoListProjection()
        >>> await projection.subscribe(bus)
        >>> await projection.view.get("L1")
        ['a', 'b']
    """

    # Must be overridden by every concrete projection
    handles: ClassVar[Iterable[str]]

    # Per-class routing table, built on first construction
    _event_router: ClassVar[MessageRouter]

    def __init__(
        self,
        view: View | None = None,
        settings: ProjectionSettings | None = None,
    ):
        """Initialize the projection and validate its handler contract.

        Args:
            view: The view maintained by this projection. Defaults to a new,
                not-ready InMemoryView.
            settings: Restore logging settings. Defaults to settings read
                from the environment.

        Raises:
            ConfigurationError: If ``handles`` is missing or empty, or a
                declared event type has no callable handler.
        """
        self._router = type(self)._routing()
        self._view: Any = view if view is not None else InMemoryView()
        self._settings = settings if settings is not None else ProjectionSettings()
        self._state = ProjectionState.NOT_READY
        self._subscribed = False

    @classmethod
    def event_types(cls) -> tuple[str, ...]:
        """The validated event types declared in ``handles``.

        Raises:
            ConfigurationError: If ``handles`` is not declared, is empty, or
                contains anything other than non-empty strings.
        """
        handles = getattr(cls, "handles", None)
        if handles is None:
            raise ConfigurationError(
                f"{cls.__name__} must override handles with the list of "
                "handled event types"
            )
        if isinstance(handles, str) or not isinstance(handles, Iterable):
            raise ConfigurationError(
                f"{cls.__name__}.handles must be a list of event type strings, "
                f"got {handles!r}"
            )
        event_types = tuple(handles)
        if not event_types:
            raise ConfigurationError(f"{cls.__name__}.handles must not be empty")
        invalid = [t for t in event_types if not isinstance(t, str) or not t]
        if invalid:
            raise ConfigurationError(
                f"{cls.__name__}.handles contains invalid event types: {invalid!r}"
            )
        return event_types

    @classmethod
    def _routing(cls) -> MessageRouter:
        router = cls.__dict__.get("_event_router")
        if router is None:
            event_types = cls.event_types()
            router = setup_event_routing(cls, event_types, reserved=_RESERVED_NAMES)
            validate_routing(cls, event_types, router)
            cls._event_router = router
        return router

    @property
    def view(self) -> Any:
        """The view maintained by this projection."""
        return self._view

    @property
    def state(self) -> ProjectionState:
        return self._state

    @property
    def settings(self) -> ProjectionSettings:
        return self._settings

    async def subscribe(self, event_bus: EventBus) -> None:
        """Subscribe to live events and restore the view if needed.

        Registers ``project`` as the bus's live handler. Buses whose
        ``subscribe`` takes an ``event_types`` argument are asked for the
        declared types only; a plain ``subscribe(handler)`` bus delivers
        everything and undeclared events raise UnhandledEventError. If the
        view is not ready, the history is replayed before this method
        returns; if it is already ready, replay is skipped.

        Args:
            event_bus: The bus delivering live and historical events.

        Raises:
            PreconditionError: If the projection is already subscribed, or
                the bus cannot deliver live events, or the view needs a
                restore and the bus cannot fetch history.
            RestoreError: If the restore fails. The projection is then
                unusable and should be discarded.
        """
        name = type(self).__name__
        if self._subscribed:
            raise PreconditionError(f"{name} is already subscribed to an event bus")
        if event_bus is None or not callable(getattr(event_bus, "subscribe", None)):
            raise PreconditionError("event_bus.subscribe must be callable")

        needs_restore = not _is_ready(self._view)
        if needs_restore:
            _require_history(event_bus)

        if _accepts_event_types(event_bus.subscribe):
            event_bus.subscribe(self.project, event_types=list(self.event_types()))
        else:
            event_bus.subscribe(self.project)
        self._subscribed = True
        LOGGER.debug("%s subscribed to live events", name, extra={"projection": name})

        if needs_restore:
            await self.restore(event_bus)
        else:
            self._state = ProjectionState.READY

    async def project(self, event: Event, *, nowait: bool = False) -> Any:
        """Pass an event to its handler.

        Args:
            event: The event to handle.
            nowait: Handle the event immediately even if the view is not
                ready yet. Only the restore loop should set this.

        Returns:
            The handler's return value, awaited if it is awaitable.

        Raises:
            UnhandledEventError: If no handler is registered for the event
                type. The view is not touched.
        """
        handler = self._router.resolve(event.type)
        if handler is None:
            raise UnhandledEventError(event.type, type(self).__name__)

        if not nowait and not _is_ready(self._view):
            await self._view.once_ready()

        result = handler(self, event)
        if inspect.isawaitable(result):
            result = await result
        return result

    async def restore(self, event_bus: EventBus) -> Any:
        """Rebuild the view by replaying every historical event.

        Fetches the history of the declared event types with a single
        ``get_all_events`` call, applies each event in order with the
        readiness wait bypassed, and marks the view as ready once all of
        them have been applied.

        Args:
            event_bus: The bus to fetch history from.

        Returns:
            The restored view.

        Raises:
            PreconditionError: If the bus is missing or cannot fetch history,
                or the projection has already been restored or failed.
            RestoreError: If fetching history or applying any event fails.
                The view keeps the events applied so far but is never marked
                as ready.
            asyncio.CancelledError: If the restore is cancelled, for example
                by ``asyncio.wait_for``. The projection is left FAILED.
        """
        name = type(self).__name__
        _require_history(event_bus)
        if self._state is not ProjectionState.NOT_READY:
            raise PreconditionError(f"{name} cannot restore while {self._state.value}")

        level = self._settings.restore_level
        self._state = ProjectionState.RESTORING
        LOGGER.log(level, "Restoring %s view", name, extra={"projection": name})

        try:
            applied = await self._replay(event_bus)
        except asyncio.CancelledError:
            self._state = ProjectionState.FAILED
            LOGGER.warning("%s view restoring was cancelled", name, extra={"projection": name})
            raise

        LOGGER.log(
            level,
            "%s view restored from %d events, %s keys, %s bytes",
            name,
            applied,
            getattr(self._view, "size", "?"),
            getattr(self._view, "bytes", "?"),
            extra={"projection": name},
        )

        mark_as_ready = getattr(self._view, "mark_as_ready", None)
        if callable(mark_as_ready):
            mark_as_ready()
        self._state = ProjectionState.READY
        return self._view

    async def _replay(self, event_bus: EventBus) -> int:
        name = type(self).__name__
        level = self._settings.restore_level
        interval = self._settings.restore_progress_interval

        try:
            history = event_bus.get_all_events(list(self.event_types()))
            if inspect.isawaitable(history):
                history = await history
        except Exception as exc:
            self._state = ProjectionState.FAILED
            LOGGER.error(
                "%s view restoring has failed fetching history",
                name,
                exc_info=exc,
                extra={"projection": name},
            )
            raise RestoreError(name, exc) from exc

        applied = 0
        for event in history:
            try:
                await self.project(event, nowait=True)
            except Exception as exc:
                self._state = ProjectionState.FAILED
                LOGGER.error(
                    "%s view restoring has failed on event: %s",
                    name,
                    _describe(event),
                    exc_info=exc,
                    extra={"projection": name, "event_type": getattr(event, "type", None)},
                )
                raise RestoreError(name, exc, event) from exc
            applied += 1
            if interval and applied % interval == 0:
                LOGGER.log(level, "%s view restoring, %d events applied", name, applied)
        return applied


def _is_ready(view: Any) -> bool:
    # Views without a readiness flag are always ready
    return bool(getattr(view, "ready", True))


def _accepts_event_types(subscribe: Any) -> bool:
    # Buses with a plain subscribe(handler) get every event; project() rejects undeclared types
    try:
        parameters = inspect.signature(subscribe).parameters.values()
    except (TypeError, ValueError):
        return False
    return any(
        parameter.kind is inspect.Parameter.VAR_KEYWORD
        or (
            parameter.name == "event_types"
            and parameter.kind is not inspect.Parameter.POSITIONAL_ONLY
        )
        for parameter in parameters
    )


def _require_history(event_bus: Any) -> None:
    if event_bus is None:
        raise PreconditionError("event_bus argument required")
    if not callable(getattr(event_bus, "get_all_events", None)):
        raise PreconditionError("event_bus.get_all_events must be callable")


def _describe(event: Any) -> str:
    if isinstance(event, Event):
        return event.model_dump_json()
    return repr(event)


# Base class attributes never treated as by-name event handlers
_RESERVED_NAMES = frozenset(name for name in dir(Projection) if not name.startswith("__"))
