import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from .domain import ConfigurationError

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)

# Attribute set on decorated handler methods, holding the event types they handle
_HANDLES_EVENT_TYPES_ATTR = "_handles_event_types"


class MessageRouter:
    """Explicit table mapping event type strings to handler functions.

    The table is filled once per projection class, on first construction,
    and never changes afterwards. Routing is a single dictionary lookup on
    ``event.type``.
    """

    __slots__ = ("_handlers",)

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[..., Any]] = {}

    @property
    def handlers(self) -> Mapping[str, Callable[..., Any]]:
        """Read-only view of the registered handlers."""
        return dict(self._handlers)

    def register(self, event_type: str, handler: Callable[..., Any]) -> None:
        """Register a handler for an event type, replacing any previous one.

        Args:
            event_type: The event type string this handler processes.
            handler: Unbound function called as ``handler(instance, event)``.
        """
        self._handlers[event_type] = handler

    def has_handler(self, event_type: str) -> bool:
        return event_type in self._handlers

    def resolve(self, event_type: str) -> Callable[..., Any] | None:
        """Get the handler for an event type, or None if there is none."""
        return self._handlers.get(event_type)


class HandlerDecorator:
    """Decorator marking a method as the handler for one or more event types.

    Unlike type-annotation based routing, events are routed on their string
    ``type``, so the decorator takes the type names explicitly.
    """

    def __init__(self, marker_attr: str):
        self.marker_attr = marker_attr

    def __call__(self, *event_types: str) -> Callable[[Callable[..., T]], Callable[..., T]]:
        """Create a decorator for the given event types.

        Args:
            *event_types: Event type strings handled by the decorated method.

        Returns:
            A decorator attaching the event types to the method.

        Raises:
            TypeError: If no event type is given, or one is not a non-empty
                string (including using the decorator without arguments).
        """
        if not event_types:
            raise TypeError("handles_event requires at least one event type")
        for event_type in event_types:
            if not isinstance(event_type, str) or not event_type:
                raise TypeError(
                    f"handles_event expects event type strings, got {event_type!r}"
                )

        def decorate(func: Callable[..., T]) -> Callable[..., T]:
            existing = getattr(func, self.marker_attr, ())
            setattr(func, self.marker_attr, (*existing, *event_types))
            return func

        return decorate


handles_event = HandlerDecorator(_HANDLES_EVENT_TYPES_ATTR)

handles_event.__doc__ = """Decorator marking a method as an event handler.

Methods may also be left undecorated and named after the event type they
handle; the decorator is needed when the event type is not a valid or
desirable Python method name.

Example:
    >>> class TodoListProjection(Projection):
    ...     handles = ("itemAdded", "item-removed")
    ...
    ...     def itemAdded(self, event: Event) -> None:
    ...         ...
    ...
    ...     @handles_event("item-removed")
    ...     async def on_item_removed(self, event: Event) -> None:
    ...         ...
"""


def _decorated_handlers(cls: type) -> dict[str, Callable[..., Any]]:
    """Collect decorated handlers, letting subclasses override their bases.

    Handlers are tracked by attribute name and looked up on ``cls`` at the
    end, so a subclass redefining a decorated method replaces the base
    implementation even without repeating the decorator. Re-decorating a
    name drops the event types the base version was registered for.
    """
    names: dict[str, str] = {}
    for klass in reversed(cls.__mro__):
        local: dict[str, str] = {}
        for name, value in klass.__dict__.items():
            event_types = getattr(value, _HANDLES_EVENT_TYPES_ATTR, None)
            if not event_types:
                continue
            for inherited in [t for t, n in names.items() if n == name]:
                del names[inherited]
            for event_type in event_types:
                if event_type in local:
                    raise ConfigurationError(
                        f"{cls.__name__}: '{event_type}' is handled by both "
                        f"{klass.__name__}.{local[event_type]} and {klass.__name__}.{name}"
                    )
                local[event_type] = name
                names[event_type] = name
    handlers = {event_type: getattr(cls, name, None) for event_type, name in names.items()}
    return {event_type: h for event_type, h in handlers.items() if callable(h)}


def setup_event_routing(
    cls: type,
    event_types: Iterable[str],
    reserved: Iterable[str] = (),
) -> MessageRouter:
    """Build the routing table for a projection class.

    Decorated handlers are registered first. Each declared event type left
    without a decorated handler then falls back to a callable attribute of the
    same name as the type.

    Args:
        cls: The projection class to set up routing for.
        event_types: The event types the class declares it handles.
        reserved: Attribute names never used as by-name handlers, such as
            the public methods of the projection base class.

    Returns:
        A configured MessageRouter. Declared types for which no handler could
        be found are simply absent; validation reports them.

    Raises:
        ConfigurationError: If a decorated handler targets an undeclared type,
            or two handlers in one class target the same type.
    """
    declared = set(event_types)
    excluded = set(reserved)
    router = MessageRouter()

    for event_type, handler in _decorated_handlers(cls).items():
        if event_type not in declared:
            raise ConfigurationError(
                f"{cls.__name__}.{handler.__name__} handles '{event_type}' "
                "which is not listed in handles"
            )
        router.register(event_type, handler)
        LOGGER.debug("Registered %s.%s for '%s'", cls.__name__, handler.__name__, event_type)

    for event_type in declared:
        if router.has_handler(event_type):
            continue
        handler = None
        if event_type.isidentifier() and event_type not in excluded:
            handler = getattr(cls, event_type, None)
        if callable(handler):
            router.register(event_type, handler)

    return router


def validate_routing(cls: type, event_types: Iterable[str], router: MessageRouter) -> None:
    """Check that every declared event type has a callable handler.

    Raises:
        ConfigurationError: If any declared type is missing a handler.
    """
    missing = sorted(t for t in event_types if not router.has_handler(t))
    if missing:
        raise ConfigurationError(
            f"{cls.__name__} has no handler for declared event type(s): "
            + ", ".join(f"'{t}'" for t in missing)
        )
