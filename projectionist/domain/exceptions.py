"""Exceptions raised by projections, views and event buses."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .event import Event


class ProjectionistError(Exception):
    """Base class for all projectionist errors."""

    pass


class ConfigurationError(ProjectionistError):
    """Raised when a projection class does not satisfy its handler contract.

    A projection must declare a non-empty ``handles`` list and own a callable
    handler for every declared event type. This is detected when the
    projection is constructed, before it can subscribe to anything.
    """

    pass


class UnhandledEventError(ProjectionistError):
    """Raised when an event is dispatched that has no registered handler.

    Attributes:
        event_type: The type of the event that could not be dispatched.
    """

    def __init__(self, event_type: str, projection_name: str):
        self.event_type = event_type
        self.projection_name = projection_name
        super().__init__(
            f"'{event_type}' handler is not defined on {projection_name} "
            "or is not callable"
        )


class RestoreError(ProjectionistError):
    """Raised when replaying historical events into a view fails.

    This is how ``restore`` and ``subscribe`` surface the underlying error:
    a failing handler or history fetch is never raised as-is. The original
    exception is available both as ``original`` and as the chained
    ``__cause__``, so inspect those instead of catching the handler's own
    exception type:

        >>> try:
        ...     await projection.subscribe(bus)
        ... except RestoreError as error:
        ...     if isinstance(error.original, ValueError):
        ...         ...

    Attributes:
        event: The event whose handler failed, or None when fetching the
            history itself failed.
        original: The underlying exception.
    """

    def __init__(
        self,
        projection_name: str,
        original: BaseException,
        event: "Event | None" = None,
    ):
        self.projection_name = projection_name
        self.original = original
        self.event = event
        if event is None:
            message = f"{projection_name} restore failed fetching history: {original!r}"
        else:
            message = (
                f"{projection_name} restore failed on '{getattr(event, 'type', '?')}' "
                f"event {getattr(event, 'id', '?')}: {original!r}"
            )
        super().__init__(message)


class PreconditionError(ProjectionistError):
    """Raised when an operation is invoked without what it needs.

    Examples are restoring from a missing event bus, a bus that lacks the
    bulk history fetch, or subscribing the same projection twice.
    """

    pass


class ViewError(ProjectionistError):
    """Base class for errors raised by views."""

    pass


class DuplicateKeyError(ViewError, KeyError):
    """Raised when creating a view record under a key that already exists."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Key '{key}' already exists")

    def __str__(self) -> str:
        return str(self.args[0])


class MissingKeyError(ViewError, KeyError):
    """Raised when updating a view record that does not exist."""

    def __init__(self, key: Any):
        self.key = key
        super().__init__(f"Key '{key}' does not exist")

    def __str__(self) -> str:
        return str(self.args[0])
