"""Domain primitives shared by projections, views and event buses.

- Event: Immutable record consumed by projections
- ProjectionistError and its subclasses: the error taxonomy
"""

from .event import Event, utc_now
from .exceptions import (
    ConfigurationError,
    DuplicateKeyError,
    MissingKeyError,
    PreconditionError,
    ProjectionistError,
    RestoreError,
    UnhandledEventError,
    ViewError,
)

__all__ = [
    "Event",
    "utc_now",
    "ConfigurationError",
    "DuplicateKeyError",
    "MissingKeyError",
    "PreconditionError",
    "ProjectionistError",
    "RestoreError",
    "UnhandledEventError",
    "ViewError",
]
