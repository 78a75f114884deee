"""View contract consumed by projections."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

UpdateFn = Callable[[Any], Any]
FilterFn = Callable[[Any], bool]


class View(ABC):
    """Abstract key-value materialized store owned by a projection.

    A view starts *not ready* while its projection replays history, and is
    switched to *ready* exactly once via ``mark_as_ready()``. Readers and
    live event dispatch await ``once_ready()`` until then.

    Projections only depend on the readiness members (``ready``,
    ``once_ready`` and, optionally, ``mark_as_ready``); the mutation and
    lookup methods are what projection handlers use to maintain state.
    Objects that do not subclass View but offer the same members are accepted
    too. A view without ``ready`` is treated as always ready.

    Update callbacks receive the current value. Returning None means the value
    was mutated in place; any other return value replaces it.
    """

    @property
    @abstractmethod
    def ready(self) -> bool:
        """True once the view has been marked as ready."""
        ...

    @abstractmethod
    def mark_as_ready(self) -> None:
        """Switch the view to ready, releasing everything awaiting it."""
        ...

    @abstractmethod
    async def once_ready(self) -> None:
        """Wait until the view is ready. Returns at once if it already is."""
        ...

    @property
    @abstractmethod
    def size(self) -> int:
        """Number of records in the view."""
        ...

    @property
    @abstractmethod
    def bytes(self) -> int:
        """Approximate size of the view contents in bytes."""
        ...

    @abstractmethod
    def has(self, key: Any) -> bool: ...

    @abstractmethod
    async def get(self, key: Any, *, nowait: bool = False) -> Any:
        """Get a record, waiting for readiness unless ``nowait`` is set."""
        ...

    @abstractmethod
    def create(self, key: Any, value: Any) -> None: ...

    @abstractmethod
    def update(self, key: Any, update: UpdateFn) -> None: ...

    @abstractmethod
    def update_enforcing_new(self, key: Any, update: UpdateFn) -> None: ...

    @abstractmethod
    def update_all(self, filter: FilterFn | None, update: UpdateFn) -> None: ...

    @abstractmethod
    def delete(self, key: Any) -> None: ...

    @abstractmethod
    def delete_all(self, filter: FilterFn | None = None) -> None: ...
