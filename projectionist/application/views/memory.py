"""In-memory view implementation."""

from typing import Any

from pydantic_core import to_json

from ...domain import DuplicateKeyError, MissingKeyError
from .signal import ReadinessSignal
from .view import FilterFn, UpdateFn, View


class InMemoryView(View):
    """Dictionary-backed view, the default view of every projection.

    Records live in a plain dict keyed by any hashable, non-empty key.
    Nothing is persisted: a process restart starts from an empty,
    not-ready view that its projection rebuilds by replaying history.

    This implementation:
    - Is not thread safe (single event loop only)
    - Does not lock records against concurrent handlers
    - Estimates ``bytes`` by JSON-encoding keys and values

    Example:
        >>> view = InMemoryView()
        >>> view.create("L1", [])
        >>> view.update("L1", lambda items: items.append("a"))
        >>> view.mark_as_ready()
        >>> await view.get("L1")
        ['a']
    """

    def __init__(self) -> None:
        self._records: dict[Any, Any] = {}
        self._ready = ReadinessSignal()

    @property
    def ready(self) -> bool:
        return self._ready.is_set

    def mark_as_ready(self) -> None:
        self._ready.set()

    async def once_ready(self) -> None:
        await self._ready.wait()

    @property
    def size(self) -> int:
        return len(self._records)

    @property
    def bytes(self) -> int:
        return sum(
            len(to_json(key, fallback=str)) + len(to_json(value, fallback=str))
            for key, value in self._records.items()
        )

    def has(self, key: Any) -> bool:
        return key in self._records

    async def get(self, key: Any, *, nowait: bool = False) -> Any:
        """Get a record by key.

        Args:
            key: The record key.
            nowait: Read immediately even if the view is still restoring.

        Returns:
            The stored value, or None if there is no record for the key.

        Raises:
            ValueError: If the key is empty.
        """
        _require_key(key)
        if not self.ready and not nowait:
            await self.once_ready()
        return self._records.get(key)

    def create(self, key: Any, value: Any) -> None:
        """Create a new record.

        Raises:
            ValueError: If the key is empty.
            TypeError: If the value is callable (likely a misplaced update).
            DuplicateKeyError: If a record with this key already exists.
        """
        _require_key(key)
        if callable(value):
            raise TypeError("value argument must not be callable")
        if key in self._records:
            raise DuplicateKeyError(key)
        self._records[key] = value

    def update(self, key: Any, update: UpdateFn) -> None:
        """Update an existing record.

        Raises:
            ValueError: If the key is empty.
            TypeError: If update is not callable.
            MissingKeyError: If there is no record with this key.
        """
        _require_key(key)
        _require_callable(update)
        if key not in self._records:
            raise MissingKeyError(key)
        self._apply(key, update)

    def update_enforcing_new(self, key: Any, update: UpdateFn) -> None:
        """Update a record, creating it from ``update(None)`` if it is missing."""
        _require_key(key)
        _require_callable(update)
        if key not in self._records:
            self.create(key, update(None))
            return
        self._apply(key, update)

    def update_all(self, filter: FilterFn | None, update: UpdateFn) -> None:
        """Update every record whose value matches the filter (all if None)."""
        _require_callable(update)
        for key, value in list(self._records.items()):
            if filter is None or filter(value):
                self._apply(key, update)

    def delete(self, key: Any) -> None:
        _require_key(key)
        self._records.pop(key, None)

    def delete_all(self, filter: FilterFn | None = None) -> None:
        """Delete every record whose value matches the filter (all if None)."""
        for key, value in list(self._records.items()):
            if filter is None or filter(value):
                del self._records[key]

    def _apply(self, key: Any, update: UpdateFn) -> None:
        updated = update(self._records[key])
        if updated is not None:
            self._records[key] = updated

    def __str__(self) -> str:
        size = self.size
        return f"{size} record{'' if size == 1 else 's'}, {self.bytes} bytes"


def _require_key(key: Any) -> None:
    if key is None or key == "":
        raise ValueError("key argument required")


def _require_callable(update: Any) -> None:
    if not callable(update):
        raise TypeError("update argument must be callable")
