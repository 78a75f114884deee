"""Central test fixtures shared by the unit tests."""

import pytest

from projectionist import Event, InMemoryEventBus, InMemoryView
from tests.support import TodoListProjection, item_added


@pytest.fixture
def history() -> list[Event]:
    """Two items added to list L1, in order."""
    return [item_added("a"), item_added("b")]


@pytest.fixture
def event_bus(history: list[Event]) -> InMemoryEventBus:
    """Create an in-memory event bus seeded with the history."""
    return InMemoryEventBus(history)


@pytest.fixture
def view() -> InMemoryView:
    """Create an empty, not-ready in-memory view."""
    return InMemoryView()


@pytest.fixture
def todo_projection(view: InMemoryView) -> TodoListProjection:
    """Create a TodoListProjection over the view fixture."""
    return TodoListProjection(view=view)
