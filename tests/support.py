"""Projections and helpers shared across test modules."""

import asyncio

from projectionist import Event, Projection


class TodoListProjection(Projection):
    """Appends item names to a list keyed by the event's list id."""

    handles = ("itemAdded",)

    def itemAdded(self, event: Event) -> None:
        self.view.update_enforcing_new(
            event.listId, lambda items: (items or []) + [event.name]
        )


def item_added(name: str, list_id: str = "L1") -> Event:
    return Event(type="itemAdded", listId=list_id, name=name)


async def settle(rounds: int = 5) -> None:
    """Let every runnable task advance to its next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)
