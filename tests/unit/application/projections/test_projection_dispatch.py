"""Tests for Projection.project, the single dispatch path for all events."""

import asyncio

import pytest

from projectionist import Event, Projection, handles_event
from projectionist.domain import UnhandledEventError
from tests.support import TodoListProjection, item_added, settle


class CountingProjection(Projection):
    """Mixes sync, async and decorated handlers, returning values."""

    handles = ("itemAdded", "item-removed")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.calls: list[str] = []

    async def itemAdded(self, event: Event) -> str:
        await asyncio.sleep(0)
        self.calls.append(f"added:{event.name}")
        return "added"

    @handles_event("item-removed")
    def on_item_removed(self, event: Event) -> str:
        self.calls.append(f"removed:{event.name}")
        return "removed"


class NoReadinessView:
    """A view without any readiness members; treated as always ready."""

    def __init__(self):
        self.records: dict = {}

    def update_enforcing_new(self, key, update):
        self.records[key] = update(self.records.get(key))


class TestHandlerResolution:
    @pytest.mark.asyncio
    async def test_sync_handler_result_is_returned(self):
        projection = CountingProjection()

        result = await projection.project(Event(type="item-removed", name="a"), nowait=True)

        assert result == "removed"
        assert projection.calls == ["removed:a"]

    @pytest.mark.asyncio
    async def test_async_handler_is_awaited(self):
        projection = CountingProjection()

        result = await projection.project(item_added("a"), nowait=True)

        assert result == "added"
        assert projection.calls == ["added:a"]

    @pytest.mark.asyncio
    async def test_undeclared_type_fails_without_touching_view(self, todo_projection, view):
        with pytest.raises(UnhandledEventError) as exc_info:
            await todo_projection.project(Event(type="itemRemoved", listId="L1"), nowait=True)

        assert exc_info.value.event_type == "itemRemoved"
        assert view.size == 0

    @pytest.mark.asyncio
    async def test_undeclared_type_fails_before_waiting_for_readiness(self, todo_projection):
        with pytest.raises(UnhandledEventError):
            await asyncio.wait_for(
                todo_projection.project(Event(type="itemRemoved")),
                timeout=1,
            )

    @pytest.mark.asyncio
    async def test_handler_errors_propagate(self):
        class Failing(Projection):
            handles = ("itemAdded",)

            def itemAdded(self, event: Event) -> None:
                raise ValueError("bad item")

        with pytest.raises(ValueError, match="bad item"):
            await Failing().project(item_added("a"), nowait=True)

    @pytest.mark.asyncio
    async def test_subclass_override_of_decorated_handler_runs(self):
        class Base(Projection):
            handles = ("item-added",)

            @handles_event("item-added")
            def on_item_added(self, event: Event) -> str:
                return "base"

        class Child(Base):
            def on_item_added(self, event: Event) -> str:
                return "child"

        assert await Child().project(Event(type="item-added"), nowait=True) == "child"
        assert await Base().project(Event(type="item-added"), nowait=True) == "base"


class TestReadinessGate:
    @pytest.mark.asyncio
    async def test_live_event_waits_until_view_is_ready(self, todo_projection, view):
        live = asyncio.create_task(todo_projection.project(item_added("a")))
        await settle()

        assert not live.done()
        assert view.size == 0

        view.mark_as_ready()
        await asyncio.wait_for(live, timeout=1)

        assert await view.get("L1") == ["a"]

    @pytest.mark.asyncio
    async def test_waiting_live_events_all_run_after_readiness(self, todo_projection, view):
        live = [
            asyncio.create_task(todo_projection.project(item_added(name)))
            for name in ("a", "b", "c")
        ]
        await settle()

        assert view.size == 0

        view.mark_as_ready()
        await asyncio.wait_for(asyncio.gather(*live), timeout=1)

        assert sorted(await view.get("L1")) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_nowait_bypasses_readiness(self, todo_projection, view):
        await asyncio.wait_for(
            todo_projection.project(item_added("a"), nowait=True),
            timeout=1,
        )

        assert view.ready is False
        assert await view.get("L1", nowait=True) == ["a"]

    @pytest.mark.asyncio
    async def test_ready_view_dispatches_immediately(self, todo_projection, view):
        view.mark_as_ready()

        await asyncio.wait_for(todo_projection.project(item_added("a")), timeout=1)

        assert await view.get("L1") == ["a"]

    @pytest.mark.asyncio
    async def test_view_without_readiness_is_always_ready(self):
        view = NoReadinessView()
        projection = TodoListProjection(view=view)

        await asyncio.wait_for(projection.project(item_added("a")), timeout=1)

        assert view.records == {"L1": ["a"]}
