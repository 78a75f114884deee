"""Tests for ProjectionScenario."""

import pytest

from projectionist import Event
from projectionist.domain import RestoreError
from projectionist.testing import ProjectionScenario
from tests.support import TodoListProjection, item_added


class StrictTodoListProjection(TodoListProjection):
    def itemAdded(self, event: Event) -> None:
        if event.name == "boom":
            raise ValueError("cannot add boom")
        super().itemAdded(event)


@pytest.mark.asyncio
async def test_view_reflects_given_events():
    async with ProjectionScenario(TodoListProjection()) as scenario:
        scenario.given(item_added("a"), item_added("b")).should_have_view(
            "L1", lambda items: items == ["a", "b"]
        )


@pytest.mark.asyncio
async def test_projection_state_predicate():
    async with ProjectionScenario(TodoListProjection()) as scenario:
        scenario.given(item_added("a")).should_have_state(lambda p: p.view.ready)


@pytest.mark.asyncio
async def test_no_events_leaves_empty_ready_view():
    scenario = ProjectionScenario(TodoListProjection())

    scenario.given_no_events().should_succeed().should_have_state(
        lambda p: p.view.size == 0 and p.view.ready
    )

    await scenario.execute_scenario()


@pytest.mark.asyncio
async def test_restore_failures_are_collected():
    scenario = ProjectionScenario(StrictTodoListProjection())

    scenario.given(item_added("a"), item_added("boom")).should_raise(
        RestoreError
    ).should_have_view("L1", lambda items: items == ["a"])

    await scenario.execute_scenario()


@pytest.mark.asyncio
async def test_unmet_view_expectation_fails():
    scenario = ProjectionScenario(TodoListProjection())

    scenario.given(item_added("a")).should_have_view("L1", lambda items: items == ["b"])

    with pytest.raises(AssertionError, match="view\\['L1'\\]"):
        await scenario.execute_scenario()


@pytest.mark.asyncio
async def test_unexpected_error_fails_should_succeed():
    scenario = ProjectionScenario(StrictTodoListProjection())

    scenario.given(item_added("boom")).should_succeed()

    with pytest.raises(AssertionError, match="should not raise"):
        await scenario.execute_scenario()


@pytest.mark.asyncio
async def test_errors_inside_block_propagate():
    with pytest.raises(RuntimeError, match="inside"):
        async with ProjectionScenario(TodoListProjection()):
            raise RuntimeError("inside")
