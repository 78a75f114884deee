"""Tests for ReadinessSignal."""

import asyncio

import pytest

from projectionist.application.views import ReadinessSignal
from tests.support import settle


class TestReadinessSignal:
    def test_starts_unset(self):
        assert ReadinessSignal().is_set is False

    def test_set_is_idempotent(self):
        signal = ReadinessSignal()

        signal.set()
        signal.set()

        assert signal.is_set is True

    @pytest.mark.asyncio
    async def test_releases_every_waiter(self):
        signal = ReadinessSignal()
        waiters = [asyncio.create_task(signal.wait()) for _ in range(3)]
        await settle()

        assert not any(waiter.done() for waiter in waiters)

        signal.set()
        await asyncio.wait_for(asyncio.gather(*waiters), timeout=1)

    @pytest.mark.asyncio
    async def test_wait_returns_immediately_once_set(self):
        signal = ReadinessSignal()
        signal.set()

        await asyncio.wait_for(signal.wait(), timeout=1)
