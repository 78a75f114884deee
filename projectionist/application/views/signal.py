"""Broadcast-once readiness latch."""

import asyncio


class ReadinessSignal:
    """One-shot notification that any number of tasks can await.

    The signal starts unset and can be set exactly once; setting it again
    is a no-op. Every task waiting on it is released by the single
    transition, and waiting on an already-set signal returns immediately.

    Example:
        >>> signal = ReadinessSignal()
        >>> waiter = asyncio.create_task(signal.wait())
        >>> signal.set()
        >>> await waiter
    """

    __slots__ = ("_event",)

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def is_set(self) -> bool:
        return self._event.is_set()

    def set(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Suspend until the signal is set. Returns at once if already set."""
        if self._event.is_set():
            return
        await self._event.wait()
