"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FIFO counting semaphore for bounding concurrency of one operation class.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


class AsyncSemaphore:
    """
    Counting semaphore with strict FIFO hand-off.

    ``signal()`` transfers the permit straight to the oldest waiter instead of
    bumping the counter, so a later ``try_wait()`` can never overtake a queued
    waiter. All state is touched from the event loop thread only.
    """

    def __init__(self, value: int) -> None:
        if value < 0:
            raise ValueError("value must be >= 0")
        self._permits = value
        self._waiters: deque[asyncio.Future[None]] = deque()

    @property
    def available_permits(self) -> int:
        return self._permits

    @property
    def waiting_count(self) -> int:
        return sum(1 for waiter in self._waiters if not waiter.done())

    def try_wait(self) -> bool:
        """Acquire one permit without suspending."""
        if self._permits > 0:
            self._permits -= 1
            return True
        return False

    async def wait(self) -> None:
        """Acquire one permit, suspending in FIFO order when none is free."""
        if self.try_wait():
            return

        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.done() and not waiter.cancelled():
                # Permit was handed over before the cancellation landed.
                self.signal()
            else:
                self._discard(waiter)
            raise

    async def wait_for(self, timeout_s: float) -> bool:
        """
        Acquire one permit or give up after ``timeout_s`` seconds.

        Returns:
            ``True`` when a permit was acquired, ``False`` on timeout. A permit
            handed over while the timeout fires is passed on, never lost.
        """
        if self.try_wait():
            return True
        try:
            await asyncio.wait_for(self.wait(), timeout=max(timeout_s, 0.0))
        except TimeoutError:
            return False
        return True

    def signal(self) -> None:
        """Release one permit, waking the oldest live waiter if any."""
        while self._waiters:
            waiter = self._waiters.popleft()
            if waiter.done():
                continue
            waiter.set_result(None)
            return
        self._permits += 1

    def _discard(self, waiter: asyncio.Future[None]) -> None:
        try:
            self._waiters.remove(waiter)
        except ValueError:
            pass

    async def __aenter__(self) -> AsyncSemaphore:
        await self.wait()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.signal()


async def with_semaphore(
    semaphore: AsyncSemaphore,
    operation: Callable[[], Awaitable[T]],
) -> T:
    """Run ``operation`` while holding one permit of ``semaphore``."""
    async with semaphore:
        return await operation()
