"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Task bag: owns a set of asyncio tasks and cancels them together.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger("uitempo.scope")

Operation = Callable[[], Awaitable[None]]


class TaskBag:
    """
    Container that tracks fire-and-forget tasks until they finish.

    Tasks are split into two collections: ``run`` tasks whose failures are
    only logged, and ``run_throwing`` tasks whose exception stays on the
    returned task for the caller to observe.
    """

    def __init__(self, *, name: str = "bag") -> None:
        self._name = name
        self._tasks: set[asyncio.Task[None]] = set()
        self._throwing_tasks: set[asyncio.Task[None]] = set()
        # Cancelled but not yet unwound; only wait_all looks at these.
        self._cancelling: set[asyncio.Task[None]] = set()

    @property
    def count(self) -> int:
        return len(self._tasks) + len(self._throwing_tasks)

    def run(self, operation: Operation) -> asyncio.Task[None]:
        """Spawn ``operation`` as a tracked task that never surfaces errors."""
        task = asyncio.get_running_loop().create_task(self._guarded(operation))
        self._track(task, self._tasks)
        return task

    def run_throwing(self, operation: Operation) -> asyncio.Task[None]:
        """Spawn ``operation`` as a tracked task that keeps its exception."""
        task = asyncio.get_running_loop().create_task(self._call(operation))
        self._track(task, self._throwing_tasks)
        task.add_done_callback(self._report_failure)
        return task

    def run_after(self, delay_s: float, operation: Operation) -> asyncio.Task[None]:
        """Spawn ``operation`` after ``delay_s``; cancellation during the delay skips it."""

        async def _delayed() -> None:
            await asyncio.sleep(max(0.0, delay_s))
            await operation()

        return self.run(_delayed)

    def cancel_all(self) -> int:
        """Cancel every tracked task and forget them. Returns the number cancelled."""
        cancelled = 0
        for task in (*self._tasks, *self._throwing_tasks):
            if task.cancel():
                cancelled += 1
                self._track(task, self._cancelling)
        self._tasks.clear()
        self._throwing_tasks.clear()
        return cancelled

    async def wait_all(self, timeout_s: float | None = None) -> bool:
        """
        Wait until tracked tasks finish, including cancelled ones still unwinding.

        Returns:
            ``True`` when nothing is left running, ``False`` on timeout.
        """
        pending = {*self._tasks, *self._throwing_tasks, *self._cancelling}
        if not pending:
            return True
        _, still_running = await asyncio.wait(pending, timeout=timeout_s)
        return not still_running

    def _track(self, task: asyncio.Task[None], bucket: set[asyncio.Task[None]]) -> None:
        bucket.add(task)
        task.add_done_callback(bucket.discard)

    async def _call(self, operation: Operation) -> None:
        await operation()

    async def _guarded(self, operation: Operation) -> None:
        try:
            await operation()
        except asyncio.CancelledError:
            raise
        except Exception:  # noqa: BLE001
            logger.exception("Task in %s failed", self._name)

    def _report_failure(self, task: asyncio.Task[None]) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning("Task in %s raised %r", self._name, error)
