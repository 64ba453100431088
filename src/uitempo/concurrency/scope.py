"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Lifetime-bound task scopes.

A ``TaskScope`` belongs to one UI region. Work submitted through it is
cancelled when the region goes away, and nested regions get child scopes so
tearing down a parent tears down everything beneath it.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from .tasks import Operation, TaskBag

logger = logging.getLogger("uitempo.scope")


class TaskScope:
    """
    Cancellable bag of tasks bound to a logical lifetime.

    States are ``active`` and ``destroyed``; ``destroy()`` is the only
    transition and it is one-way. A destroyed scope silently ignores new work.
    """

    def __init__(self, id: str | None = None) -> None:
        self.id = id or uuid.uuid4().hex
        self._bag = TaskBag(name=f"scope:{self.id}")
        self._children: dict[str, TaskScope] = {}
        self._destroyed = False

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def active_task_count(self) -> int:
        return self._bag.count

    @property
    def child_ids(self) -> list[str]:
        return list(self._children)

    # Task submission

    def run(self, operation: Operation) -> asyncio.Task[None] | None:
        """Run ``operation`` inside this scope, or return ``None`` once destroyed."""
        if self._destroyed:
            self._log_dropped()
            return None
        return self._bag.run(operation)

    def run_throwing(self, operation: Operation) -> asyncio.Task[None] | None:
        """Like ``run`` but the returned task carries the operation's exception."""
        if self._destroyed:
            self._log_dropped()
            return None
        return self._bag.run_throwing(operation)

    def run_after(self, delay_s: float, operation: Operation) -> asyncio.Task[None] | None:
        """Run ``operation`` after ``delay_s`` seconds unless cancelled first."""
        if self._destroyed:
            self._log_dropped()
            return None
        return self._bag.run_after(delay_s, operation)

    async def wait_all(self, timeout_s: float | None = None) -> bool:
        """Wait for this scope's own tasks to finish."""
        return await self._bag.wait_all(timeout_s)

    # Child scopes

    def create_child_scope(self, id: str) -> TaskScope:
        """
        Create a child scope named ``{self.id}/{id}``.

        An existing child with the same name is destroyed and replaced. On a
        destroyed parent the child comes back already destroyed and untracked.
        """
        child = TaskScope(id=f"{self.id}/{id}")
        if self._destroyed:
            child.destroy()
            return child
        previous = self._children.pop(id, None)
        if previous is not None:
            previous.destroy()
        self._children[id] = child
        return child

    def child_scope(self, id: str) -> TaskScope | None:
        return self._children.get(id)

    def destroy_child_scope(self, id: str) -> None:
        child = self._children.pop(id, None)
        if child is not None:
            child.destroy()

    # Lifecycle

    def cancel_all(self) -> None:
        """Cancel every task here and in child scopes; the scope stays usable."""
        self._bag.cancel_all()
        for child in list(self._children.values()):
            child.cancel_all()

    def destroy(self) -> None:
        """Cancel all work, destroy all children and refuse further work."""
        if self._destroyed:
            return
        self._destroyed = True
        cancelled = self._bag.cancel_all()
        children = list(self._children.values())
        self._children.clear()
        for child in children:
            child.destroy()
        logger.debug("Scope %s destroyed, cancelled %d task(s)", self.id, cancelled)

    def _log_dropped(self) -> None:
        logger.debug("Scope %s is destroyed, ignoring new task", self.id)

    def __repr__(self) -> str:
        state = "destroyed" if self._destroyed else "active"
        return f"TaskScope(id={self.id!r}, state={state}, tasks={self.active_task_count})"
