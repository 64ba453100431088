"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Screen-level scope: a main task scope, named region scopes and a request
namespace that is cancelled together when the screen is torn down.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from ..errors import RequestCancelledError
from ..requests.controller import RequestController, get_request_controller
from .scope import TaskScope
from .tasks import Operation

logger = logging.getLogger("uitempo.scope")

T = TypeVar("T")


class ScreenScope:
    """Owns every task and tagged request started on behalf of one screen."""

    def __init__(
        self,
        screen_id: str,
        *,
        requests: RequestController | None = None,
    ) -> None:
        self.screen_id = screen_id
        self.request_prefix = f"screen_{screen_id}_"
        self._requests = requests
        self._main = TaskScope(id=f"screen:{screen_id}")
        self._named: dict[str, TaskScope] = {}
        self._destroyed = False

    @property
    def is_destroyed(self) -> bool:
        return self._destroyed

    @property
    def main_scope(self) -> TaskScope:
        return self._main

    @property
    def scope_names(self) -> list[str]:
        return list(self._named)

    @property
    def requests(self) -> RequestController:
        if self._requests is None:
            self._requests = get_request_controller()
        return self._requests

    # Main scope shortcuts

    def run(self, operation: Operation) -> asyncio.Task[None] | None:
        return self._main.run(operation)

    def run_throwing(self, operation: Operation) -> asyncio.Task[None] | None:
        return self._main.run_throwing(operation)

    def run_after(self, delay_s: float, operation: Operation) -> asyncio.Task[None] | None:
        return self._main.run_after(delay_s, operation)

    # Named scopes

    def scope(self, name: str) -> TaskScope:
        """Return the named scope, creating it on first use."""
        existing = self._named.get(name)
        if existing is not None:
            return existing
        created = TaskScope(id=f"{self.screen_id}/{name}")
        if self._destroyed:
            created.destroy()
            return created
        self._named[name] = created
        return created

    def destroy_scope(self, name: str) -> None:
        scope = self._named.pop(name, None)
        if scope is not None:
            scope.destroy()

    # Requests

    def request_id(self, name: str) -> str:
        """Prefix ``name`` with this screen's request namespace."""
        return f"{self.request_prefix}{name}"

    async def request(
        self,
        name: str,
        operation: Callable[[], Awaitable[T]],
        *,
        timeout_s: float | None = None,
        essential: bool = False,
    ) -> T:
        """Run ``operation`` as a request tagged with this screen's prefix."""
        if self._destroyed:
            raise RequestCancelledError(
                f"Screen '{self.screen_id}' is destroyed",
                request_id=self.request_id(name),
            )
        return await self.requests.request(
            self.request_id(name),
            operation,
            timeout_s=timeout_s,
            essential=essential,
        )

    def cancel_all_requests(self) -> int:
        return self.requests.cancel_all(prefix=self.request_prefix)

    # Lifecycle

    def cancel_all(self) -> None:
        """Cancel all tasks and requests; the screen stays usable."""
        self._main.cancel_all()
        for scope in list(self._named.values()):
            scope.cancel_all()
        self.cancel_all_requests()

    def destroy(self) -> None:
        """Tear down the screen: tasks, named scopes and tagged requests."""
        if self._destroyed:
            return
        self._destroyed = True
        self._main.destroy()
        named = list(self._named.values())
        self._named.clear()
        for scope in named:
            scope.destroy()
        cancelled = self.cancel_all_requests()
        logger.debug(
            "Screen %s destroyed (%d scope(s), %d request(s))",
            self.screen_id,
            len(named),
            cancelled,
        )
