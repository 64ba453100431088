"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Debounced, single-flight pagination.

``PaginationController`` collapses bursts of "load more" triggers into one
delayed action and keeps at most one action per request id in flight.
``PaginationState`` and ``PaginationLoader`` layer page bookkeeping on top.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..concurrency.scope import TaskScope

logger = logging.getLogger("uitempo.pagination")

T = TypeVar("T")

Action = Callable[[], Awaitable[None]]

DEFAULT_REQUEST_ID = "default"


class PaginationController:
    """
    Debounce + dedupe + single-flight dispatcher for page loads.

    Work is spawned through a ``TaskScope``; pass the owning view's scope so
    pending loads die with the view. Each execution records the generation it
    started in, and ``reset()`` moves to a new generation so completions of
    actions started before the reset leave the fresh state untouched.
    """

    def __init__(
        self,
        *,
        scope: TaskScope | None = None,
        debounce_delay_s: float = 0.3,
    ) -> None:
        if debounce_delay_s < 0:
            raise ValueError("debounce_delay_s must be >= 0")
        self._owns_scope = scope is None
        self._scope = scope or TaskScope()
        self._debounce_delay_s = debounce_delay_s
        self._pending_task: asyncio.Task[None] | None = None
        self._executing: dict[str, int] = {}
        self._generation = 0
        self._last_request_at: float | None = None

    @property
    def scope(self) -> TaskScope:
        return self._scope

    @property
    def is_loading(self) -> bool:
        return bool(self._executing)

    @property
    def executing_request_id(self) -> str | None:
        """Most recently started request that is still executing."""
        if not self._executing:
            return None
        return next(reversed(self._executing))

    @property
    def last_request_at(self) -> float | None:
        return self._last_request_at

    @property
    def has_pending(self) -> bool:
        return self._pending_task is not None

    def is_executing(self, request_id: str) -> bool:
        return request_id in self._executing

    def load_more(
        self,
        action: Action,
        *,
        request_id: str = DEFAULT_REQUEST_ID,
        delay_s: float | None = None,
    ) -> asyncio.Task[None] | None:
        """
        Run ``action`` after a quiet period, replacing any pending load.

        Returns the scheduled task (its exception is the action's exception),
        or ``None`` when the same request is executing or the scope is gone.
        """
        if self.is_executing(request_id):
            return None
        self.cancel()
        delay = self._debounce_delay_s if delay_s is None else max(0.0, delay_s)

        async def _debounced() -> None:
            await asyncio.sleep(delay)
            if self._pending_task is asyncio.current_task():
                self._pending_task = None
            # A same-id load may have started while this one slept.
            if self.is_executing(request_id):
                logger.debug("Skipping %s: already executing", request_id)
                return
            generation = self._begin(request_id)
            try:
                await action()
            finally:
                self._finish(request_id, generation)

        task = self._scope.run_throwing(_debounced)
        self._pending_task = task
        return task

    def load_immediately(
        self,
        action: Action,
        *,
        request_id: str = DEFAULT_REQUEST_ID,
    ) -> asyncio.Task[None] | None:
        """Run ``action`` now, still honouring single-flight for ``request_id``."""
        if self.is_executing(request_id):
            return None
        self.cancel()
        if self._scope.is_destroyed:
            return None
        generation = self._begin(request_id)

        async def _immediate() -> None:
            await action()

        task = self._scope.run_throwing(_immediate)
        if task is None:
            self._finish(request_id, generation)
            return None
        task.add_done_callback(lambda _task: self._finish(request_id, generation))
        return task

    def cancel(self) -> None:
        """Cancel the pending debounced load; executing actions keep running."""
        if self._pending_task is not None:
            self._pending_task.cancel()
            self._pending_task = None

    def reset(self) -> None:
        """Cancel pending work and forget all loading state."""
        self.cancel()
        self._executing.clear()
        self._generation += 1
        self._last_request_at = None

    def close(self) -> None:
        """Reset and, if this controller created its scope, destroy it."""
        self.reset()
        if self._owns_scope:
            self._scope.destroy()

    def _begin(self, request_id: str) -> int:
        self._generation += 1
        self._executing[request_id] = self._generation
        self._last_request_at = time.time()
        return self._generation

    def _finish(self, request_id: str, generation: int) -> None:
        if self._executing.get(request_id) == generation:
            del self._executing[request_id]


class PageResult(BaseModel, Generic[T]):
    """One page returned by a page loader."""

    model_config = ConfigDict(frozen=True)

    items: list[T] = Field(default_factory=list)
    total: int | None = Field(default=None, ge=0)


PageLoader = Callable[[int, int], Awaitable[PageResult[T]]]


@dataclass
class PaginationState(Generic[T]):
    """
    Accumulated pages of one list.

    ``current_page`` is the next page to request. ``has_more`` comes from
    ``total`` when known, otherwise from whether the last page was full.
    Items are appended as-is; duplicate fetches are not deduplicated.
    """

    items: list[T] = field(default_factory=list)
    current_page: int = 1
    page_size: int = 20
    total_count: int = 0
    has_more: bool = True
    is_loading: bool = False
    error: BaseException | None = None

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ValueError("page_size must be > 0")

    @property
    def is_empty(self) -> bool:
        return not self.items and not self.is_loading

    @property
    def can_load_more(self) -> bool:
        return self.has_more and not self.is_loading

    def reset(self) -> None:
        self.items = []
        self.current_page = 1
        self.total_count = 0
        self.has_more = True
        self.is_loading = False
        self.error = None

    def append_page(self, new_items: list[T], total: int | None = None) -> None:
        self.items.extend(new_items)
        self.current_page += 1
        self._update_has_more(new_items, total)

    def replace_page(self, new_items: list[T], total: int | None = None) -> None:
        self.items = list(new_items)
        self.current_page = 2
        self._update_has_more(new_items, total)

    def _update_has_more(self, new_items: list[T], total: int | None) -> None:
        if total is not None:
            self.total_count = total
            self.has_more = len(self.items) < total
        else:
            self.has_more = len(new_items) >= self.page_size


class PaginationLoader(Generic[T]):
    """Drives a ``PaginationState`` through a ``PaginationController``."""

    def __init__(
        self,
        *,
        page_size: int = 20,
        controller: PaginationController | None = None,
    ) -> None:
        self._controller = controller or PaginationController()
        self.state: PaginationState[T] = PaginationState(page_size=page_size)
        self._generation = 0

    @property
    def controller(self) -> PaginationController:
        return self._controller

    def load_next_page(self, loader: PageLoader[T]) -> asyncio.Task[None] | None:
        """Debounced load of ``state.current_page``; no-op when nothing more to load."""
        if not self.state.can_load_more:
            return None
        page = self.state.current_page
        generation = self._generation

        async def _load() -> None:
            await self._run_page(loader, page, generation, replace=False)

        return self._controller.load_more(_load, request_id=f"page_{page}")

    def refresh(self, loader: PageLoader[T]) -> asyncio.Task[None] | None:
        """Reload the first page immediately."""
        generation = self._generation

        async def _refresh() -> None:
            await self._run_page(loader, 1, generation, replace=True)

        return self._controller.load_immediately(_refresh, request_id="refresh")

    def cancel(self) -> None:
        self._controller.cancel()
        self.state.is_loading = False

    def reset(self) -> None:
        """Forget all pages; loads still in flight no longer touch ``state``."""
        self._generation += 1
        self._controller.reset()
        self.state.reset()

    async def _run_page(
        self,
        loader: PageLoader[T],
        page: int,
        generation: int,
        *,
        replace: bool,
    ) -> None:
        if generation != self._generation:
            return
        self.state.is_loading = True
        self.state.error = None
        try:
            result = await loader(page, self.state.page_size)
        except Exception as error:  # noqa: BLE001
            if generation == self._generation:
                logger.warning("Loading page %d failed: %r", page, error)
                self.state.error = error
        else:
            if generation != self._generation:
                logger.debug("Dropping page %d loaded before reset", page)
            elif replace:
                self.state.replace_page(result.items, total=result.total)
            else:
                self.state.append_page(result.items, total=result.total)
        finally:
            # After a reset the fresh state already reports not loading.
            if generation == self._generation:
                self.state.is_loading = False
