"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Registry of in-flight requests keyed by id.

Every request runs in its own task so it can be cancelled by id or by id
prefix (one prefix per screen), and an optional timeout bounds how long the
caller waits.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..errors import RequestCancelledError, RequestTimeoutError
from .metrics import NoOpRequestMetrics, RequestMetrics

logger = logging.getLogger("uitempo.requests")

T = TypeVar("T")


class RequestStats(BaseModel):
    """Snapshot of request counters."""

    model_config = ConfigDict(frozen=True)

    total: int = Field(default=0, ge=0)
    failed: int = Field(default=0, ge=0)
    cancelled: int = Field(default=0, ge=0)
    timed_out: int = Field(default=0, ge=0)
    active: int = Field(default=0, ge=0)


@dataclass(slots=True)
class _ActiveRequest:
    """Data type for one tracked request."""

    task: asyncio.Task[Any]
    essential: bool


class RequestController:
    """
    Tracks in-flight requests so they can be cancelled by id or prefix.

    Starting a request with an id that is already active cancels the older
    one first, so each id has at most one request in flight.
    """

    def __init__(
        self,
        *,
        default_timeout_s: float | None = 30.0,
        metrics: RequestMetrics | None = None,
    ) -> None:
        if default_timeout_s is not None and default_timeout_s <= 0:
            raise ValueError("default_timeout_s must be > 0")
        self._default_timeout_s = default_timeout_s
        self._metrics: RequestMetrics = metrics or NoOpRequestMetrics()
        self._active: dict[str, _ActiveRequest] = {}
        self._total = 0
        self._failed = 0
        self._cancelled = 0
        self._timed_out = 0

    async def request(
        self,
        id: str,
        operation: Callable[[], Awaitable[T]],
        *,
        timeout_s: float | None = None,
        essential: bool = False,
    ) -> T:
        """
        Run ``operation`` as the active request for ``id``.

        Args:
            id: Request identifier, usually ``<prefix><name>``.
            operation: Coroutine factory performing the actual work.
            timeout_s: Timeout override; the controller default applies when omitted.
            essential: Essential requests survive ``cancel_non_essential()``.

        Raises:
            RequestTimeoutError: The operation exceeded the timeout.
            RequestCancelledError: The request was cancelled through this controller.
        """
        timeout = self._default_timeout_s if timeout_s is None else timeout_s
        return await self._execute(id, operation, timeout_s=timeout, essential=essential)

    async def request_no_timeout(
        self,
        id: str,
        operation: Callable[[], Awaitable[T]],
        *,
        essential: bool = False,
    ) -> T:
        """Run a long operation as the active request for ``id`` without a timeout."""
        return await self._execute(id, operation, timeout_s=None, essential=essential)

    async def _execute(
        self,
        id: str,
        operation: Callable[[], Awaitable[T]],
        *,
        timeout_s: float | None,
        essential: bool,
    ) -> T:
        self.cancel(id)
        self._total += 1
        self._metrics.incr("requests_total")

        task = asyncio.get_running_loop().create_task(_invoke(operation, timeout_s))
        entry = _ActiveRequest(task=task, essential=essential)
        self._active[id] = entry
        try:
            return await task
        except asyncio.CancelledError:
            self._cancelled += 1
            self._metrics.incr("requests_cancelled_total")
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            raise RequestCancelledError(
                f"Request '{id}' was cancelled", request_id=id
            ) from None
        except TimeoutError:
            self._failed += 1
            self._timed_out += 1
            self._metrics.incr("requests_failed_total")
            self._metrics.incr("requests_timeout_total")
            logger.warning("Request %s timed out after %ss", id, timeout_s)
            raise RequestTimeoutError(
                f"Request '{id}' timed out after {timeout_s}s", request_id=id
            ) from None
        except Exception:
            self._failed += 1
            self._metrics.incr("requests_failed_total")
            raise
        finally:
            if self._active.get(id) is entry:
                del self._active[id]

    # Cancellation

    def cancel(self, id: str) -> bool:
        """Cancel the active request for ``id``. Returns whether one existed."""
        entry = self._active.pop(id, None)
        if entry is None:
            return False
        entry.task.cancel()
        return True

    def cancel_all(self, prefix: str | None = None) -> int:
        """Cancel every active request, or only those whose id starts with ``prefix``."""
        ids = [
            request_id
            for request_id in self._active
            if prefix is None or request_id.startswith(prefix)
        ]
        for request_id in ids:
            self.cancel(request_id)
        if ids:
            logger.debug("Cancelled %d request(s) (prefix=%r)", len(ids), prefix)
        return len(ids)

    def cancel_non_essential(self) -> int:
        """Cancel requests not marked essential, e.g. under memory pressure."""
        ids = [
            request_id
            for request_id, entry in self._active.items()
            if not entry.essential
        ]
        for request_id in ids:
            self.cancel(request_id)
        return len(ids)

    # Introspection

    def is_active(self, id: str) -> bool:
        return id in self._active

    @property
    def active_count(self) -> int:
        return len(self._active)

    @property
    def active_request_ids(self) -> list[str]:
        return list(self._active)

    def stats(self) -> RequestStats:
        return RequestStats(
            total=self._total,
            failed=self._failed,
            cancelled=self._cancelled,
            timed_out=self._timed_out,
            active=len(self._active),
        )

    def reset_stats(self) -> None:
        self._total = 0
        self._failed = 0
        self._cancelled = 0
        self._timed_out = 0


async def _invoke(operation: Callable[[], Awaitable[T]], timeout_s: float | None) -> T:
    if timeout_s is None:
        return await operation()
    return await asyncio.wait_for(operation(), timeout=timeout_s)


_REQUEST_CONTROLLER: RequestController | None = None
_REQUEST_CONTROLLER_LOCK = threading.Lock()


def get_request_controller() -> RequestController:
    """Return process-wide request controller singleton."""
    global _REQUEST_CONTROLLER
    if _REQUEST_CONTROLLER is not None:
        return _REQUEST_CONTROLLER
    with _REQUEST_CONTROLLER_LOCK:
        if _REQUEST_CONTROLLER is None:
            _REQUEST_CONTROLLER = RequestController()
    return _REQUEST_CONTROLLER


def reset_request_controller() -> None:
    """Reset request controller singleton (for tests)."""
    global _REQUEST_CONTROLLER
    with _REQUEST_CONTROLLER_LOCK:
        _REQUEST_CONTROLLER = None
