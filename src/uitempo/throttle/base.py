"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared machinery for coalescing throttles: delivery timestamps, the single
scheduled flush task and listener fan-out.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger("uitempo.throttle")

V = TypeVar("V")

Listener = Callable[[V], None]


class Throttle(Generic[V]):
    """
    Base class for throttles that publish a visible value of type ``V``.

    Subclasses decide what a flush does; this class guarantees that at most
    one flush task is outstanding and that it fires once the current window
    has elapsed.
    """

    def __init__(self, *, interval_ms: int) -> None:
        self._interval_ms = interval_ms
        self._interval_s = interval_ms / 1000.0
        self._last_delivery_at: float | None = None
        self._flush_task: asyncio.Task[None] | None = None
        self._listeners: list[Listener[V]] = []
        self.delivery_count = 0

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def has_scheduled_flush(self) -> bool:
        return self._flush_task is not None

    def subscribe(self, listener: Listener[V]) -> Callable[[], None]:
        """Call ``listener`` with every delivered value. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def close(self) -> None:
        """Cancel the scheduled flush; buffered state is kept."""
        self._cancel_flush()

    def _now(self) -> float:
        """Return monotonic timestamp used for window arithmetic."""
        return time.monotonic()

    def _elapsed_s(self, now: float) -> float:
        if self._last_delivery_at is None:
            return math.inf
        return now - self._last_delivery_at

    def _window_open(self, now: float) -> bool:
        return self._elapsed_s(now) >= self._interval_s

    def _publish(self, value: V) -> None:
        self._last_delivery_at = self._now()
        self.delivery_count += 1
        self._notify(value)

    def _notify(self, value: V) -> None:
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:  # noqa: BLE001
                logger.exception("Throttle listener failed (%s)", type(self).__name__)

    def _schedule_flush(self) -> None:
        if self._flush_task is not None:
            return
        remaining = self._interval_s - self._elapsed_s(self._now())
        delay_s = max(0.0, remaining) if math.isfinite(remaining) else 0.0
        self._flush_task = asyncio.get_running_loop().create_task(
            self._flush_later(delay_s)
        )

    async def _flush_later(self, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        self._flush_task = None
        self._on_flush()

    def _cancel_flush(self) -> None:
        if self._flush_task is not None:
            self._flush_task.cancel()
            self._flush_task = None

    def _on_flush(self) -> None:
        raise NotImplementedError
