"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Batching throttle for waveform samples.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable

from .base import Throttle
from .contracts import BatchThrottlePolicy


class SampleBatchThrottle(Throttle[list[float]]):
    """
    Buffers samples and publishes them in batches.

    A batch is flushed once ``batch_size`` samples are buffered or the
    interval has elapsed. Visible samples form a ring that keeps only the
    newest ``max_samples`` values.
    """

    def __init__(self, *, policy: BatchThrottlePolicy | None = None) -> None:
        self._policy = policy or BatchThrottlePolicy()
        super().__init__(interval_ms=self._policy.interval_ms)
        self._samples: deque[float] = deque(maxlen=self._policy.max_samples)
        self._buffer: list[float] = []

    @property
    def samples(self) -> list[float]:
        return list(self._samples)

    @property
    def buffered_count(self) -> int:
        return len(self._buffer)

    def append(self, sample: float) -> None:
        self._buffer.append(sample)
        self._after_buffering()

    def extend(self, samples: Iterable[float]) -> None:
        self._buffer.extend(samples)
        if self._buffer:
            self._after_buffering()

    def flush(self) -> None:
        self._cancel_flush()
        if not self._buffer:
            return
        self._samples.extend(self._buffer)
        self._buffer.clear()
        self._publish(list(self._samples))

    def reset(self) -> None:
        self._cancel_flush()
        had_samples = bool(self._samples)
        self._samples.clear()
        self._buffer.clear()
        self._last_delivery_at = None
        self.delivery_count = 0
        if had_samples:
            self._notify([])

    def _after_buffering(self) -> None:
        if len(self._buffer) >= self._policy.batch_size or self._window_open(self._now()):
            self.flush()
        else:
            self._schedule_flush()

    def _on_flush(self) -> None:
        self.flush()
