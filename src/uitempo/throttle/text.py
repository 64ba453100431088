"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Append-only text throttle for streamed AI output.
"""

from __future__ import annotations

from .base import Throttle
from .contracts import TextThrottlePolicy


class StreamingTextThrottle(Throttle[str]):
    """
    Accumulates streamed chunks and moves them into ``text`` in batches.

    A chunk flushes immediately when the interval has elapsed or when it
    contains a sentence-boundary character; otherwise a flush is scheduled
    for the end of the current window.
    """

    def __init__(self, *, policy: TextThrottlePolicy | None = None) -> None:
        self._policy = policy or TextThrottlePolicy()
        super().__init__(interval_ms=self._policy.interval_ms)
        self._boundaries = frozenset(self._policy.boundary_chars)
        self._text = ""
        self._chunks: list[str] = []
        self._streaming = False

    @property
    def text(self) -> str:
        return self._text

    @property
    def buffer(self) -> str:
        return "".join(self._chunks)

    @property
    def is_streaming(self) -> bool:
        return self._streaming

    def start_stream(self) -> None:
        """Clear previous output and open a new window starting now."""
        self._cancel_flush()
        self._chunks.clear()
        self._streaming = True
        self._last_delivery_at = self._now()
        self._set_text("")

    def append(self, chunk: str) -> None:
        if not chunk:
            return
        self._chunks.append(chunk)
        if self._window_open(self._now()) or self._has_boundary(chunk):
            self.flush()
        else:
            self._schedule_flush()

    def end_stream(self) -> None:
        """Flush whatever is buffered and mark the stream finished."""
        self.flush()
        self._streaming = False

    def flush(self) -> None:
        """Move the buffer into ``text`` right away."""
        self._cancel_flush()
        if not self._chunks:
            return
        self._text += "".join(self._chunks)
        self._chunks.clear()
        self._publish(self._text)

    def reset(self) -> None:
        self._cancel_flush()
        self._chunks.clear()
        self._streaming = False
        self._last_delivery_at = None
        self.delivery_count = 0
        self._set_text("")

    def _has_boundary(self, chunk: str) -> bool:
        return any(char in self._boundaries for char in chunk)

    def _set_text(self, text: str) -> None:
        if self._text == text:
            return
        self._text = text
        self._notify(text)

    def _on_flush(self) -> None:
        self.flush()
