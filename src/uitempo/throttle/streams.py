"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Async-iterator operators for value streams: dedupe, throttle-latest and
debounce. The last value of a finite stream is always emitted.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import AsyncIterable, AsyncIterator
from typing import TypeVar

T = TypeVar("T")

_MISSING = object()


async def _next_item(iterator: AsyncIterator[T]) -> T:
    return await anext(iterator)


async def unique_values(stream: AsyncIterable[T]) -> AsyncIterator[T]:
    """Drop values equal to the one emitted just before them."""
    previous: object = _MISSING
    async for item in stream:
        if previous is not _MISSING and item == previous:
            continue
        previous = item
        yield item


async def throttled_latest(
    stream: AsyncIterable[T],
    *,
    interval_s: float,
) -> AsyncIterator[T]:
    """
    Emit at most one value per ``interval_s``, always the latest one.

    The first value passes through immediately; values arriving inside the
    window replace each other and the survivor is emitted when it closes.
    """
    iterator = aiter(stream)
    next_task: asyncio.Task[T] | None = None
    latest: object = _MISSING
    window_ends_at = 0.0
    try:
        while True:
            if next_task is None:
                next_task = asyncio.ensure_future(_next_item(iterator))
            timeout = None
            if latest is not _MISSING:
                timeout = max(0.0, window_ends_at - time.monotonic())
            done, _ = await asyncio.wait({next_task}, timeout=timeout)
            if not done:
                yield latest  # type: ignore[misc]
                latest = _MISSING
                window_ends_at = time.monotonic() + interval_s
                continue

            finished, next_task = next_task, None
            try:
                item = finished.result()
            except StopAsyncIteration:
                break
            if latest is _MISSING and time.monotonic() >= window_ends_at:
                yield item
                window_ends_at = time.monotonic() + interval_s
            else:
                latest = item
        if latest is not _MISSING:
            yield latest  # type: ignore[misc]
    finally:
        if next_task is not None:
            next_task.cancel()


async def debounced(
    stream: AsyncIterable[T],
    *,
    interval_s: float,
) -> AsyncIterator[T]:
    """Emit a value only after ``interval_s`` passes without a newer one."""
    iterator = aiter(stream)
    next_task: asyncio.Task[T] | None = None
    latest: object = _MISSING
    try:
        while True:
            if next_task is None:
                next_task = asyncio.ensure_future(_next_item(iterator))
            timeout = None if latest is _MISSING else interval_s
            done, _ = await asyncio.wait({next_task}, timeout=timeout)
            if not done:
                yield latest  # type: ignore[misc]
                latest = _MISSING
                continue

            finished, next_task = next_task, None
            try:
                latest = finished.result()
            except StopAsyncIteration:
                break
        if latest is not _MISSING:
            yield latest  # type: ignore[misc]
    finally:
        if next_task is not None:
            next_task.cancel()
