"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

uitempo: keeps high-frequency state changes and view-bound async work under
control.

Quick start::

    from uitempo import ScreenScope, StreamingTextThrottle

    screen = ScreenScope("reader")
    answer = StreamingTextThrottle()
    answer.subscribe(panel.render)

    async def stream_answer() -> None:
        answer.start_stream()
        async for chunk in ai.stream(question):
            answer.append(chunk)
        answer.end_stream()

    screen.scope("ai_panel").run(stream_answer)
    ...
    screen.destroy()  # on unmount
"""

from .concurrency import (
    AsyncSemaphore,
    ScreenScope,
    TaskBag,
    TaskScope,
    with_semaphore,
)
from .errors import (
    RequestCancelledError,
    RequestError,
    RequestTimeoutError,
    UitempoError,
)
from .requests import (
    PageResult,
    PaginationController,
    PaginationLoader,
    PaginationState,
    RequestController,
    RequestStats,
    get_request_controller,
    reset_request_controller,
)
from .settings import TempoSettings
from .throttle import (
    LevelThrottle,
    PageNumberThrottle,
    SampleBatchThrottle,
    StreamingTextThrottle,
    ThrottledState,
    debounced,
    throttled_latest,
    unique_values,
)

__all__ = [
    "AsyncSemaphore",
    "with_semaphore",
    "TaskBag",
    "TaskScope",
    "ScreenScope",
    "ThrottledState",
    "LevelThrottle",
    "PageNumberThrottle",
    "StreamingTextThrottle",
    "SampleBatchThrottle",
    "unique_values",
    "throttled_latest",
    "debounced",
    "RequestController",
    "RequestStats",
    "get_request_controller",
    "reset_request_controller",
    "PaginationController",
    "PaginationState",
    "PaginationLoader",
    "PageResult",
    "TempoSettings",
    "UitempoError",
    "RequestError",
    "RequestTimeoutError",
    "RequestCancelledError",
]
