"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Coalescing throttles that keep high-frequency state changes away from the
view layer while always delivering the final value.
"""

from .base import Listener, Throttle
from .batch import SampleBatchThrottle
from .contracts import (
    CJK_BOUNDARY_CHARS,
    DEFAULT_BOUNDARY_CHARS,
    LATIN_BOUNDARY_CHARS,
    BatchThrottlePolicy,
    LevelThrottlePolicy,
    PageThrottlePolicy,
    TextThrottlePolicy,
    ThrottlePolicy,
)
from .state import LevelThrottle, PageNumberThrottle, ThrottledState
from .streams import debounced, throttled_latest, unique_values
from .text import StreamingTextThrottle

__all__ = [
    "Throttle",
    "Listener",
    "ThrottledState",
    "LevelThrottle",
    "PageNumberThrottle",
    "StreamingTextThrottle",
    "SampleBatchThrottle",
    "ThrottlePolicy",
    "TextThrottlePolicy",
    "LevelThrottlePolicy",
    "BatchThrottlePolicy",
    "PageThrottlePolicy",
    "CJK_BOUNDARY_CHARS",
    "LATIN_BOUNDARY_CHARS",
    "DEFAULT_BOUNDARY_CHARS",
    "unique_values",
    "throttled_latest",
    "debounced",
]
