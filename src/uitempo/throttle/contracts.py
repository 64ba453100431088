"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Typed policies for coalescing throttles.
"""

from __future__ import annotations

from dataclasses import dataclass

CJK_BOUNDARY_CHARS = "。，！？；："
LATIN_BOUNDARY_CHARS = ".,!?;:"
DEFAULT_BOUNDARY_CHARS = CJK_BOUNDARY_CHARS + LATIN_BOUNDARY_CHARS + "\n"


def _require_interval(interval_ms: int) -> None:
    if interval_ms < 0:
        raise ValueError("interval_ms must be >= 0")


@dataclass(frozen=True, slots=True)
class ThrottlePolicy:
    """Latest-value throttle for generic state."""

    interval_ms: int = 100
    remove_duplicates: bool = True

    def __post_init__(self) -> None:
        _require_interval(self.interval_ms)


@dataclass(frozen=True, slots=True)
class TextThrottlePolicy:
    """Append-only text throttle; boundary characters force an early flush."""

    interval_ms: int = 80
    boundary_chars: str = DEFAULT_BOUNDARY_CHARS

    def __post_init__(self) -> None:
        _require_interval(self.interval_ms)


@dataclass(frozen=True, slots=True)
class LevelThrottlePolicy:
    """Numeric level throttle that ignores changes below a threshold."""

    interval_ms: int = 100
    change_threshold: float = 0.05

    def __post_init__(self) -> None:
        _require_interval(self.interval_ms)
        if self.change_threshold < 0:
            raise ValueError("change_threshold must be >= 0")


@dataclass(frozen=True, slots=True)
class BatchThrottlePolicy:
    """Sample batching throttle feeding a capped ring of visible samples."""

    interval_ms: int = 150
    batch_size: int = 3
    max_samples: int = 300

    def __post_init__(self) -> None:
        _require_interval(self.interval_ms)
        if self.batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        if self.max_samples <= 0:
            raise ValueError("max_samples must be > 0")


@dataclass(frozen=True, slots=True)
class PageThrottlePolicy:
    """Page-number throttle used while the reader pages rapidly."""

    interval_ms: int = 120

    def __post_init__(self) -> None:
        _require_interval(self.interval_ms)
