"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

uitempo settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .concurrency.scope import TaskScope
from .requests.controller import RequestController
from .requests.metrics import RequestMetrics
from .requests.pagination import PaginationController
from .throttle.contracts import (
    DEFAULT_BOUNDARY_CHARS,
    BatchThrottlePolicy,
    LevelThrottlePolicy,
    PageThrottlePolicy,
    TextThrottlePolicy,
    ThrottlePolicy,
)


@dataclass(frozen=True, slots=True)
class TempoSettings:
    """Explicit settings used to configure throttles, pagination and requests."""

    state_interval_ms: int = 100
    state_remove_duplicates: bool = True

    text_interval_ms: int = 80
    text_boundary_chars: str = DEFAULT_BOUNDARY_CHARS

    level_interval_ms: int = 100
    level_change_threshold: float = 0.05

    waveform_interval_ms: int = 150
    waveform_batch_size: int = 3
    waveform_max_samples: int = 300

    page_interval_ms: int = 120

    debounce_delay_s: float = 0.3
    request_timeout_s: float | None = 30.0

    def __post_init__(self) -> None:
        if self.debounce_delay_s < 0:
            raise ValueError("debounce_delay_s must be >= 0")
        if self.request_timeout_s is not None and self.request_timeout_s <= 0:
            raise ValueError("request_timeout_s must be > 0")

    @staticmethod
    def from_env() -> "TempoSettings":
        """Load settings from environment variables."""
        timeout_raw = os.getenv("UITEMPO_REQUEST_TIMEOUT_S", "30").strip().lower()
        return TempoSettings(
            state_interval_ms=int(os.getenv("UITEMPO_STATE_INTERVAL_MS", "100")),
            state_remove_duplicates=_env_bool("UITEMPO_STATE_REMOVE_DUPLICATES", True),
            text_interval_ms=int(os.getenv("UITEMPO_TEXT_INTERVAL_MS", "80")),
            text_boundary_chars=os.getenv(
                "UITEMPO_TEXT_BOUNDARY_CHARS", DEFAULT_BOUNDARY_CHARS
            ),
            level_interval_ms=int(os.getenv("UITEMPO_LEVEL_INTERVAL_MS", "100")),
            level_change_threshold=float(
                os.getenv("UITEMPO_LEVEL_CHANGE_THRESHOLD", "0.05")
            ),
            waveform_interval_ms=int(os.getenv("UITEMPO_WAVEFORM_INTERVAL_MS", "150")),
            waveform_batch_size=int(os.getenv("UITEMPO_WAVEFORM_BATCH_SIZE", "3")),
            waveform_max_samples=int(os.getenv("UITEMPO_WAVEFORM_MAX_SAMPLES", "300")),
            page_interval_ms=int(os.getenv("UITEMPO_PAGE_INTERVAL_MS", "120")),
            debounce_delay_s=float(os.getenv("UITEMPO_DEBOUNCE_DELAY_S", "0.3")),
            request_timeout_s=(
                None if timeout_raw in ("", "none", "0") else float(timeout_raw)
            ),
        )

    def state_policy(self) -> ThrottlePolicy:
        return ThrottlePolicy(
            interval_ms=self.state_interval_ms,
            remove_duplicates=self.state_remove_duplicates,
        )

    def text_policy(self) -> TextThrottlePolicy:
        return TextThrottlePolicy(
            interval_ms=self.text_interval_ms,
            boundary_chars=self.text_boundary_chars,
        )

    def level_policy(self) -> LevelThrottlePolicy:
        return LevelThrottlePolicy(
            interval_ms=self.level_interval_ms,
            change_threshold=self.level_change_threshold,
        )

    def waveform_policy(self) -> BatchThrottlePolicy:
        return BatchThrottlePolicy(
            interval_ms=self.waveform_interval_ms,
            batch_size=self.waveform_batch_size,
            max_samples=self.waveform_max_samples,
        )

    def page_policy(self) -> PageThrottlePolicy:
        return PageThrottlePolicy(interval_ms=self.page_interval_ms)

    def create_request_controller(
        self, *, metrics: RequestMetrics | None = None
    ) -> RequestController:
        """Build a request controller using the configured default timeout."""
        return RequestController(
            default_timeout_s=self.request_timeout_s,
            metrics=metrics,
        )

    def create_pagination_controller(
        self, *, scope: TaskScope | None = None
    ) -> PaginationController:
        """Build a pagination controller using the configured debounce delay."""
        return PaginationController(scope=scope, debounce_delay_s=self.debounce_delay_s)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")
