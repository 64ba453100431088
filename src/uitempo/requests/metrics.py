"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for request controller observability.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from prometheus_client import CollectorRegistry


class RequestMetrics(Protocol):
    """Minimal metrics interface for request outcome counters."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpRequestMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class InMemoryRequestMetrics:
    """Counter store keyed by metric name, handy for assertions and debugging."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = tags
        self.counters[name] = self.counters.get(name, 0) + value


# registry -> (namespace, name, label names) -> Counter
_SHARED_COUNTERS: weakref.WeakKeyDictionary[Any, dict[tuple[str, ...], Any]] = (
    weakref.WeakKeyDictionary()
)
_SHARED_COUNTERS_LOCK = threading.Lock()


class PrometheusRequestMetrics:
    """
    Prometheus-backed request metrics adapter.

    Counters are created once per registry and shared by every adapter that
    targets it, so several controllers can report into the same registry.
    Requires `prometheus_client` package.
    """

    def __init__(
        self,
        *,
        namespace: str = "uitempo",
        registry: CollectorRegistry | None = None,
    ) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusRequestMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._registry = registry if registry is not None else REGISTRY

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        label_names = tuple(sorted((tags or {}).keys()))
        counter = self._counter(name, label_names)
        if label_names:
            label_values = [str((tags or {})[label]) for label in label_names]
            counter.labels(*label_values).inc(value)
        else:
            counter.inc(value)

    def _counter(self, name: str, label_names: tuple[str, ...]) -> Any:
        key = (self._namespace, name, *label_names)
        with _SHARED_COUNTERS_LOCK:
            counters = _SHARED_COUNTERS.setdefault(self._registry, {})
            counter = counters.get(key)
            if counter is None:
                counter = self._Counter(
                    name=name,
                    documentation=f"Request controller counter {name}",
                    namespace=self._namespace,
                    labelnames=label_names,
                    registry=self._registry,
                )
                counters[key] = counter
        return counter
