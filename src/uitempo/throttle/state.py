"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Latest-value throttles: generic state, audio levels and page numbers.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from .base import Throttle
from .contracts import LevelThrottlePolicy, PageThrottlePolicy, ThrottlePolicy

T = TypeVar("T")

_MISSING = object()


class ThrottledState(Throttle[T], Generic[T]):
    """
    Rate-limited publisher of the most recent value.

    Views read ``value`` (or subscribe) instead of the raw high-frequency
    source. Intermediate values inside one window are dropped; the last one
    is always delivered when the window closes.
    """

    def __init__(self, initial: T, *, policy: ThrottlePolicy | None = None) -> None:
        self._policy = policy or ThrottlePolicy()
        super().__init__(interval_ms=self._policy.interval_ms)
        self._initial = initial
        self._value = initial
        self._pending: object = _MISSING

    @property
    def value(self) -> T:
        return self._value

    @property
    def has_pending(self) -> bool:
        return self._pending is not _MISSING

    @property
    def pending_value(self) -> T | None:
        if self._pending is _MISSING:
            return None
        return self._pending  # type: ignore[return-value]

    def update(self, value: T) -> None:
        """
        Deliver ``value`` now if the window allows it, otherwise coalesce it.

        A value equal to the visible one also discards any pending value, so
        the view settles on the most recently requested value.
        """
        if self._policy.remove_duplicates and value == self._value:
            # The visible value already matches the newest request.
            self._drop_pending()
            return

        if self._window_open(self._now()):
            self._drop_pending()
            self._deliver(value)
            return

        self._pending = value
        self._schedule_flush()

    def force_update(self, value: T) -> None:
        """Deliver ``value`` immediately, bypassing the interval."""
        self._drop_pending()
        self._deliver(value)

    def reset(self) -> None:
        """Cancel the scheduled flush and return to the initial value."""
        self._drop_pending()
        self._last_delivery_at = None
        self.delivery_count = 0
        changed = self._value != self._initial
        self._value = self._initial
        if changed:
            self._notify(self._value)

    def _deliver(self, value: T) -> None:
        self._value = value
        self._publish(value)

    def _drop_pending(self) -> None:
        self._pending = _MISSING
        self._cancel_flush()

    def _on_flush(self) -> None:
        if self._pending is _MISSING:
            return
        pending = self._pending
        self._pending = _MISSING
        self._deliver(pending)  # type: ignore[arg-type]


class LevelThrottle(ThrottledState[float]):
    """Meter level throttle; changes smaller than the threshold are noise."""

    def __init__(self, *, policy: LevelThrottlePolicy | None = None) -> None:
        self._level_policy = policy or LevelThrottlePolicy()
        super().__init__(
            0.0,
            policy=ThrottlePolicy(
                interval_ms=self._level_policy.interval_ms,
                remove_duplicates=False,
            ),
        )

    @property
    def level(self) -> float:
        return self._value

    def update(self, value: float) -> None:
        if abs(value - self._value) < self._level_policy.change_threshold:
            self._drop_pending()
            return
        super().update(value)


class PageNumberThrottle(ThrottledState[int]):
    """
    Page indicator for rapid paging.

    While pages flip faster than the interval only the final page is shown
    and ``is_rapid_paging`` stays set; jumps use ``force_update``.
    """

    def __init__(
        self,
        initial_page: int = 1,
        *,
        policy: PageThrottlePolicy | None = None,
    ) -> None:
        page_policy = policy or PageThrottlePolicy()
        super().__init__(
            initial_page,
            policy=ThrottlePolicy(interval_ms=page_policy.interval_ms, remove_duplicates=False),
        )
        self._actual_page = initial_page
        self._rapid_paging = False

    @property
    def display_page(self) -> int:
        return self._value

    @property
    def actual_page(self) -> int:
        return self._actual_page

    @property
    def is_rapid_paging(self) -> bool:
        return self._rapid_paging

    def update_page(self, page: int) -> None:
        if page == self._actual_page:
            return
        self._actual_page = page
        self.update(page)
        self._rapid_paging = self.has_pending

    def force_update(self, value: int) -> None:
        self._actual_page = value
        super().force_update(value)

    def reset(self) -> None:
        super().reset()
        self._actual_page = self._initial
        self._rapid_paging = False

    def _deliver(self, value: int) -> None:
        self._rapid_paging = False
        super()._deliver(value)
