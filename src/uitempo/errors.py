"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by uitempo components.
"""

from __future__ import annotations


class UitempoError(RuntimeError):
    """Base error for uitempo failures."""


class RequestError(UitempoError):
    """Raised when a tracked request does not produce a result."""

    def __init__(self, message: str, *, request_id: str | None = None) -> None:
        super().__init__(message)
        self.request_id = request_id


class RequestTimeoutError(RequestError):
    """Raised when a tracked request exceeds its timeout."""


class RequestCancelledError(RequestError):
    """Raised when a tracked request is cancelled through its controller or screen."""
