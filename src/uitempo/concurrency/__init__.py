"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Task lifetime primitives: FIFO semaphore, task bags, task and screen scopes.
"""

from .scope import TaskScope
from .screen import ScreenScope
from .semaphore import AsyncSemaphore, with_semaphore
from .tasks import Operation, TaskBag

__all__ = [
    "AsyncSemaphore",
    "with_semaphore",
    "Operation",
    "TaskBag",
    "TaskScope",
    "ScreenScope",
]
