"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Request tracking and pagination.

Quick start::

    from uitempo.requests import PaginationLoader, PageResult

    loader = PaginationLoader(page_size=20)

    async def fetch(page: int, size: int) -> PageResult[dict]:
        rows = await api.list_works(page=page, size=size)
        return PageResult(items=rows["items"], total=rows["total"])

    loader.load_next_page(fetch)
"""

from .controller import (
    RequestController,
    RequestStats,
    get_request_controller,
    reset_request_controller,
)
from .metrics import (
    InMemoryRequestMetrics,
    NoOpRequestMetrics,
    PrometheusRequestMetrics,
    RequestMetrics,
)
from .pagination import (
    DEFAULT_REQUEST_ID,
    PageLoader,
    PageResult,
    PaginationController,
    PaginationLoader,
    PaginationState,
)

__all__ = [
    "RequestController",
    "RequestStats",
    "get_request_controller",
    "reset_request_controller",
    "RequestMetrics",
    "NoOpRequestMetrics",
    "InMemoryRequestMetrics",
    "PrometheusRequestMetrics",
    "DEFAULT_REQUEST_ID",
    "PaginationController",
    "PaginationState",
    "PaginationLoader",
    "PageResult",
    "PageLoader",
]
