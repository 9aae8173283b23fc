"""
Paged list responses and a lazy iterator over every item they contain.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

from .errors import DecodeError
from .serialization import JsonSerializer

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "MAX_PAGE_SIZE",
    "Page",
    "PaginationInfo",
    "iterate_pages",
]

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class PaginationInfo:
    page: int = 1
    total_count: int = 0
    max_page: int = 1


@dataclass(frozen=True)
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    pagination: PaginationInfo = field(default_factory=PaginationInfo)

    @property
    def has_next(self) -> bool:
        return self.pagination.page < self.pagination.max_page

    @classmethod
    def from_wire(
        cls,
        payload: Any,
        item_type: Any,
        serializer: Optional[JsonSerializer] = None,
    ) -> "Page[T]":
        serializer = serializer or JsonSerializer()
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected a paginated object, got {payload!r}", target="Page")
        items = serializer.from_wire(payload.get("items", []), List[item_type])
        pagination = serializer.from_wire(payload.get("pagination", {}), PaginationInfo)
        return cls(items=items, pagination=pagination)


def iterate_pages(
    fetch_page: Callable[[int, int], Page[T]],
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    cancel: Optional[Any] = None,
) -> Iterator[T]:
    """
    Yield every item of a paged endpoint, fetching pages only as needed.

    ``fetch_page(page, page_size)`` is called for page 1, 2, ... until the
    server reports ``page >= max_page``. Every call to this function starts a
    fresh traversal. ``cancel`` is a :class:`CancellationToken`; it is checked
    before each page is requested.
    """
    page_number = 1
    while True:
        if cancel is not None:
            cancel.raise_if_cancelled()
        logger.debug("Fetching page %d (size %d)", page_number, page_size)
        page = fetch_page(page_number, page_size)
        yield from page.items
        # Servers that omit the current page report the default of 1.
        current = max(page.pagination.page, page_number)
        if not page.items or current >= page.pagination.max_page:
            return
        page_number = current + 1
