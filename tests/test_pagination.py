"""Tests for paged responses and lazy item iteration."""

from __future__ import annotations

from typing import List, Tuple

import pytest

from polar_payments.core.errors import DecodeError, RequestCancelledError
from polar_payments.core.models import Customer
from polar_payments.core.pagination import Page, PaginationInfo, iterate_pages
from polar_payments.core.pipeline import CancellationToken


class _PagedSource:
    """Serves fixed pages of ints and records every fetch."""

    def __init__(self, *pages: List[int]) -> None:
        self.pages = pages
        self.fetches: List[Tuple[int, int]] = []

    def __call__(self, page: int, size: int) -> Page[int]:
        self.fetches.append((page, size))
        info = PaginationInfo(
            page=page,
            total_count=sum(len(items) for items in self.pages),
            max_page=len(self.pages),
        )
        return Page(items=list(self.pages[page - 1]), pagination=info)


# ── iterate_pages ────────────────────────────────────────────


def test_walks_all_pages_in_server_order() -> None:
    source = _PagedSource([1, 2], [3, 4], [5])
    assert list(iterate_pages(source, page_size=2)) == [1, 2, 3, 4, 5]
    assert source.fetches == [(1, 2), (2, 2), (3, 2)]


def test_pages_are_fetched_lazily() -> None:
    """Page 3 is requested only after the items of pages 1 and 2 are consumed."""
    source = _PagedSource([1, 2], [3, 4], [5])
    items = iterate_pages(source, page_size=2)

    assert [next(items), next(items)] == [1, 2]
    assert len(source.fetches) == 1
    assert [next(items), next(items)] == [3, 4]
    assert len(source.fetches) == 2
    assert next(items) == 5
    assert len(source.fetches) == 3
    with pytest.raises(StopIteration):
        next(items)


def test_each_call_starts_a_fresh_traversal() -> None:
    source = _PagedSource([1], [2])
    assert list(iterate_pages(source)) == [1, 2]
    assert list(iterate_pages(source)) == [1, 2]
    assert [page for page, _ in source.fetches] == [1, 2, 1, 2]


def test_empty_result_stops_after_first_page() -> None:
    source = _PagedSource([])
    assert list(iterate_pages(source)) == []
    assert len(source.fetches) == 1


def test_missing_current_page_still_terminates() -> None:
    """Servers that report only max_page do not cause page 1 to repeat."""
    fetched: List[int] = []

    def fetch(page: int, size: int) -> Page[int]:
        fetched.append(page)
        return Page(items=[page], pagination=PaginationInfo(max_page=3))

    assert list(iterate_pages(fetch)) == [1, 2, 3]
    assert fetched == [1, 2, 3]


def test_cancellation_stops_further_fetches() -> None:
    token = CancellationToken()
    source = _PagedSource([1, 2], [3, 4], [5])
    items = iterate_pages(source, page_size=2, cancel=token)

    assert [next(items), next(items)] == [1, 2]
    token.cancel()
    with pytest.raises(RequestCancelledError):
        next(items)
    assert len(source.fetches) == 1


# ── Page.from_wire ───────────────────────────────────────────


def test_page_from_wire_decodes_items() -> None:
    payload = {
        "items": [{"id": "cus_1", "email": "a@example.com"}],
        "pagination": {"total_count": 11, "max_page": 2},
    }
    page = Page.from_wire(payload, Customer)
    assert page.items[0].email == "a@example.com"
    assert page.pagination.total_count == 11
    assert page.pagination.page == 1
    assert page.has_next


def test_page_from_wire_rejects_non_objects() -> None:
    with pytest.raises(DecodeError):
        Page.from_wire([1, 2], Customer)
