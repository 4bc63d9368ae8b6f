"""Paginated enumeration over Management API listings.

Every listing in the adapter (users, roles, a user's roles, a role's users)
goes through ``iter_pages``. The page index is the only state threaded
through, so calling it again with the same ``fetch`` repeats the enumeration.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import TypeVar

from auth0_rbac.errors import ManagementAPIError, PaginationError
from auth0_rbac.models.page import Page

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[int, int], Page[T]]


def iter_pages(
    fetch: PageFetcher[T],
    page_size: int,
    *,
    start: int = 0,
    max_pages: int | None = None,
) -> Iterator[Page[T]]:
    """Yield pages from ``fetch(index, page_size)`` until one reports no successor.

    A ``ManagementAPIError`` from ``fetch`` aborts the enumeration with a
    ``PaginationError``. Pages yielded before the failure stay valid.
    """
    if page_size < 1:
        raise ValueError("page_size must be at least 1")

    index = start
    fetched = 0
    while True:
        if max_pages is not None and fetched >= max_pages:
            raise PaginationError(
                f"Enumeration exceeded {max_pages} pages", page=index
            )
        try:
            page = fetch(index, page_size)
        except ManagementAPIError as e:
            logger.warning("Page %d failed: %s", index, e)
            raise PaginationError(f"Failed to fetch page {index}: {e}", page=index) from e
        fetched += 1
        yield page
        if not page.has_next:
            return
        index += 1


def iter_items(
    fetch: PageFetcher[T],
    page_size: int,
    *,
    start: int = 0,
    max_pages: int | None = None,
) -> Iterator[T]:
    """Flatten ``iter_pages`` into individual items, in page order."""
    for page in iter_pages(fetch, page_size, start=start, max_pages=max_pages):
        yield from page.items


def collect(
    fetch: PageFetcher[T],
    page_size: int,
    *,
    max_pages: int | None = None,
) -> list[T]:
    """Return every item across all pages, or raise without a partial result."""
    return list(iter_items(fetch, page_size, max_pages=max_pages))
