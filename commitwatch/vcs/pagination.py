"""Paginated history scan with early termination at a boundary commit."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from typing import Protocol, TypeVar

from commitwatch.errors import UnresolvableBoundary

logger = logging.getLogger(__name__)


class _HasSha(Protocol):
    @property
    def sha(self) -> str: ...


T = TypeVar("T", bound=_HasSha)


async def paginate_until(
    fetch_page: Callable[[int], Awaitable[Sequence[T]]],
    boundary_sha: str,
    uri: str,
    max_pages: int | None = None,
) -> AsyncIterator[T]:
    """Yield items page by page (page 0 first) until ``boundary_sha`` is met.

    The boundary item itself is never yielded. An empty page before the
    boundary, or running past ``max_pages``, means the boundary is gone from
    history and raises UnresolvableBoundary. Items already yielded are skipped
    if pages shift while new commits land mid-scan.
    """
    seen: set[str] = set()
    page = 0
    while True:
        if max_pages is not None and page >= max_pages:
            raise UnresolvableBoundary(uri, boundary_sha)
        items = await fetch_page(page)
        if not items:
            raise UnresolvableBoundary(uri, boundary_sha)
        logger.debug("Fetched page %d of %s (%d commits)", page, uri, len(items))
        for item in items:
            if item.sha == boundary_sha:
                return
            if item.sha in seen:
                continue
            seen.add(item.sha)
            yield item
        page += 1
