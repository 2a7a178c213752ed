"""Core protocol definitions for leadcrawl components.

This module provides the protocols used for dependency injection, so the
crawl orchestrator can be driven by fake fetchers in tests.
"""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from leadcrawl.services.models import PageResult


class PageFetcherProtocol(Protocol):
    """Protocol for anything that turns a URL into rendered markup.

    Implemented by HttpPageFetcher and BrowserPageFetcher.

    Methods required:
    - fetch: Returns a PageResult; per-URL failures are reported in the
      result, never raised.
    """

    async def fetch(self, url: str) -> "PageResult":
        """Fetch one URL.

        Returns:
            PageResult whose ``html`` is None when the fetch failed.
        """
        ...
