"""Crawl orchestration for email discovery and LinkedIn page scans.

The email crawl walks each seed breadth-first and stops at the first page
that yields any email address. Seeds are processed one after another and
pages one at a time, so an invocation holds at most one browser page open.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings
from leadcrawl.core.interfaces import PageFetcherProtocol
from leadcrawl.core.url_validation import normalize_url, validate_url
from leadcrawl.services.cache import ResultCache
from leadcrawl.services.extractor import (
    MAX_EMAILS_PER_PAGE,
    extract_emails,
    extract_linkedin_urls,
    iter_links,
    parse_html,
)
from leadcrawl.services.fetcher import BrowserPageFetcher, BrowserSession
from leadcrawl.services.frontier import Frontier
from leadcrawl.services.models import (
    TERMINAL_STATES,
    CrawlRequest,
    CrawlState,
    FoundEmails,
    LinkedinResult,
    WebsiteResult,
)

logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "Failed to fetch page"


class EmailCrawlService:
    """Drive the frontier with a fetcher and the email extractor.

    Attributes:
        fetcher: Page fetcher used for every URL of the crawl

    Example:
        >>> service = EmailCrawlService(HttpPageFetcher())
        >>> result = await service.crawl_site("http://example.org")
        >>> result.found_emails_urls[0].emails
        ('hello@biz.co',)
    """

    def __init__(
        self,
        fetcher: PageFetcherProtocol,
        cache: ResultCache | None = None,
        max_emails_per_page: int = MAX_EMAILS_PER_PAGE,
        max_pages_per_seed: int | None = None,
        same_domain: bool = False,
        block_private_networks: bool = False,
        cache_ttl: float | None = None,
    ) -> None:
        """Initialize the crawl service.

        Args:
            fetcher: Page fetcher (browser or plain GET)
            cache: Optional result cache shared across invocations
            max_emails_per_page: Per-page cap on accepted addresses
            max_pages_per_seed: Stop a seed after this many pages (None = no cap)
            same_domain: Only follow links on the seed's host
            block_private_networks: Reject seeds targeting internal hosts
            cache_ttl: Lifetime of stored results; cache default when None
        """
        self.fetcher = fetcher
        self._cache = cache
        self._max_emails = max_emails_per_page
        self._max_pages = max_pages_per_seed
        self._same_domain = same_domain
        self._block_private = block_private_networks
        self._cache_ttl = cache_ttl

    @classmethod
    def from_settings(
        cls,
        fetcher: PageFetcherProtocol,
        settings: Settings,
        cache: ResultCache | None = None,
    ) -> EmailCrawlService:
        return cls(
            fetcher,
            cache=cache,
            max_emails_per_page=settings.max_emails_per_page,
            max_pages_per_seed=settings.max_pages_per_seed,
            same_domain=settings.same_domain,
            block_private_networks=settings.block_private_networks,
            cache_ttl=settings.cache_ttl_seconds,
        )

    async def visit(
        self, frontier: Frontier, url: str
    ) -> tuple[CrawlState, FoundEmails | None]:
        """Process one dequeued URL.

        Returns:
            (SUCCESS, entry) when the page yields emails, otherwise
            (CONTINUE, None) after enqueueing the page's links. A failed fetch
            is also CONTINUE, with nothing enqueued.
        """
        page = await self.fetcher.fetch(url)
        if page.html is None:
            return CrawlState.CONTINUE, None

        soup = parse_html(page.html)
        emails = extract_emails(soup, limit=self._max_emails)
        if emails:
            return CrawlState.SUCCESS, FoundEmails(url=url, emails=tuple(emails))

        frontier.extend(iter_links(soup, url))
        return CrawlState.CONTINUE, None

    async def crawl_site(
        self, seed: str, stop_event: asyncio.Event | None = None
    ) -> WebsiteResult:
        """Crawl one seed breadth-first until the first page with emails.

        Args:
            seed: Absolute seed URL
            stop_event: When set, no further pages are fetched

        Returns:
            WebsiteResult with at most one ``found_emails_urls`` entry
        """
        if not validate_url(seed, block_private_networks=self._block_private):
            logger.warning("Rejected seed URL %s", seed)
            return WebsiteResult(main_page_url=seed, error="Invalid URL")

        frontier = Frontier(seed, same_domain=self._same_domain)
        state = CrawlState.PENDING
        pages_visited = 0

        while state not in TERMINAL_STATES:
            if stop_event is not None and stop_event.is_set():
                state = _transition(seed, state, CrawlState.CANCELLED)
                break
            if self._max_pages is not None and pages_visited >= self._max_pages:
                state = _transition(seed, state, CrawlState.LIMIT_REACHED)
                break

            url = frontier.next_url()
            if url is None:
                state = _transition(seed, state, CrawlState.EXHAUSTED)
                break

            pages_visited += 1
            state = _transition(seed, state, CrawlState.VISITING)
            logger.debug("Visiting %s (page %d of %s)", url, pages_visited, seed)
            next_state, found = await self.visit(frontier, url)
            state = _transition(seed, state, next_state)
            if found is not None:
                logger.info("Found %d email(s) for %s on %s", len(found.emails), seed, url)
                return WebsiteResult(
                    main_page_url=seed,
                    found_emails_urls=(found,),
                    state=state,
                    pages_visited=pages_visited,
                )

        logger.info(
            "Crawl of %s ended with %s after %d page(s)", seed, state.value, pages_visited
        )
        return WebsiteResult(
            main_page_url=seed, state=state, pages_visited=pages_visited
        )

    async def crawl_seeds(
        self, request: CrawlRequest, stop_event: asyncio.Event | None = None
    ) -> list[WebsiteResult]:
        """Crawl every seed in order, without consulting the cache."""
        results = []
        for seed in request.seeds:
            results.append(await self.crawl_site(seed, stop_event))
        return results

    async def crawl(
        self, request: CrawlRequest, stop_event: asyncio.Event | None = None
    ) -> list[WebsiteResult]:
        """Crawl every seed, serving and populating the cache when present."""
        if self._cache is None:
            return await self.crawl_seeds(request, stop_event)

        payload = await self._cache.single_flight(
            request.cache_key,
            lambda: self.crawl_seeds(request, stop_event),
            ttl=self._cache_ttl,
            should_store=_is_complete,
        )
        return list(payload)


def _transition(seed: str, current: CrawlState, new: CrawlState) -> CrawlState:
    logger.debug("Crawl of %s: %s -> %s", seed, current.value, new.value)
    return new


def _is_complete(results: Sequence[WebsiteResult]) -> bool:
    return all(result.state is not CrawlState.CANCELLED for result in results)


async def crawl_with_browser(
    request: CrawlRequest,
    settings: Settings,
    cache: ResultCache | None = None,
    activity_log: ActivityLog | None = None,
    stop_event: asyncio.Event | None = None,
    session_factory: Callable[..., BrowserSession] = BrowserSession,
) -> list[WebsiteResult]:
    """Run an email crawl with one browser session for the whole invocation.

    The browser is only launched on a cache miss and is closed on every exit
    path, including errors and cancellation.

    Raises:
        BrowserLaunchError: If the browser cannot be started
    """
    if cache is not None:
        cached = await cache.get(request.cache_key)
        if cached is not None:
            logger.info("Serving %d seed(s) from cache", len(cached))
            return list(cached)

    async with session_factory(
        headless=settings.headless, user_agent=settings.user_agent
    ) as session:
        fetcher = BrowserPageFetcher(
            session,
            navigation_timeout_ms=settings.navigation_timeout_ms,
            activity_log=activity_log,
        )
        service = EmailCrawlService.from_settings(fetcher, settings, cache=cache)
        return await service.crawl(request, stop_event)


class LinkedinService:
    """Scan a single page for company LinkedIn links.

    There is no crawl: the requested page is fetched once and only its own
    anchors are considered.
    """

    def __init__(self, fetcher: PageFetcherProtocol) -> None:
        self.fetcher = fetcher

    async def find_linkedin_urls(self, url: str) -> LinkedinResult:
        """Fetch ``url`` and return every company LinkedIn link on it."""
        target = normalize_url(url)
        page = await self.fetcher.fetch(target)
        if page.html is None:
            return LinkedinResult(requested_url=url, error=FETCH_FAILED_MESSAGE)
        links = extract_linkedin_urls(page.html, target)
        logger.info("Found %d LinkedIn company URL(s) on %s", len(links), target)
        return LinkedinResult(requested_url=url, linkedin_urls=tuple(links))
