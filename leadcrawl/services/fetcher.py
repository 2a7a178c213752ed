"""Page fetchers: plain HTTP GET and headless Chromium rendering.

Both fetchers return a PageResult for every URL. Timeouts, bad statuses and
navigation errors become failed results so a single bad page never aborts a
crawl. Only launching the browser itself can fail loudly, with
BrowserLaunchError.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from playwright.async_api import Browser, Page, Playwright, Route, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.services.models import FetchErrorKind, PageResult

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_TIMEOUT_MS = 10000
DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0

# Resource types that carry no text or anchors
BLOCKED_RESOURCE_TYPES = frozenset({"image", "media", "font", "stylesheet"})

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--mute-audio",
    "--no-first-run",
    "--disable-extensions",
]


class BrowserLaunchError(RuntimeError):
    """Raised when the headless browser cannot be started."""


class BrowserSession:
    """One Chromium instance shared by every page of a crawl invocation.

    Use as an async context manager. The browser is closed exactly once on
    exit, whatever the outcome of the crawl.

    Example:
        >>> async with BrowserSession(headless=True) as session:
        ...     fetcher = BrowserPageFetcher(session)
        ...     page = await fetcher.fetch("https://example.org")
    """

    def __init__(self, headless: bool = True, user_agent: str | None = None) -> None:
        self._headless = headless
        self._user_agent = user_agent
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None

    @property
    def browser(self) -> Browser:
        if self._browser is None:
            raise RuntimeError("Browser session is not started")
        return self._browser

    async def start(self) -> None:
        """Launch Chromium.

        Raises:
            BrowserLaunchError: If Playwright or the browser fails to start
        """
        logger.info("Launching headless browser")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(
                headless=self._headless,
                args=BROWSER_ARGS,
            )
        except Exception as exc:  # noqa: BLE001
            await self.close()
            raise BrowserLaunchError(f"Failed to launch the web browser: {exc}") from exc
        logger.info("Headless browser launched")

    async def close(self) -> None:
        """Close the browser and stop Playwright. Safe to call repeatedly."""
        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        if browser is not None:
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing browser: %s", exc)
        if playwright is not None:
            try:
                await playwright.stop()
            except PlaywrightError as exc:
                logger.warning("Error stopping Playwright: %s", exc)

    @asynccontextmanager
    async def page(self) -> AsyncIterator[Page]:
        """Open a page in a fresh browsing context and always close it."""
        context = await self.browser.new_context(user_agent=self._user_agent)
        try:
            yield await context.new_page()
        finally:
            try:
                await context.close()
            except PlaywrightError as exc:
                logger.debug("Error closing browser context: %s", exc)

    async def __aenter__(self) -> BrowserSession:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def block_heavy_resources(route: Route) -> None:
    """Abort requests for images, media, fonts and stylesheets."""
    if route.request.resource_type in BLOCKED_RESOURCE_TYPES:
        await route.abort()
    else:
        await route.continue_()


class BrowserPageFetcher:
    """Fetch fully rendered markup through a shared BrowserSession."""

    def __init__(
        self,
        session: BrowserSession,
        navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS,
        activity_log: ActivityLog | None = None,
    ) -> None:
        self._session = session
        self._timeout_ms = navigation_timeout_ms
        self._activity_log = activity_log

    async def fetch(self, url: str) -> PageResult:
        """Render ``url`` and return its DOM after DOMContentLoaded.

        Args:
            url: Absolute URL to render

        Returns:
            PageResult with html, or a failure of kind TIMEOUT / NAVIGATION
        """
        start = time.perf_counter()
        try:
            async with self._session.page() as page:
                await page.route("**/*", block_heavy_resources)
                response = await page.goto(
                    url, wait_until="domcontentloaded", timeout=self._timeout_ms
                )
                html = await page.content()
        except PlaywrightTimeoutError as exc:
            result = PageResult.failure(
                url, FetchErrorKind.TIMEOUT, str(exc), elapsed_seconds=_since(start)
            )
        except PlaywrightError as exc:
            result = PageResult.failure(
                url, FetchErrorKind.NAVIGATION, str(exc), elapsed_seconds=_since(start)
            )
        else:
            result = PageResult(
                url=url,
                html=html,
                status_code=response.status if response is not None else None,
                elapsed_seconds=_since(start),
            )
        _record(self._activity_log, result)
        return result


class HttpPageFetcher:
    """Fetch raw markup with a single HTTP GET (no script execution)."""

    def __init__(
        self,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        user_agent: str | None = None,
        activity_log: ActivityLog | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds
            user_agent: Optional User-Agent header
            activity_log: Optional sink for per-page timings
            client: Pre-built client (not closed by this fetcher)
        """
        headers = {"User-Agent": user_agent} if user_agent else None
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout, follow_redirects=True, headers=headers
        )
        self._activity_log = activity_log

    async def fetch(self, url: str) -> PageResult:
        """GET ``url``; anything but a 200 response is a failure."""
        start = time.perf_counter()
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as exc:
            result = PageResult.failure(
                url, FetchErrorKind.TIMEOUT, str(exc), elapsed_seconds=_since(start)
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers hosts httpx cannot IDNA-encode (UnicodeError)
            result = PageResult.failure(
                url, FetchErrorKind.NETWORK, str(exc), elapsed_seconds=_since(start)
            )
        else:
            if response.status_code == 200:
                result = PageResult(
                    url=url,
                    html=response.text,
                    status_code=200,
                    elapsed_seconds=_since(start),
                )
            else:
                result = PageResult.failure(
                    url,
                    FetchErrorKind.HTTP_STATUS,
                    f"HTTP {response.status_code}",
                    status_code=response.status_code,
                    elapsed_seconds=_since(start),
                )
        _record(self._activity_log, result)
        return result

    async def close(self) -> None:
        """Close the underlying HTTP client if this fetcher created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpPageFetcher:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def _since(start: float) -> float:
    return time.perf_counter() - start


def _record(activity_log: ActivityLog | None, result: PageResult) -> None:
    if result.success:
        logger.debug("Fetched %s in %.2fs", result.url, result.elapsed_seconds)
    else:
        logger.info("Skipping %s: %s", result.url, result.error)
    if activity_log is not None:
        activity_log.record_page(result.url, result.elapsed_seconds)
