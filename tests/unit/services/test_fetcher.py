"""Unit tests for HttpPageFetcher and BrowserPageFetcher.

HTTP fetching is exercised with respx. Browser fetching runs against a fake
session whose pages mimic the small Playwright surface the fetcher uses.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import httpx
import pytest
import respx
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.services.fetcher import (
    BLOCKED_RESOURCE_TYPES,
    BrowserLaunchError,
    BrowserPageFetcher,
    BrowserSession,
    HttpPageFetcher,
    block_heavy_resources,
)
from leadcrawl.services.models import FetchErrorKind


class TestHttpPageFetcher:
    """Plain GET strategy."""

    @respx.mock
    @pytest.mark.asyncio
    async def test_success_returns_html(self) -> None:
        respx.get("https://example.org/").mock(
            return_value=httpx.Response(200, text="<p>hello</p>")
        )

        async with HttpPageFetcher() as fetcher:
            result = await fetcher.fetch("https://example.org/")

        assert result.success is True
        assert result.html == "<p>hello</p>"
        assert result.status_code == 200

    @respx.mock
    @pytest.mark.asyncio
    async def test_non_200_is_failure(self) -> None:
        respx.get("https://example.org/missing").mock(return_value=httpx.Response(404))

        async with HttpPageFetcher() as fetcher:
            result = await fetcher.fetch("https://example.org/missing")

        assert result.success is False
        assert result.html is None
        assert result.error_kind is FetchErrorKind.HTTP_STATUS
        assert result.status_code == 404
        assert result.error == "HTTP 404"

    @respx.mock
    @pytest.mark.asyncio
    async def test_timeout_is_failure(self) -> None:
        respx.get("https://slow.test/").mock(
            side_effect=httpx.ReadTimeout("timed out")
        )

        async with HttpPageFetcher(timeout=0.1) as fetcher:
            result = await fetcher.fetch("https://slow.test/")

        assert result.error_kind is FetchErrorKind.TIMEOUT

    @respx.mock
    @pytest.mark.asyncio
    async def test_network_error_is_failure(self) -> None:
        respx.get("https://down.test/").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        async with HttpPageFetcher() as fetcher:
            result = await fetcher.fetch("https://down.test/")

        assert result.error_kind is FetchErrorKind.NETWORK
        assert "connection refused" in result.error

    @respx.mock
    @pytest.mark.asyncio
    async def test_records_activity(self, activity_log: ActivityLog) -> None:
        respx.get("https://example.org/").mock(return_value=httpx.Response(200, text=""))

        async with HttpPageFetcher(activity_log=activity_log) as fetcher:
            await fetcher.fetch("https://example.org/")

        (log_file,) = activity_log.log_dir.iterdir()
        assert "Processed page: https://example.org/" in log_file.read_text()

    @respx.mock
    @pytest.mark.asyncio
    async def test_undecodable_idna_host_is_failure(self) -> None:
        async with HttpPageFetcher() as fetcher:
            result = await fetcher.fetch("http://xn--zz.com")

        assert result.success is False
        assert result.html is None
        assert result.error_kind is FetchErrorKind.NETWORK

    @pytest.mark.asyncio
    async def test_shared_client_is_not_closed(self) -> None:
        client = httpx.AsyncClient()
        fetcher = HttpPageFetcher(client=client)

        await fetcher.close()

        assert client.is_closed is False
        await client.aclose()


class FakeResponse:
    status = 200


class FakePage:
    def __init__(self, html: str = "<p>rendered</p>", error: Exception | None = None):
        self.html = html
        self.error = error
        self.routes: list[tuple[str, object]] = []
        self.goto_calls: list[tuple[str, str, int]] = []

    async def route(self, pattern, handler) -> None:
        self.routes.append((pattern, handler))

    async def goto(self, url: str, wait_until: str, timeout: int):
        self.goto_calls.append((url, wait_until, timeout))
        if self.error is not None:
            raise self.error
        return FakeResponse()

    async def content(self) -> str:
        return self.html


class FakeSession:
    def __init__(self, page: FakePage) -> None:
        self._page = page
        self.pages_opened = 0
        self.pages_closed = 0

    @asynccontextmanager
    async def page(self):
        self.pages_opened += 1
        try:
            yield self._page
        finally:
            self.pages_closed += 1


class TestBrowserPageFetcher:
    """Headless rendering strategy."""

    @pytest.mark.asyncio
    async def test_renders_with_dom_content_loaded_and_timeout(self) -> None:
        page = FakePage()
        session = FakeSession(page)

        result = await BrowserPageFetcher(session).fetch("https://example.org")

        assert result.html == "<p>rendered</p>"
        assert result.status_code == 200
        assert page.goto_calls == [("https://example.org", "domcontentloaded", 10000)]
        assert page.routes[0][0] == "**/*"
        assert session.pages_closed == 1

    @pytest.mark.asyncio
    async def test_timeout_is_typed_failure(self) -> None:
        page = FakePage(error=PlaywrightTimeoutError("Timeout 10000ms exceeded"))
        session = FakeSession(page)

        result = await BrowserPageFetcher(session).fetch("https://slow.test")

        assert result.success is False
        assert result.error_kind is FetchErrorKind.TIMEOUT
        assert session.pages_closed == 1

    @pytest.mark.asyncio
    async def test_navigation_error_is_typed_failure(self) -> None:
        page = FakePage(error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        session = FakeSession(page)

        result = await BrowserPageFetcher(session).fetch("https://nope.test")

        assert result.error_kind is FetchErrorKind.NAVIGATION
        assert session.pages_closed == 1

    @pytest.mark.asyncio
    async def test_records_activity_for_each_url(self, activity_log: ActivityLog) -> None:
        session = FakeSession(FakePage())
        fetcher = BrowserPageFetcher(session, activity_log=activity_log)

        await fetcher.fetch("https://example.org/a")
        await fetcher.fetch("https://example.org/b")

        (log_file,) = activity_log.log_dir.iterdir()
        lines = log_file.read_text().splitlines()
        assert len(lines) == 2
        assert "https://example.org/b" in lines[1]


class FakeRequest:
    def __init__(self, resource_type: str) -> None:
        self.resource_type = resource_type


class FakeRoute:
    def __init__(self, resource_type: str) -> None:
        self.request = FakeRequest(resource_type)
        self.action: str | None = None

    async def abort(self) -> None:
        self.action = "abort"

    async def continue_(self) -> None:
        self.action = "continue"


@pytest.mark.parametrize("resource_type", sorted(BLOCKED_RESOURCE_TYPES))
@pytest.mark.asyncio
async def test_blocks_heavy_resources(resource_type: str) -> None:
    route = FakeRoute(resource_type)
    await block_heavy_resources(route)
    assert route.action == "abort"


@pytest.mark.parametrize("resource_type", ["document", "script", "xhr", "fetch"])
@pytest.mark.asyncio
async def test_allows_other_resources(resource_type: str) -> None:
    route = FakeRoute(resource_type)
    await block_heavy_resources(route)
    assert route.action == "continue"


@pytest.mark.asyncio
async def test_launch_failure_raises_and_releases(monkeypatch) -> None:
    stopped = []

    class FakeChromium:
        async def launch(self, **kwargs):
            raise PlaywrightError("Executable doesn't exist")

    class FakePlaywright:
        chromium = FakeChromium()

        async def stop(self) -> None:
            stopped.append(True)

    class FakeStarter:
        async def start(self):
            return FakePlaywright()

    monkeypatch.setattr(
        "leadcrawl.services.fetcher.async_playwright", lambda: FakeStarter()
    )

    with pytest.raises(BrowserLaunchError):
        async with BrowserSession():
            pass

    assert stopped == [True]


@pytest.mark.asyncio
async def test_session_closes_browser_once(monkeypatch) -> None:
    closed = []

    class FakeBrowser:
        async def close(self) -> None:
            closed.append("browser")

    class FakeChromium:
        async def launch(self, **kwargs):
            return FakeBrowser()

    class FakePlaywright:
        chromium = FakeChromium()

        async def stop(self) -> None:
            closed.append("playwright")

    class FakeStarter:
        async def start(self):
            return FakePlaywright()

    monkeypatch.setattr(
        "leadcrawl.services.fetcher.async_playwright", lambda: FakeStarter()
    )

    session = BrowserSession()
    async with session:
        assert session.browser is not None
    await session.close()

    assert closed == ["browser", "playwright"]
    with pytest.raises(RuntimeError):
        _ = session.browser
