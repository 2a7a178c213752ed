"""FastAPI dependencies exposing the resources created at startup.

The crawl runner and LinkedIn service are looked up through these functions
so tests can swap them with ``app.dependency_overrides``.
"""

from collections.abc import Awaitable, Callable

from fastapi import Request

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings
from leadcrawl.services.cache import ResultCache
from leadcrawl.services.crawler import LinkedinService, crawl_with_browser
from leadcrawl.services.models import CrawlRequest, WebsiteResult

CrawlRunner = Callable[[CrawlRequest], Awaitable[list[WebsiteResult]]]


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> ResultCache:
    return request.app.state.cache


def get_activity_log(request: Request) -> ActivityLog:
    return request.app.state.activity_log


def get_linkedin_service(request: Request) -> LinkedinService:
    return request.app.state.linkedin_service


def get_crawl_runner(request: Request) -> CrawlRunner:
    """Return a callable that runs a browser-backed email crawl."""
    settings = get_settings(request)
    cache = get_cache(request)
    activity_log = get_activity_log(request)

    async def _run(crawl_request: CrawlRequest) -> list[WebsiteResult]:
        return await crawl_with_browser(
            crawl_request,
            settings,
            cache=cache,
            activity_log=activity_log,
        )

    return _run
