"""Service layer for crawl and extraction operations."""

from leadcrawl.services.cache import ResultCache
from leadcrawl.services.crawler import (
    EmailCrawlService,
    LinkedinService,
    crawl_with_browser,
)
from leadcrawl.services.fetcher import (
    BrowserLaunchError,
    BrowserPageFetcher,
    BrowserSession,
    HttpPageFetcher,
)
from leadcrawl.services.frontier import Frontier
from leadcrawl.services.models import (
    CrawlRequest,
    CrawlState,
    FetchErrorKind,
    FoundEmails,
    InvalidRequestError,
    LinkedinResult,
    PageResult,
    WebsiteResult,
)

__all__ = [
    "BrowserLaunchError",
    "BrowserPageFetcher",
    "BrowserSession",
    "crawl_with_browser",
    "CrawlRequest",
    "CrawlState",
    "EmailCrawlService",
    "FetchErrorKind",
    "FoundEmails",
    "Frontier",
    "HttpPageFetcher",
    "InvalidRequestError",
    "LinkedinResult",
    "LinkedinService",
    "PageResult",
    "ResultCache",
    "WebsiteResult",
]
