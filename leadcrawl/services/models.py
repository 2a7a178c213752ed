"""Service-layer data models for crawl operations."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from leadcrawl.core.url_validation import normalize_url


class CrawlState(str, Enum):
    """States of a single seed's crawl.

    ``PENDING`` before the first dequeue, ``VISITING`` while a page is being
    fetched and scanned, ``CONTINUE`` after a page without emails whose links
    were enqueued. The remaining values are terminal.
    """

    PENDING = "PENDING"
    VISITING = "VISITING"
    CONTINUE = "CONTINUE"
    SUCCESS = "SUCCESS"
    EXHAUSTED = "EXHAUSTED"
    LIMIT_REACHED = "LIMIT_REACHED"
    CANCELLED = "CANCELLED"


TERMINAL_STATES = frozenset(
    {
        CrawlState.SUCCESS,
        CrawlState.EXHAUSTED,
        CrawlState.LIMIT_REACHED,
        CrawlState.CANCELLED,
    }
)


class FetchErrorKind(str, Enum):
    """Categories of per-URL fetch failure."""

    TIMEOUT = "TIMEOUT"
    HTTP_STATUS = "HTTP_STATUS"
    NETWORK = "NETWORK"
    NAVIGATION = "NAVIGATION"


class InvalidRequestError(ValueError):
    """Raised when a crawl request carries no usable seed URLs."""


@dataclass(frozen=True)
class CrawlRequest:
    """One or more seed URLs in normalized, order-preserving form.

    Args:
        seeds: Absolute seed URLs
    """

    seeds: tuple[str, ...]

    @classmethod
    def from_urls(cls, urls: list[str]) -> CrawlRequest:
        """Build a request from raw user input.

        Raises:
            InvalidRequestError: If the list is empty or holds blank entries
        """
        if not urls:
            raise InvalidRequestError("At least one starting URL is required")
        if any(not isinstance(url, str) or not url.strip() for url in urls):
            raise InvalidRequestError("Starting URLs must be non-empty strings")
        return cls(seeds=tuple(normalize_url(url) for url in urls))

    @property
    def cache_key(self) -> str:
        """Canonical serialization used as the cache identity."""
        return json.dumps(list(self.seeds), separators=(",", ":"))


@dataclass(frozen=True)
class PageResult:
    """Outcome of fetching one URL.

    Args:
        url: URL that was fetched
        html: Rendered markup, None when the fetch failed
        status_code: HTTP status when known
        error_kind: Failure category when the fetch failed
        error: Human-readable failure detail
        elapsed_seconds: Time spent fetching
    """

    url: str
    html: str | None = None
    status_code: int | None = None
    error_kind: FetchErrorKind | None = None
    error: str | None = None
    elapsed_seconds: float = 0.0

    @property
    def success(self) -> bool:
        return self.html is not None

    @classmethod
    def failure(
        cls,
        url: str,
        kind: FetchErrorKind,
        error: str,
        status_code: int | None = None,
        elapsed_seconds: float = 0.0,
    ) -> PageResult:
        return cls(
            url=url,
            status_code=status_code,
            error_kind=kind,
            error=error,
            elapsed_seconds=elapsed_seconds,
        )


@dataclass(frozen=True)
class FoundEmails:
    """Emails found on a single page."""

    url: str
    emails: tuple[str, ...]
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url, "emails": list(self.emails)}
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class WebsiteResult:
    """Crawl outcome for one seed URL.

    Args:
        main_page_url: The seed URL
        found_emails_urls: At most one page entry under the early-stop policy
        error: Seed-level error, e.g. an uncrawlable URL
        state: Terminal crawl state
        pages_visited: Number of URLs dequeued for processing
    """

    main_page_url: str
    found_emails_urls: tuple[FoundEmails, ...] = ()
    error: str | None = None
    state: CrawlState = CrawlState.EXHAUSTED
    pages_visited: int = 0

    @property
    def emails(self) -> list[str]:
        return [email for entry in self.found_emails_urls for email in entry.emails]

    def to_dict(self) -> dict[str, Any]:
        """Public JSON shape with camelCase keys."""
        data: dict[str, Any] = {
            "mainPageUrl": self.main_page_url,
            "foundEmailsUrls": [entry.to_dict() for entry in self.found_emails_urls],
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class LinkedinResult:
    """Company LinkedIn URLs found on a single page."""

    requested_url: str
    linkedin_urls: tuple[str, ...] = ()
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "requestedUrl": self.requested_url,
            "linkedinUrls": list(self.linkedin_urls),
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class CacheEntry:
    """A cached crawl payload with its absolute expiry (epoch seconds)."""

    key: str
    payload: tuple[WebsiteResult, ...]
    expires_at: float = field(default=0.0)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
