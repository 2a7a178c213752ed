"""Entity extraction from rendered HTML.

Finds email addresses in visible element text and company LinkedIn URLs in
anchor targets. Candidates that look like asset filenames or placeholder and
platform addresses are dropped by a suffix deny-list.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# Elements whose text is scanned. Raw markup is never scanned so addresses
# inside scripts and attributes are ignored.
EMAIL_TEXT_SELECTOR = "a[href], p, span, li, td"

MAX_EMAILS_PER_PAGE = 5

# Suffix checks. Domain-style entries are matched the same way as file
# extensions, so an address merely ending in "github.com" is dropped too.
DENY_LIST: tuple[str, ...] = (
    ".png",
    ".jpeg",
    ".jpg",
    ".pdf",
    ".webp",
    ".gif",
    "github.com",
    "fb.com",
    "email.com",
    "Email.com",
    "company.com",
    "acme.com",
    "mysite.com",
    "domain.com",
    ".wixpress.com",
    "gmail.com",
    "example.com",
    ".mov",
    ".webm",
    "sentry.io",
    "@x.com",
    "@twitter.com",
    "@producthunt.com",
    "linkedin.com",
)

LINKEDIN_HOST = "linkedin.com"
LINKEDIN_COMPANY_PREFIX = "/company/"


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup with the stdlib-backed parser."""
    return BeautifulSoup(html, "html.parser")


def is_denied(candidate: str, deny_list: tuple[str, ...] = DENY_LIST) -> bool:
    """Return True when the candidate ends with any deny-listed token."""
    return candidate.endswith(deny_list)


def extract_emails(
    html: str | BeautifulSoup,
    limit: int = MAX_EMAILS_PER_PAGE,
    deny_list: tuple[str, ...] = DENY_LIST,
) -> list[str]:
    """Extract up to ``limit`` distinct email addresses from page text.

    The cap is checked before each element against every accepted match so
    far, repeats included, so an element is either scanned whole or not at
    all. Nested elements (``<p><span>``) are each scanned, so an address
    inside both counts twice toward the cap. The collected matches are then
    de-duplicated in order of first appearance (case-sensitive) and
    truncated to ``limit``.

    Args:
        html: Rendered markup or an already parsed document
        limit: Per-page cap on returned addresses
        deny_list: Suffix tokens that disqualify a match

    Returns:
        Accepted addresses, at most ``limit`` of them

    Example:
        >>> extract_emails("<p>boss@example.com, sales@realcompany.io</p>")
        ['sales@realcompany.io']
    """
    soup = parse_html(html) if isinstance(html, str) else html
    accepted: list[str] = []
    for element in soup.select(EMAIL_TEXT_SELECTOR):
        if len(accepted) >= limit:
            break
        accepted.extend(
            candidate
            for candidate in EMAIL_PATTERN.findall(element.get_text())
            if not is_denied(candidate, deny_list)
        )
    return list(dict.fromkeys(accepted))[:limit]


def iter_links(html: str | BeautifulSoup, base_url: str) -> Iterator[str]:
    """Yield every anchor target resolved against ``base_url``.

    Hrefs that cannot be parsed as URLs are skipped.
    """
    soup = parse_html(html) if isinstance(html, str) else html
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if isinstance(href, list):
            href = " ".join(href)
        try:
            absolute = urljoin(base_url, href.strip())
            # urljoin is lenient; urlparse surfaces bad netlocs (e.g. "[")
            urlparse(absolute).port
        except ValueError:
            continue
        yield absolute


def extract_links(html: str | BeautifulSoup, base_url: str) -> list[str]:
    """Return all resolved anchor targets in document order."""
    return list(iter_links(html, base_url))


def is_linkedin_company_url(url: str) -> bool:
    """Check whether a URL points at a company page on linkedin.com.

    Examples:
        >>> is_linkedin_company_url("https://www.linkedin.com/company/acme")
        True
        >>> is_linkedin_company_url("https://www.linkedin.com/in/janedoe")
        False
        >>> is_linkedin_company_url("https://fakelinkedin.com/company/acme")
        False
    """
    try:
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
    except ValueError:
        return False
    if host != LINKEDIN_HOST and not host.endswith("." + LINKEDIN_HOST):
        return False
    return parsed.path.startswith(LINKEDIN_COMPANY_PREFIX)


def extract_linkedin_urls(html: str | BeautifulSoup, base_url: str) -> list[str]:
    """Return distinct company LinkedIn URLs linked from the page."""
    found: dict[str, None] = {}
    for link in iter_links(html, base_url):
        if is_linkedin_company_url(link):
            found.setdefault(link, None)
    return list(found)
