"""URL normalization and validation for crawl seeds.

Seeds arrive from users in loose form ("example.org", "https://example.org/").
This module turns them into absolute URLs and rejects values that cannot be
crawled. Optional SSRF prevention rejects URLs that target internal/private
resources.
"""

from __future__ import annotations

import ipaddress
import re
import socket
from urllib.parse import urlparse

DEFAULT_SCHEME = "http"

ALLOWED_SCHEMES = {"http", "https"}

BLOCKED_HOSTNAMES = {
    "localhost",
    "metadata.google.internal",
    "metadata",
}

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://")


def normalize_url(url: str) -> str:
    """Return an absolute form of a seed URL.

    Surrounding whitespace is stripped and the scheme defaults to ``http``
    when missing. Nothing else (case, trailing slash, query) is altered so the
    caller's URL is preserved for display and cache identity.

    Examples:
        >>> normalize_url("example.org")
        'http://example.org'
        >>> normalize_url("  https://example.org/contact ")
        'https://example.org/contact'
        >>> normalize_url("//cdn.example.org/a")
        'http://cdn.example.org/a'
    """
    candidate = url.strip()
    if _SCHEME_RE.match(candidate):
        return candidate
    return f"{DEFAULT_SCHEME}://{candidate.lstrip('/')}"


def _is_private_ip(ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
    return ip.is_private or ip.is_loopback or ip.is_link_local or ip.is_reserved


def validate_url(url: str, block_private_networks: bool = False) -> bool:
    """Validate that a URL can be crawled.

    Always requires an http(s) scheme and a hostname. With
    ``block_private_networks`` enabled it also rejects:
    - Private IP ranges (10.x, 172.16-31.x, 192.168.x, 127.x)
    - Cloud metadata endpoints (169.254.169.254)
    - Localhost hostnames
    - IP addresses in alternate notations (decimal, hex, octal)
    - Hostnames that resolve to private IPs

    Args:
        url: Absolute URL to validate.
        block_private_networks: Apply SSRF checks.

    Returns:
        True if URL is safe for crawling, False otherwise.

    Examples:
        >>> validate_url("https://example.com/")
        True
        >>> validate_url("ftp://example.com/")
        False
        >>> validate_url("http://192.168.1.1/admin", block_private_networks=True)
        False
    """
    try:
        parsed = urlparse(url)
        if not parsed.scheme or parsed.scheme.lower() not in ALLOWED_SCHEMES:
            return False
        hostname = parsed.hostname
    except ValueError:
        return False

    if not hostname:
        return False

    if not block_private_networks:
        return True

    if hostname.lower() in BLOCKED_HOSTNAMES:
        return False

    try:
        return not _is_private_ip(ipaddress.ip_address(hostname))
    except ValueError:
        pass

    # Decimal: 2130706433, Hex: 0x7f000001, Octal: 0177.0.0.1
    if re.match(r"^(0x[0-9a-fA-F]+|\d{8,}|0[0-7]+(\.|$))$", hostname):
        return False

    try:
        addr_info = socket.getaddrinfo(hostname, None)
    except (socket.gaierror, OSError):
        return False

    for addr in addr_info:
        try:
            resolved_ip = ipaddress.ip_address(addr[4][0])
        except ValueError:
            return False
        if _is_private_ip(resolved_ip):
            return False

    return True
