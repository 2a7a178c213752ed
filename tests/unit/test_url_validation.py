"""Unit tests for seed URL normalization and validation."""

import socket

import pytest

from leadcrawl.core.url_validation import normalize_url, validate_url


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("example.org", "http://example.org"),
        ("example.org/contact", "http://example.org/contact"),
        ("  https://example.org/ ", "https://example.org/"),
        ("HTTP://Example.org", "HTTP://Example.org"),
        ("//cdn.example.org/a", "http://cdn.example.org/a"),
        ("example.org:8080/x", "http://example.org:8080/x"),
    ],
)
def test_normalize_url(raw: str, expected: str) -> None:
    assert normalize_url(raw) == expected


@pytest.mark.parametrize(
    "url",
    ["http://example.org", "https://example.org/contact?x=1", "http://10.0.0.1/"],
)
def test_validate_accepts_http_urls(url: str) -> None:
    assert validate_url(url) is True


@pytest.mark.parametrize(
    "url", ["ftp://example.org", "file:///etc/passwd", "http://", "not-a-url", ""]
)
def test_validate_rejects_non_http(url: str) -> None:
    assert validate_url(url) is False


@pytest.mark.parametrize(
    "url",
    [
        "http://127.0.0.1/",
        "http://192.168.1.1/admin",
        "http://169.254.169.254/latest/meta-data",
        "http://localhost:8000",
        "http://2130706433/",
        "http://0x7f000001/",
        "http://[::1]/",
    ],
)
def test_private_networks_blocked_when_enabled(url: str) -> None:
    assert validate_url(url, block_private_networks=True) is False


def test_dns_resolution_to_private_ip_is_blocked(monkeypatch) -> None:
    monkeypatch.setattr(
        socket,
        "getaddrinfo",
        lambda host, port: [(socket.AF_INET, None, None, "", ("10.1.2.3", 0))],
    )

    assert validate_url("http://internal.test", block_private_networks=True) is False


def test_dns_resolution_to_public_ip_is_allowed(monkeypatch) -> None:
    monkeypatch.setattr(
        socket,
        "getaddrinfo",
        lambda host, port: [(socket.AF_INET, None, None, "", ("93.184.216.34", 0))],
    )

    assert validate_url("http://example.org", block_private_networks=True) is True


def test_unresolvable_host_is_blocked(monkeypatch) -> None:
    def _fail(host, port):
        raise socket.gaierror("no such host")

    monkeypatch.setattr(socket, "getaddrinfo", _fail)

    assert validate_url("http://nope.invalid", block_private_networks=True) is False
