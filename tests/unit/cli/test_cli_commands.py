"""Unit tests for the emails and linkedin CLI commands.

The crawl and scan functions are monkeypatched so no browser or network is
used.
"""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from typer.testing import CliRunner

from leadcrawl.cli.app import app
from leadcrawl.services.fetcher import BrowserLaunchError
from leadcrawl.services.models import (
    CrawlState,
    FoundEmails,
    LinkedinResult,
    WebsiteResult,
)

runner = CliRunner()


def _found(seed: str) -> WebsiteResult:
    return WebsiteResult(
        main_page_url=seed,
        found_emails_urls=(FoundEmails(url=f"{seed}/contact", emails=("hi@biz.co",)),),
        state=CrawlState.SUCCESS,
        pages_visited=2,
    )


def test_emails_command_prints_table(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    captured = {}

    async def _fake_crawl(request, settings, **kwargs):
        captured["seeds"] = request.seeds
        captured["settings"] = settings
        return [_found(seed) for seed in request.seeds]

    monkeypatch.setattr(
        "leadcrawl.cli.commands.emails.crawl_with_browser", _fake_crawl
    )

    result = runner.invoke(
        app, ["emails", "example.org", "--max-pages", "3", "--same-domain"]
    )

    assert result.exit_code == 0
    assert "hi@biz.co" in result.output
    assert captured["seeds"] == ("http://example.org",)
    assert captured["settings"].max_pages_per_seed == 3
    assert captured["settings"].same_domain is True


def test_emails_command_writes_json(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def _fake_crawl(request, settings, **kwargs):
        return [_found(seed) for seed in request.seeds]

    monkeypatch.setattr(
        "leadcrawl.cli.commands.emails.crawl_with_browser", _fake_crawl
    )
    output = tmp_path / "out.json"

    result = runner.invoke(app, ["emails", "a.test", "b.test", "-o", str(output)])

    assert result.exit_code == 0
    payload = json.loads(output.read_text())
    assert [w["mainPageUrl"] for w in payload["websites"]] == [
        "http://a.test",
        "http://b.test",
    ]


def test_emails_command_reports_not_found(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def _fake_crawl(request, settings, **kwargs):
        return [WebsiteResult(main_page_url=seed) for seed in request.seeds]

    monkeypatch.setattr(
        "leadcrawl.cli.commands.emails.crawl_with_browser", _fake_crawl
    )

    result = runner.invoke(app, ["emails", "a.test"])

    assert result.exit_code == 0
    assert "No emails found" in result.output


def test_emails_command_browser_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def _fake_crawl(request, settings, **kwargs):
        raise BrowserLaunchError("Failed to launch the web browser")

    monkeypatch.setattr(
        "leadcrawl.cli.commands.emails.crawl_with_browser", _fake_crawl
    )

    result = runner.invoke(app, ["emails", "a.test"])

    assert result.exit_code == 1
    assert "Failed to launch" in result.output


def test_linkedin_command(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def _fake_find(self, url: str) -> LinkedinResult:
        return LinkedinResult(
            requested_url=url,
            linkedin_urls=("https://www.linkedin.com/company/acme",),
        )

    monkeypatch.setattr(
        "leadcrawl.cli.commands.linkedin.LinkedinService.find_linkedin_urls",
        _fake_find,
    )

    result = runner.invoke(app, ["linkedin", "acme.test"])

    assert result.exit_code == 0
    assert "https://www.linkedin.com/company/acme" in result.output
    assert "LinkedIn company URLs: 1" in result.output


def test_linkedin_command_failure(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    async def _fake_find(self, url: str) -> LinkedinResult:
        return LinkedinResult(requested_url=url, error="Failed to fetch page")

    monkeypatch.setattr(
        "leadcrawl.cli.commands.linkedin.LinkedinService.find_linkedin_urls",
        _fake_find,
    )

    result = runner.invoke(app, ["linkedin", "down.test"])

    assert result.exit_code == 1


def test_help_lists_commands() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in ("emails", "linkedin", "serve"):
        assert command in result.output


def test_linkedin_command_configures_file_logging(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    log_file = tmp_path / "cli" / "leadcrawl.log"
    monkeypatch.setenv("LEADCRAWL_LOG_FILE", str(log_file))

    async def _fake_find(self, url: str) -> LinkedinResult:
        logging.getLogger("leadcrawl.services.crawler").warning("scanned %s", url)
        return LinkedinResult(requested_url=url)

    monkeypatch.setattr(
        "leadcrawl.cli.commands.linkedin.LinkedinService.find_linkedin_urls",
        _fake_find,
    )

    result = runner.invoke(app, ["linkedin", "acme.test"])

    assert result.exit_code == 0
    package_logger = logging.getLogger("leadcrawl")
    handlers = [h for h in package_logger.handlers if isinstance(h, RotatingFileHandler)]
    assert [h.baseFilename for h in handlers] == [str(log_file)]
    for handler in handlers:
        handler.flush()
    assert "scanned acme.test" in log_file.read_text()
