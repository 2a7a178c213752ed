"""Emails command for contact discovery.

This module provides a CLI command that crawls one or more seed URLs with a
headless browser and reports the first page of each site that lists email
addresses.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings
from leadcrawl.core.logger import configure_logging
from leadcrawl.services.crawler import crawl_with_browser
from leadcrawl.services.fetcher import BrowserLaunchError
from leadcrawl.services.models import CrawlRequest, InvalidRequestError, WebsiteResult

console = Console()


def render_results(results: list[WebsiteResult]) -> Table:
    """Build a table with one row per seed."""
    table = Table(title="Email discovery")
    table.add_column("Website", style="cyan")
    table.add_column("Found on")
    table.add_column("Emails", style="green")
    table.add_column("Pages", justify="right")
    for result in results:
        entry = result.found_emails_urls[0] if result.found_emails_urls else None
        table.add_row(
            result.main_page_url,
            entry.url if entry else (result.error or "-"),
            ", ".join(entry.emails) if entry else "not found",
            str(result.pages_visited),
        )
    return table


def emails_command(
    urls: list[str] = typer.Argument(..., help="Starting URLs to crawl"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Write JSON results to this file"
    ),
    max_pages: int | None = typer.Option(
        None, "--max-pages", min=1, help="Maximum pages fetched per website"
    ),
    same_domain: bool | None = typer.Option(
        None,
        "--same-domain/--any-domain",
        help="Only follow links on the starting URL's host",
    ),
    headed: bool = typer.Option(False, "--headed", help="Show the browser window"),
) -> None:
    """Find contact email addresses reachable from each starting URL.

    Args:
        urls: Seed URLs; a missing scheme defaults to http.
        output: Optional JSON output file.
        max_pages: Optional per-website page cap.
        same_domain: Override the configured same-domain policy.
        headed: Run the browser with a visible window.
    """
    settings = Settings()
    updates: dict[str, object] = {}
    if max_pages is not None:
        updates["max_pages_per_seed"] = max_pages
    if same_domain is not None:
        updates["same_domain"] = same_domain
    if headed:
        updates["headless"] = False
    settings = settings.model_copy(update=updates)
    configure_logging(settings, console=False)

    try:
        request = CrawlRequest.from_urls(urls)
    except InvalidRequestError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    async def _run() -> list[WebsiteResult]:
        """Execute the crawl with a spinner."""
        with console.status("Crawling...", spinner="dots"):
            return await crawl_with_browser(
                request,
                settings,
                activity_log=ActivityLog(settings.activity_log_dir),
            )

    try:
        results = asyncio.run(_run())
    except BrowserLaunchError as exc:
        console.print(f"[red]Failed: {exc}[/red]")
        raise typer.Exit(code=1) from exc

    if output is None:
        console.print(render_results(results))
    else:
        payload = {"websites": [result.to_dict() for result in results]}
        output.write_text(json.dumps(payload, indent=2) + "\n")
        console.print(f"Wrote {len(results)} website result(s) to {output}")

    if not any(result.found_emails_urls for result in results):
        console.print("[yellow]No emails found[/yellow]")
