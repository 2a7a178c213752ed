"""LinkedIn command for company page discovery.

Fetches a single page with a plain GET and lists the company LinkedIn URLs
it links to.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings
from leadcrawl.core.logger import configure_logging
from leadcrawl.services.crawler import LinkedinService
from leadcrawl.services.fetcher import HttpPageFetcher
from leadcrawl.services.models import LinkedinResult

console = Console()


def linkedin_command(
    url: str = typer.Argument(..., help="Page to scan"),
) -> None:
    """List company LinkedIn URLs linked from a page."""
    settings = Settings()
    configure_logging(settings, console=False)

    async def _run() -> LinkedinResult:
        async with HttpPageFetcher(
            timeout=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
            activity_log=ActivityLog(settings.activity_log_dir),
        ) as fetcher:
            return await LinkedinService(fetcher).find_linkedin_urls(url)

    result = asyncio.run(_run())

    if result.error:
        console.print(f"[red]Failed: {result.error}[/red]")
        raise typer.Exit(code=1)

    for link in result.linkedin_urls:
        console.print(link)
    console.print(f"LinkedIn company URLs: {len(result.linkedin_urls)}")
