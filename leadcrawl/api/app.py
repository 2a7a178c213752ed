"""FastAPI application for the leadcrawl REST API.

Provides the email crawl and LinkedIn scan endpoints plus health monitoring.

Example:
    uvicorn leadcrawl.api.app:app --host 0.0.0.0 --port 8000
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from leadcrawl import __version__
from leadcrawl.api.models.responses import HealthResponse
from leadcrawl.api.routes.extraction import router as extraction_router
from leadcrawl.core.activity_log import ActivityLog
from leadcrawl.core.config import Settings
from leadcrawl.core.logger import configure_logging
from leadcrawl.services.cache import ResultCache
from leadcrawl.services.crawler import LinkedinService
from leadcrawl.services.fetcher import HttpPageFetcher

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle events.

    - Startup: load settings, configure logging, create the result cache,
      the activity log and the shared HTTP fetcher
    - Shutdown: close the HTTP fetcher

    Resources already placed on ``app.state`` (e.g. by tests) are kept.

    Args:
        app: FastAPI application instance

    Yields:
        None during application runtime
    """
    settings: Settings = getattr(app.state, "settings", None) or Settings()
    app.state.settings = settings
    configure_logging(settings)

    if getattr(app.state, "cache", None) is None:
        app.state.cache = ResultCache(default_ttl=settings.cache_ttl_seconds)
    if getattr(app.state, "activity_log", None) is None:
        app.state.activity_log = ActivityLog(settings.activity_log_dir)

    http_fetcher = HttpPageFetcher(
        timeout=settings.http_timeout_seconds,
        user_agent=settings.user_agent,
        activity_log=app.state.activity_log,
    )
    if getattr(app.state, "linkedin_service", None) is None:
        app.state.linkedin_service = LinkedinService(http_fetcher)

    logger.info("leadcrawl API started")
    try:
        yield
    finally:
        await http_fetcher.close()
        logger.info("leadcrawl API stopped")


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unreadable request bodies as client errors."""
    logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body"},
    )


async def health_check() -> HealthResponse:
    """Liveness probe; does not touch the browser or the network."""
    return HealthResponse(status="healthy")


def create_app() -> FastAPI:
    """Build the FastAPI application with all routers registered."""
    application = FastAPI(
        title="leadcrawl API",
        description="Discover contact emails and company LinkedIn pages",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_exception_handler(RequestValidationError, request_validation_handler)
    application.add_api_route(
        "/health", health_check, methods=["GET"], response_model=HealthResponse
    )
    application.include_router(extraction_router)
    return application


app = create_app()
