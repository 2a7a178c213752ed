"""Email crawl and LinkedIn scan endpoints.

Example:
    POST /api/emailExtraction {"startingUrls": ["example.org"]}
    Response: {"websites": [{"mainPageUrl": "http://example.org", ...}]}

    POST /api/linkedinExtraction {"url": "https://example.org"}
    Response: {"requestedUrl": "https://example.org", "linkedinUrls": [...]}
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from leadcrawl.api.dependencies import (
    CrawlRunner,
    get_crawl_runner,
    get_linkedin_service,
)
from leadcrawl.api.models.requests import (
    EmailExtractionRequest,
    LinkedinExtractionRequest,
)
from leadcrawl.api.models.responses import (
    EmailExtractionResponse,
    LinkedinExtractionResponse,
    MessageResponse,
    WebsiteModel,
)
from leadcrawl.services.crawler import LinkedinService
from leadcrawl.services.models import CrawlRequest, InvalidRequestError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["extraction"])

STARTING_URLS_REQUIRED = "Starting URLs are required"
URL_REQUIRED = "URL is required"
INTERNAL_ERROR = "Internal Server Error"
NO_EMAILS_FOUND = "No emails found"
NO_LINKEDIN_FOUND = "No LinkedIn company pages found"

ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
}


def message_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


@router.post(
    "/emailExtraction",
    response_model=EmailExtractionResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def email_extraction(
    payload: Any = Body(None),
    run_crawl: CrawlRunner = Depends(get_crawl_runner),
) -> EmailExtractionResponse | JSONResponse:
    """Crawl each starting URL until a page with email addresses is found."""
    try:
        body = EmailExtractionRequest.model_validate(payload)
        crawl_request = CrawlRequest.from_urls(body.starting_urls)
    except (ValidationError, InvalidRequestError):
        return message_response(status.HTTP_400_BAD_REQUEST, STARTING_URLS_REQUIRED)

    try:
        results = await run_crawl(crawl_request)
    except Exception:  # noqa: BLE001
        logger.exception("Error while crawling websites %s", list(crawl_request.seeds))
        return message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    found_any = any(result.found_emails_urls for result in results)
    return EmailExtractionResponse(
        websites=[WebsiteModel.from_result(result) for result in results],
        message=None if found_any else NO_EMAILS_FOUND,
    )


@router.post(
    "/linkedinExtraction",
    response_model=LinkedinExtractionResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
)
async def linkedin_extraction(
    payload: Any = Body(None),
    service: LinkedinService = Depends(get_linkedin_service),
) -> LinkedinExtractionResponse | JSONResponse:
    """Return the company LinkedIn links found on a single page."""
    try:
        body = LinkedinExtractionRequest.model_validate(payload)
    except ValidationError:
        return message_response(status.HTTP_400_BAD_REQUEST, URL_REQUIRED)

    try:
        result = await service.find_linkedin_urls(body.url)
    except Exception:  # noqa: BLE001
        logger.exception("Error while extracting LinkedIn URLs from %s", body.url)
        return message_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR)

    response = LinkedinExtractionResponse.from_result(result)
    if not result.linkedin_urls:
        response.message = NO_LINKEDIN_FOUND
    return response
