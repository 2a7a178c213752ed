"""Response models for API endpoints.

Pydantic models defining the structure of API responses. Optional ``error``
and ``message`` keys are omitted from the JSON when unset.

Example:
    from leadcrawl.api.models.responses import HealthResponse

    response = HealthResponse(status="healthy")
"""

from pydantic import BaseModel, ConfigDict, Field

from leadcrawl.services.models import LinkedinResult, WebsiteResult


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Current health status ('healthy' or 'unhealthy')
    """

    status: str


class MessageResponse(BaseModel):
    """Error or notice body: ``{"message": "..."}``."""

    message: str


class FoundEmailsModel(BaseModel):
    url: str
    emails: list[str]
    error: str | None = None


class WebsiteModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    main_page_url: str = Field(alias="mainPageUrl")
    found_emails_urls: list[FoundEmailsModel] = Field(alias="foundEmailsUrls")
    error: str | None = None

    @classmethod
    def from_result(cls, result: WebsiteResult) -> "WebsiteModel":
        return cls.model_validate(result.to_dict())


class EmailExtractionResponse(BaseModel):
    """Email crawl response: one entry per seed URL."""

    websites: list[WebsiteModel]
    message: str | None = None


class LinkedinExtractionResponse(BaseModel):
    """LinkedIn scan response for a single page."""

    model_config = ConfigDict(populate_by_name=True)

    requested_url: str = Field(alias="requestedUrl")
    linkedin_urls: list[str] = Field(alias="linkedinUrls")
    error: str | None = None
    message: str | None = None

    @classmethod
    def from_result(cls, result: LinkedinResult) -> "LinkedinExtractionResponse":
        return cls.model_validate(result.to_dict())
