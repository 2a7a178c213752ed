"""Request models for API endpoints.

Field names keep the camelCase keys that existing clients send.

Example:
    from leadcrawl.api.models.requests import EmailExtractionRequest

    request = EmailExtractionRequest.model_validate({"startingUrls": ["example.org"]})
"""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class EmailExtractionRequest(BaseModel):
    """Body of the email crawl endpoint.

    Attributes:
        starting_urls: Seed URLs, sent as ``startingUrls``
    """

    model_config = ConfigDict(populate_by_name=True)

    starting_urls: list[StrictStr] = Field(alias="startingUrls", min_length=1)


class LinkedinExtractionRequest(BaseModel):
    """Body of the LinkedIn scan endpoint.

    Attributes:
        url: Page to scan for company LinkedIn links
    """

    url: StrictStr = Field(min_length=1)
