"""Pydantic models for selectors, scraping requests and results."""

from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field, HttpUrl


class SelectorStatus(str, Enum):
    """Validity of a selector path."""

    UNKNOWN = "unknown"
    VALID = "valid"
    INVALID = "invalid"


class ScrapingStatus(str, Enum):
    """Outcome of a scraping request."""

    SUCCESS = "success"
    INVALID_SELECTOR = "invalid_selector"
    NO_CONTENT = "no_content"
    ELEMENT_NOT_FOUND = "element_not_found"
    ERROR = "error"


class DataSelector(BaseModel):
    """A selector path identifying elements on a page.

    Instances are immutable: validation returns an updated copy.
    """

    path: str = Field(..., description="Selector path, e.g. '.price > span'")
    language: Optional[str] = Field(
        "css", description="Selector dialect. Only 'css' is supported"
    )
    status: SelectorStatus = Field(
        SelectorStatus.UNKNOWN, description="Validity status set by the validator"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "path": ".product-title",
                "language": "css",
                "status": "unknown",
            }
        }

    def with_status(self, status: SelectorStatus) -> "DataSelector":
        """Return a copy of the selector carrying ``status``."""
        return self.model_copy(update={"status": status})


class SelectorValidityResponse(BaseModel):
    """Result of a selector validation."""

    selector: DataSelector
    messages: list[str] = Field(default_factory=list)


class ScrapeRequest(BaseModel):
    """Request to extract the content of a selector on a page."""

    selector: DataSelector = Field(..., description="Selector of the element to extract")
    url: HttpUrl = Field(..., description="Page to scrape")
    click_before: Optional[list[Optional[DataSelector]]] = Field(
        None,
        alias="clickBefore",
        description="Elements to click before extraction, e.g. a cookie banner",
    )
    use_cache: bool = Field(
        True, alias="useCache", description="Replay the cached page markup if available"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "selector": {"path": ".product-title"},
                "url": "https://example.com/products/42",
                "clickBefore": [{"path": "#accept-cookies"}],
                "useCache": True,
            }
        }


class ScrapedContent(BaseModel):
    """Successful scraping result."""

    status: Literal[ScrapingStatus.SUCCESS] = ScrapingStatus.SUCCESS
    content: str = Field(..., description="Text content of the element")
    screenshot: str = Field(..., description="Screenshot of the element as a data URI")
    selector: DataSelector


class ScrapingFailure(BaseModel):
    """Failed scraping result."""

    status: Literal[
        ScrapingStatus.INVALID_SELECTOR,
        ScrapingStatus.NO_CONTENT,
        ScrapingStatus.ELEMENT_NOT_FOUND,
        ScrapingStatus.ERROR,
    ]
    message: str
    selector: Optional[DataSelector] = None


ScrapeResult = Union[ScrapedContent, ScrapingFailure]


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
