"""API routes for the selector scraping service."""

from fastapi import APIRouter, HTTPException, status

from selector_scraper.config import settings
from selector_scraper.models.schemas import (
    DataSelector,
    HealthResponse,
    ScrapeRequest,
    ScrapeResult,
    SelectorValidityResponse,
)
from selector_scraper.scrapers.errors import SelectorValidityError
from selector_scraper.services.scraper_service import ScraperService

router = APIRouter()

# Initialize scraper service at module level
scraper_service = ScraperService.from_settings()


@router.post("/scraping/validate-selector", response_model=SelectorValidityResponse)
async def validate_selector(selector: DataSelector) -> SelectorValidityResponse:
    """
    Validate the syntax of a selector path.

    Args:
        selector: Selector to validate

    Returns:
        SelectorValidityResponse with the selector status set

    Raises:
        HTTPException: If the language is unsupported or validation failed
    """
    try:
        return await scraper_service.validate_selector(selector)
    except SelectorValidityError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message,
        ) from e


@router.post("/scraping/get-content", response_model=ScrapeResult)
async def get_content(request: ScrapeRequest) -> ScrapeResult:
    """
    Scrape the text and a screenshot of the element matching a selector.

    Elements listed in ``clickBefore`` are clicked first, e.g. to dismiss a
    cookie banner. Scraping failures are reported in the response body
    with their status, not as HTTP errors.

    Args:
        request: ScrapeRequest with selector, URL and options

    Returns:
        ScrapedContent or ScrapingFailure

    Raises:
        HTTPException: For invalid requests
    """
    try:
        # Validate URL length
        if len(str(request.url)) > settings.MAX_URL_LENGTH:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"URL exceeds maximum length of {settings.MAX_URL_LENGTH}",
            )

        # Validate URL scheme
        if request.url.scheme not in settings.ALLOWED_SCHEMES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"URL scheme '{request.url.scheme}' not allowed. Allowed: {settings.ALLOWED_SCHEMES}",
            )

        return await scraper_service.get_content(request)

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Unexpected error: {str(e)}",
        ) from e


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """
    Health check endpoint.

    Returns:
        HealthResponse with service status
    """
    return HealthResponse(status="healthy", version=settings.API_VERSION)
