"""Scraper service orchestrating validation, page loading, clicks and extraction."""

import logging
from typing import Optional

from selector_scraper.config import settings
from selector_scraper.models.schemas import (
    DataSelector,
    ScrapeRequest,
    ScrapeResult,
    ScrapingStatus,
    SelectorStatus,
    SelectorValidityResponse,
)
from selector_scraper.scrapers.cache import PageCache
from selector_scraper.scrapers.errors import ScrapingError, SelectorValidityError
from selector_scraper.scrapers.extractor import ContentExtractor, discard_screenshot
from selector_scraper.scrapers.interactions import ClickSequencer
from selector_scraper.scrapers.page_loader import PageLoader
from selector_scraper.scrapers.validator import SelectorValidator


class ScraperService:
    """Service exposing selector validation and content scraping."""

    def __init__(
        self,
        validator: SelectorValidator,
        page_loader: PageLoader,
        sequencer: ClickSequencer,
        extractor: ContentExtractor,
        page_settle_ms: int = settings.PAGE_SETTLE_MS,
        logger: Optional[logging.Logger] = None,
    ):
        self.validator = validator
        self.page_loader = page_loader
        self.sequencer = sequencer
        self.extractor = extractor
        self.page_settle_ms = page_settle_ms
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, logger: Optional[logging.Logger] = None) -> "ScraperService":
        """Build a service wired with the application settings."""
        logger = logger or logging.getLogger(__name__)
        validator = SelectorValidator(logger=logger)
        return cls(
            validator=validator,
            page_loader=PageLoader(
                PageCache(settings.CACHE_DIR),
                timeout_ms=settings.PAGE_TIMEOUT_MS,
                launch_args=settings.PLAYWRIGHT_LAUNCH_ARGS,
                logger=logger,
            ),
            sequencer=ClickSequencer(
                validator, settle_ms=settings.CLICK_SETTLE_MS, logger=logger
            ),
            extractor=ContentExtractor(
                validator, screenshot_dir=settings.SCREENSHOT_DIR, logger=logger
            ),
            page_settle_ms=settings.PAGE_SETTLE_MS,
            logger=logger,
        )

    async def validate_selector(self, selector: DataSelector) -> SelectorValidityResponse:
        """
        Validate a selector path.

        Args:
            selector: Selector to validate

        Returns:
            SelectorValidityResponse with a copy of the selector carrying its status

        Raises:
            SelectorValidityError: If the language is unsupported or validation crashed
        """
        return await self.validator.validate(selector)

    async def get_content(self, request: ScrapeRequest) -> ScrapeResult:
        """
        Scrape the content of the requested selector.

        Stages run in order (validate, load the page, click, extract) and the
        first failing stage ends the request.

        Args:
            request: Scraping request

        Returns:
            ScrapedContent on success, ScrapingFailure otherwise
        """
        url = str(request.url)
        screenshot_path = None

        try:
            selector = await self._validate_primary(request.selector)
            screenshot_path = await self.extractor.new_screenshot_path(url)

            async with self.page_loader.open(url, request.use_cache) as page:
                await page.wait_for_timeout(self.page_settle_ms)

                if request.click_before:
                    await self.sequencer.run(page, request.click_before)

                result = await self.extractor.extract(
                    page, selector, url, screenshot_path=screenshot_path
                )

            self.logger.info(f"Scraped {selector.path} on {url}")
            return result

        except ScrapingError as e:
            self.logger.warning(f"Scraping {request.selector.path} on {url} failed: {e.message}")
            return e.to_failure()

        except Exception as e:
            self.logger.exception(f"Unexpected error when scraping {request.selector.path} on {url}")
            return ScrapingError(
                f"error {e} when scraping {request.selector.path}",
                ScrapingStatus.ERROR,
                request.selector,
            ).to_failure()

        finally:
            if screenshot_path is not None:
                await discard_screenshot(screenshot_path)

    async def _validate_primary(self, selector: DataSelector) -> DataSelector:
        """Validate the extraction selector before any browser work."""
        if not selector.path:
            raise ScrapingError(
                "Undefined selector path", ScrapingStatus.INVALID_SELECTOR, selector
            )

        try:
            validity = await self.validator.validate(selector)
        except SelectorValidityError as e:
            raise ScrapingError(
                f"invalid selector, {e.message}", ScrapingStatus.ERROR, selector
            ) from e

        if validity.selector.status == SelectorStatus.INVALID:
            raise ScrapingError(
                f"Invalid selector {selector.path}",
                ScrapingStatus.INVALID_SELECTOR,
                validity.selector,
            )
        return validity.selector
