"""Clicks performed on a page before its content is extracted."""

import asyncio
import logging
from typing import Optional, Sequence

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from selector_scraper.config import settings
from selector_scraper.models.schemas import DataSelector, ScrapingStatus, SelectorStatus
from selector_scraper.scrapers.errors import ScrapingError, SelectorValidityError
from selector_scraper.scrapers.validator import SelectorValidator


class ClickSequencer:
    """Click elements, e.g. to dismiss a cookie banner, before scraping."""

    def __init__(
        self,
        validator: SelectorValidator,
        settle_ms: int = settings.CLICK_SETTLE_MS,
        logger: Optional[logging.Logger] = None,
    ):
        self.validator = validator
        self.settle_ms = settle_ms
        self.logger = logger or logging.getLogger(__name__)

    async def click_element(self, page: Page, selector: DataSelector) -> None:
        """
        Validate a selector and click the element it identifies.

        Args:
            page: Playwright page
            selector: Selector of the element to click

        Raises:
            ScrapingError: If the selector is invalid, the element cannot be
                found or the click fails
        """
        try:
            validity = await self.validator.validate(selector)
        except SelectorValidityError as e:
            raise ScrapingError(
                f"Error validating the selector {selector.path}: {e.message}",
                ScrapingStatus.ERROR,
                selector,
            ) from e

        if validity.selector.status == SelectorStatus.INVALID:
            raise ScrapingError(
                f"Invalid selector {selector.path}",
                ScrapingStatus.INVALID_SELECTOR,
                validity.selector,
            )

        try:
            await page.click(selector.path)
        except PlaywrightTimeoutError as e:
            raise ScrapingError(
                f"the selector {selector.path} could not be found",
                ScrapingStatus.ELEMENT_NOT_FOUND,
                validity.selector,
            ) from e
        except Exception as e:
            raise ScrapingError(
                f"error {e} when clicking {selector.path}",
                ScrapingStatus.ERROR,
                validity.selector,
            ) from e

        await page.wait_for_timeout(self.settle_ms)

    async def run(
        self, page: Page, selectors: Sequence[Optional[DataSelector]]
    ) -> None:
        """
        Click all the given elements.

        Clicks are issued concurrently and joined; empty entries are skipped.

        Args:
            page: Playwright page
            selectors: Selectors of the elements to click

        Raises:
            ScrapingError: The first failure in list order, if any click failed
        """
        targets = [s for s in selectors if s is not None and s.path]
        if not targets:
            return

        outcomes = await asyncio.gather(
            *(self.click_element(page, target) for target in targets),
            return_exceptions=True,
        )

        for target, outcome in zip(targets, outcomes):
            if isinstance(outcome, ScrapingError):
                self.logger.warning(f"Click on {target.path} failed: {outcome.message}")
                raise outcome
            if isinstance(outcome, Exception):
                raise ScrapingError(
                    f"error {outcome} when clicking {target.path}",
                    ScrapingStatus.ERROR,
                    target,
                ) from outcome
            if isinstance(outcome, BaseException):
                raise outcome

        self.logger.debug(f"Clicked {len(targets)} element(s)")
