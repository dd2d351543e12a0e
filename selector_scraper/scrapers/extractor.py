"""Text and screenshot extraction of the element matching a selector."""

import asyncio
import base64
import logging
import os
import tempfile
from typing import Optional
from urllib.parse import urlparse

import aiofiles
import aiofiles.os
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from selector_scraper.config import settings
from selector_scraper.models.schemas import (
    DataSelector,
    ScrapedContent,
    ScrapingStatus,
    SelectorStatus,
)
from selector_scraper.scrapers.errors import ScrapingError, SelectorValidityError
from selector_scraper.scrapers.validator import SelectorValidator

SCREENSHOT_MIME_PREFIX = "data:image/gif;base64,"


async def remove_quietly(path: str) -> None:
    """Delete a file, ignoring any failure. A missing file is the goal anyway."""
    try:
        await aiofiles.os.remove(path)
    except OSError:
        pass


async def discard_screenshot(path: str) -> None:
    """Delete a screenshot file and the request directory holding it."""
    await remove_quietly(path)
    try:
        await aiofiles.os.rmdir(os.path.dirname(path))
    except OSError:
        pass


class ContentExtractor:
    """Extract the text content and a screenshot of an element."""

    def __init__(
        self,
        validator: SelectorValidator,
        screenshot_dir: str = settings.SCREENSHOT_DIR,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the extractor.

        Args:
            validator: Validator applied to the selector before extraction
            screenshot_dir: Directory of the temporary screenshot files
            logger: Logger to report to
        """
        self.validator = validator
        self.screenshot_dir = screenshot_dir
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def screenshot_name(url: str) -> str:
        """Screenshot file name of a URL: ``<host>-<last path segment>.png``."""
        parsed = urlparse(url)
        base_name = parsed.path.rsplit("/", 1)[-1]
        return f"{parsed.hostname}-{base_name}.png"

    async def new_screenshot_path(self, url: str) -> str:
        """
        Reserve a screenshot path owned by a single request.

        The file goes into a fresh directory under ``screenshot_dir``, so
        requests for the same URL never share it. Release it with
        ``discard_screenshot``.
        """
        await aiofiles.os.makedirs(self.screenshot_dir, exist_ok=True)
        directory = await asyncio.to_thread(
            tempfile.mkdtemp, prefix="screenshot-", dir=self.screenshot_dir
        )
        return os.path.join(directory, self.screenshot_name(url))

    async def extract(
        self,
        page: Page,
        selector: DataSelector,
        url: str,
        screenshot_path: Optional[str] = None,
    ) -> ScrapedContent:
        """
        Extract the content of the element matching ``selector``.

        The text is read before the screenshot is taken, so a timeout on the
        text never leaves a file on disk. The screenshot file is removed on
        every exit path. Without a ``screenshot_path`` the extractor reserves
        and discards one itself.

        Args:
            page: Loaded Playwright page
            selector: Selector of the element
            url: Address the page was loaded from
            screenshot_path: Screenshot file reserved by the caller

        Returns:
            ScrapedContent with the text, the screenshot as a data URI and
            the validated selector

        Raises:
            ScrapingError: If the selector is invalid, the element has no
                content, or extraction fails
        """
        if not selector.path:
            raise ScrapingError(
                "Undefined selector path", ScrapingStatus.INVALID_SELECTOR, selector
            )

        try:
            validity = await self.validator.validate(selector)
        except SelectorValidityError as e:
            raise ScrapingError(
                f"Error validating the selector {selector.path}: {e.message}",
                ScrapingStatus.ERROR,
                selector,
            ) from e

        selector = validity.selector
        if selector.status != SelectorStatus.VALID:
            raise ScrapingError(
                f"Invalid selector {selector.path}",
                ScrapingStatus.INVALID_SELECTOR,
                selector,
            )

        owned = screenshot_path is None
        if owned:
            screenshot_path = await self.new_screenshot_path(url)

        locator = page.locator(selector.path)
        try:
            content = await locator.text_content()
            if not content:
                raise ScrapingError(
                    f"no content found for selector {selector.path}",
                    ScrapingStatus.NO_CONTENT,
                    selector,
                )

            await locator.screenshot(path=screenshot_path)
            async with aiofiles.open(screenshot_path, "rb") as f:
                image = await f.read()
        except PlaywrightTimeoutError as e:
            raise ScrapingError(
                f"the selector {selector.path} could not be found",
                ScrapingStatus.NO_CONTENT,
                selector,
            ) from e
        finally:
            if owned:
                await discard_screenshot(screenshot_path)
            else:
                await remove_quietly(screenshot_path)

        self.logger.debug(f"Extracted {len(content)} characters for {selector.path}")
        return ScrapedContent(
            content=content,
            screenshot=SCREENSHOT_MIME_PREFIX + base64.b64encode(image).decode(),
            selector=selector,
        )
