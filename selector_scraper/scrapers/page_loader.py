"""Page acquisition with Playwright, backed by the page cache."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from playwright.async_api import Page, async_playwright

from selector_scraper.config import settings
from selector_scraper.scrapers.cache import PageCache


class PageLoader:
    """Open a live page for a URL, from the cache or from the web."""

    def __init__(
        self,
        cache: PageCache,
        timeout_ms: int = settings.PAGE_TIMEOUT_MS,
        launch_args: Optional[dict] = None,
        logger: Optional[logging.Logger] = None,
        playwright_factory=async_playwright,
    ):
        """Initialize the page loader.

        Args:
            cache: Cache of page markup
            timeout_ms: Default timeout of every page operation
            launch_args: Arguments passed to ``chromium.launch``
            logger: Logger to report to
            playwright_factory: Callable returning the Playwright context manager
        """
        self.cache = cache
        self.timeout_ms = timeout_ms
        self.launch_args = (
            launch_args if launch_args is not None else settings.PLAYWRIGHT_LAUNCH_ARGS
        )
        self.logger = logger or logging.getLogger(__name__)
        self.playwright_factory = playwright_factory

    @asynccontextmanager
    async def open(self, url: str, use_cache: bool = True) -> AsyncIterator[Page]:
        """
        Open a page loaded with the content of ``url``.

        A fresh browser and context are launched for every call and closed
        when the context manager exits, whatever the outcome.

        Args:
            url: Page address
            use_cache: Replay the cached markup when available

        Yields:
            The loaded Playwright page

        Raises:
            Exception: Navigation and network errors, unmodified
        """
        async with self.playwright_factory() as playwright:
            browser = await playwright.chromium.launch(**self.launch_args)
            try:
                context = await browser.new_context()
                page = await context.new_page()
                page.set_default_timeout(self.timeout_ms)

                await self._load(page, url, use_cache)
                yield page
            finally:
                await browser.close()

    async def _load(self, page: Page, url: str, use_cache: bool) -> None:
        """Fill the page from the cache, or navigate and populate the cache."""
        namespace = PageCache.namespace_for(url)
        key = PageCache.key_for(url)

        cached_html = await self.cache.get(namespace, key) if use_cache else None

        if cached_html is not None:
            self.logger.info(f"Using cached content for {url}")
            await page.set_content(cached_html)
            return

        self.logger.warning(f"Downloading content from the web for {url}")
        await page.goto(url)
        html_content = await page.content()
        await self.cache.set(namespace, key, html_content)
