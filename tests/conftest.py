"""Shared fixtures wiring the scraping components to a fake browser."""

import pytest

from selector_scraper.scrapers.cache import PageCache
from selector_scraper.scrapers.extractor import ContentExtractor
from selector_scraper.scrapers.interactions import ClickSequencer
from selector_scraper.scrapers.page_loader import PageLoader
from selector_scraper.scrapers.validator import SelectorValidator, check_css_rule
from selector_scraper.services.scraper_service import ScraperService
from tests.fakes import FakePlaywright


@pytest.fixture
def fake_playwright_for():
    """Build a FakePlaywright and the factory a PageLoader expects."""

    def _build(page):
        playwright = FakePlaywright(page)
        return playwright, lambda: playwright

    return _build


@pytest.fixture
def make_service(tmp_path, fake_playwright_for):
    """Build a ScraperService over a FakePage and return it with its FakePlaywright.

    Pages are cached and screenshotted in tmp_path.
    """

    def _make(page, checker=check_css_rule):
        validator = SelectorValidator(checker=checker)
        playwright, factory = fake_playwright_for(page)
        loader = PageLoader(
            PageCache(str(tmp_path / "cache")),
            timeout_ms=1000,
            launch_args={},
            playwright_factory=factory,
        )
        service = ScraperService(
            validator=validator,
            page_loader=loader,
            sequencer=ClickSequencer(validator, settle_ms=0),
            extractor=ContentExtractor(validator, screenshot_dir=str(tmp_path)),
            page_settle_ms=0,
        )
        return service, playwright

    return _make
