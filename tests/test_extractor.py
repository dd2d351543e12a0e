"""Tests for text and screenshot extraction."""

import base64
import os

import pytest

from selector_scraper.models.schemas import DataSelector, ScrapingStatus, SelectorStatus
from selector_scraper.scrapers.errors import ScrapingError
from selector_scraper.scrapers.extractor import (
    ContentExtractor,
    discard_screenshot,
    remove_quietly,
)
from selector_scraper.scrapers.validator import SelectorValidator
from tests.fakes import FAKE_PNG, FakePage

URL = "https://example.test/products/page"


@pytest.fixture
def extractor(tmp_path):
    return ContentExtractor(SelectorValidator(), screenshot_dir=str(tmp_path))


def nothing_left(tmp_path):
    return os.listdir(tmp_path) == []


class TestContentExtractor:
    """Tests for ContentExtractor."""

    def test_screenshot_name(self):
        assert ContentExtractor.screenshot_name(URL) == "example.test-page.png"

    @pytest.mark.asyncio
    async def test_each_request_gets_its_own_screenshot_directory(self, extractor, tmp_path):
        first = await extractor.new_screenshot_path(URL)
        second = await extractor.new_screenshot_path(URL)

        assert first != second
        assert os.path.basename(first) == os.path.basename(second) == "example.test-page.png"
        assert os.path.dirname(os.path.dirname(first)) == str(tmp_path)
        assert os.path.isdir(os.path.dirname(first))

    @pytest.mark.asyncio
    async def test_extracts_text_and_screenshot(self, extractor, tmp_path):
        page = FakePage(texts={".a-good-selector": "yeah baby"})

        result = await extractor.extract(page, DataSelector(path=".a-good-selector"), URL)

        assert result.status == ScrapingStatus.SUCCESS
        assert result.content == "yeah baby"
        assert result.selector.status == SelectorStatus.VALID
        assert result.screenshot == "data:image/gif;base64," + base64.b64encode(FAKE_PNG).decode()
        assert nothing_left(tmp_path)

    @pytest.mark.asyncio
    async def test_text_is_read_before_screenshot(self, extractor):
        page = FakePage(texts={"h1": "Title"})

        await extractor.extract(page, DataSelector(path="h1"), URL)

        assert page.calls == [("text_content", "h1"), ("screenshot", "h1")]

    @pytest.mark.asyncio
    async def test_empty_text_is_no_content(self, extractor, tmp_path):
        page = FakePage(texts={".empty": ""})

        with pytest.raises(ScrapingError) as exc_info:
            await extractor.extract(page, DataSelector(path=".empty"), URL)

        assert exc_info.value.status == ScrapingStatus.NO_CONTENT
        assert nothing_left(tmp_path)

    @pytest.mark.asyncio
    async def test_missing_element_is_no_content(self, extractor):
        page = FakePage()

        with pytest.raises(ScrapingError) as exc_info:
            await extractor.extract(page, DataSelector(path=".missing"), URL)

        assert exc_info.value.status == ScrapingStatus.NO_CONTENT
        assert page.screenshots == []

    @pytest.mark.asyncio
    async def test_invalid_selector_before_browser_work(self, extractor):
        page = FakePage()

        with pytest.raises(ScrapingError) as exc_info:
            await extractor.extract(page, DataSelector(path="p >"), URL)

        assert exc_info.value.status == ScrapingStatus.INVALID_SELECTOR
        assert exc_info.value.selector.status == SelectorStatus.INVALID
        assert page.calls == []

    @pytest.mark.asyncio
    async def test_empty_path_is_invalid_selector(self, extractor):
        page = FakePage()

        with pytest.raises(ScrapingError) as exc_info:
            await extractor.extract(page, DataSelector(path=""), URL)

        assert exc_info.value.status == ScrapingStatus.INVALID_SELECTOR
        assert page.calls == []

    @pytest.mark.asyncio
    async def test_screenshot_removed_on_error(self, extractor, tmp_path):
        page = FakePage(texts={"h1": "Title"})
        page.screenshot_error = OSError("disk full")

        with pytest.raises(OSError):
            await extractor.extract(page, DataSelector(path="h1"), URL)

        assert len(page.screenshots) == 1
        assert not os.path.exists(page.screenshots[0])
        assert nothing_left(tmp_path)

    @pytest.mark.asyncio
    async def test_reserved_path_is_used_and_its_directory_left_to_caller(self, extractor):
        page = FakePage(texts={"h1": "Title"})
        path = await extractor.new_screenshot_path(URL)

        await extractor.extract(page, DataSelector(path="h1"), URL, screenshot_path=path)

        assert page.screenshots == [path]
        assert not os.path.exists(path)
        assert os.path.isdir(os.path.dirname(path))

        await discard_screenshot(path)
        assert not os.path.exists(os.path.dirname(path))


@pytest.mark.asyncio
async def test_remove_quietly_ignores_missing_file(tmp_path):
    await remove_quietly(str(tmp_path / "nothing.png"))
