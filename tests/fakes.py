"""In-memory stand-ins for the Playwright browser, page and locator."""

import asyncio

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

FAKE_PNG = b"\x89PNG\r\n\x1a\nfake-image"


class FakeLocator:
    """Locator of a FakePage element."""

    def __init__(self, page: "FakePage", path: str):
        self.page = page
        self.path = path

    async def text_content(self):
        self.page.calls.append(("text_content", self.path))
        if self.path not in self.page.texts:
            raise PlaywrightTimeoutError(f"Timeout waiting for locator('{self.path}')")
        return self.page.texts[self.path]

    async def screenshot(self, path: str):
        self.page.calls.append(("screenshot", self.path))
        with open(path, "wb") as f:
            f.write(FAKE_PNG)
        self.page.screenshots.append(path)
        if self.page.screenshot_delay:
            await asyncio.sleep(self.page.screenshot_delay)
        if self.page.screenshot_error:
            raise self.page.screenshot_error


class FakePage:
    """Page holding a fixed set of elements, addressed by selector path."""

    def __init__(self, texts=None, clickable=(), broken=(), html="<html></html>"):
        self.texts = dict(texts or {})
        self.clickable = set(clickable)
        self.broken = set(broken)
        self.html = html
        self.timeout = None
        self.navigations = []
        self.set_contents = []
        self.clicks = []
        self.waits = []
        self.screenshots = []
        self.calls = []
        self.navigation_error = None
        self.screenshot_error = None
        self.screenshot_delay = 0

    def set_default_timeout(self, timeout):
        self.timeout = timeout

    async def goto(self, url):
        self.navigations.append(url)
        if self.navigation_error:
            raise self.navigation_error

    async def set_content(self, html):
        self.set_contents.append(html)

    async def content(self):
        return self.html

    async def wait_for_timeout(self, timeout):
        self.waits.append(timeout)

    async def click(self, path):
        if path in self.broken:
            raise RuntimeError(f"element {path} is detached")
        if path not in self.clickable:
            raise PlaywrightTimeoutError(f"Timeout waiting for locator('{path}')")
        self.clicks.append(path)

    def locator(self, path):
        return FakeLocator(self, path)


class FakeContext:
    def __init__(self, page):
        self.page = page

    async def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page):
        self.page = page
        self.closed = False

    async def new_context(self):
        return FakeContext(self.page)

    async def close(self):
        self.closed = True


class FakePlaywright:
    """Playwright entry point launching browsers that all share one page."""

    def __init__(self, page):
        self.page = page
        self.chromium = self
        self.browsers = []
        self.launch_args = None

    async def launch(self, **kwargs):
        self.launch_args = kwargs
        browser = FakeBrowser(self.page)
        self.browsers.append(browser)
        return browser

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False
