"""Shared fakes for fetcher and pipeline tests."""

from typing import Optional

import pytest

from product_scraper.ingest.base import BaseFetcher, FetchStrategy


class FakePage:
    def __init__(self, html: str, goto_error: Optional[Exception] = None):
        self.html = html
        self.goto_error = goto_error
        self.goto_calls = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.goto_calls.append({"url": url, "wait_until": wait_until, "timeout": timeout})
        if self.goto_error:
            raise self.goto_error

    async def content(self):
        return self.html


class FakeContext:
    def __init__(self, page: FakePage):
        self.page = page
        self.options = None

    async def new_page(self):
        return self.page


class FakeBrowser:
    def __init__(self, page: FakePage):
        self.page = page
        self.close_count = 0
        self.contexts = []

    async def new_context(self, **options):
        context = FakeContext(self.page)
        context.options = options
        self.contexts.append(context)
        return context

    async def close(self):
        self.close_count += 1


class FakeChromium:
    def __init__(self, html: str, goto_error=None, launch_error=None):
        self.html = html
        self.goto_error = goto_error
        self.launch_error = launch_error
        self.browsers = []
        self.launch_kwargs = []

    async def launch(self, **kwargs):
        self.launch_kwargs.append(kwargs)
        if self.launch_error:
            raise self.launch_error
        browser = FakeBrowser(FakePage(self.html, self.goto_error))
        self.browsers.append(browser)
        return browser


class FakePlaywright:
    """Stands in for ``async_playwright()``: an async context manager."""

    def __init__(self, chromium: FakeChromium):
        self.chromium = chromium
        self.entered = 0
        self.exited = 0

    async def __aenter__(self):
        self.entered += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.exited += 1
        return False


class FakeFetcher(BaseFetcher):
    """Fetcher returning canned HTML or raising a canned error."""

    def __init__(self, strategy: FetchStrategy, html=None, error: Optional[Exception] = None):
        self.strategy = strategy
        self.html = html
        self.error = error
        self.calls = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self.error:
            raise self.error
        return self.html


@pytest.fixture
def make_playwright():
    """Build a (factory, chromium) pair for HeadlessBrowserFetcher."""

    def _make(html="<html><body></body></html>", goto_error=None, launch_error=None):
        chromium = FakeChromium(html, goto_error=goto_error, launch_error=launch_error)
        manager = FakePlaywright(chromium)
        return (lambda: manager), chromium

    return _make


@pytest.fixture
def make_fetcher():
    """Build a FakeFetcher for a strategy."""

    def _make(strategy: FetchStrategy, html=None, error=None):
        return FakeFetcher(strategy, html=html, error=error)

    return _make

