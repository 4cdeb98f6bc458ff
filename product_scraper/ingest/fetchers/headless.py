"""Headless browser fetcher for JavaScript-rendered product pages."""

import asyncio
import logging
import random
from typing import Callable, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from product_scraper.config import settings
from product_scraper.ingest.base import BaseFetcher, FetchStrategy, RenderError

logger = logging.getLogger(__name__)

DelayProvider = Callable[[], float]


def random_dwell_delay() -> float:
    """Seconds to linger after network idle, uniform in [min, max)."""
    return random.uniform(settings.dwell_delay_min_seconds, settings.dwell_delay_max_seconds)


class HeadlessBrowserFetcher(BaseFetcher):
    """
    Fetcher that renders pages in a headless Chromium.

    Every call launches its own browser and closes it before returning, so
    concurrent requests never share cookies, storage or navigation history.
    The price is a full browser startup per call.
    """

    strategy = FetchStrategy.HEADLESS

    def __init__(
        self,
        navigation_timeout_ms: Optional[int] = None,
        delay_provider: Optional[DelayProvider] = None,
        user_agent: Optional[str] = None,
        playwright_factory: Callable = async_playwright,
    ):
        """
        Initialize headless browser fetcher.

        Args:
            navigation_timeout_ms: Navigation budget in milliseconds
            delay_provider: Returns the dwell delay in seconds (defaults to random_dwell_delay)
            user_agent: User agent for the browser context
            playwright_factory: Returns an async context manager yielding Playwright
        """
        self.navigation_timeout_ms = (
            navigation_timeout_ms
            if navigation_timeout_ms is not None
            else settings.headless_navigation_timeout_ms
        )
        self.delay_provider = delay_provider or random_dwell_delay
        self.user_agent = user_agent or settings.user_agent
        self._playwright_factory = playwright_factory

    async def fetch(self, url: str) -> str:
        """
        Render a page and return its serialized DOM.

        Args:
            url: Absolute page URL

        Returns:
            Rendered HTML

        Raises:
            RenderError: If launch, navigation or capture fails or times out
        """
        try:
            async with self._playwright_factory() as playwright:
                browser = await playwright.chromium.launch(
                    headless=True,
                    args=settings.headless_launch_args,
                )
                try:
                    return await self._render(browser, url)
                finally:
                    await browser.close()
        except RenderError:
            raise
        except PlaywrightTimeoutError as e:
            logger.warning(f"Headless render timed out for {url}: {e}")
            raise RenderError(f"Timeout rendering {url}", url) from e
        except PlaywrightError as e:
            logger.warning(f"Headless render failed for {url}: {e}")
            raise RenderError(f"Failed to render {url}: {e}", url) from e

    async def _render(self, browser, url: str) -> str:
        """Navigate, wait for the page to settle and capture the DOM."""
        context = await browser.new_context(
            user_agent=self.user_agent,
            locale=settings.headless_locale,
            viewport={"width": 1920, "height": 1080},
        )
        page = await context.new_page()

        await page.goto(url, wait_until="networkidle", timeout=self.navigation_timeout_ms)

        # Mimic human dwell time and let late scripts finish
        delay = self.delay_provider()
        logger.debug(f"Waiting {delay:.2f}s before capturing {url}")
        await asyncio.sleep(delay)

        html = await page.content()
        logger.debug(f"Rendered {len(html)} chars from {url}")
        return html
