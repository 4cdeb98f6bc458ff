"""Static HTML fetcher for server-rendered product pages."""

import logging
from typing import Optional

import httpx

from product_scraper.config import settings
from product_scraper.ingest.base import BaseFetcher, FetchStrategy, NetworkError
from product_scraper.ingest.header_builder import HeaderBuilder
from product_scraper.ingest.header_builder import header_builder as default_header_builder

logger = logging.getLogger(__name__)


class StaticHTMLFetcher(BaseFetcher):
    """Fetches raw HTML with a single GET and browser-like headers."""

    strategy = FetchStrategy.STATIC

    def __init__(
        self,
        header_builder: Optional[HeaderBuilder] = None,
        timeout: Optional[float] = None,
        follow_redirects: Optional[bool] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize static HTML fetcher.

        Args:
            header_builder: Header builder (defaults to the shared instance)
            timeout: Request timeout in seconds
            follow_redirects: Whether to follow redirects
            transport: Optional httpx transport (used by tests)
        """
        self.header_builder = header_builder or default_header_builder
        self.timeout = timeout if timeout is not None else settings.static_request_timeout
        self.follow_redirects = (
            follow_redirects if follow_redirects is not None else settings.static_follow_redirects
        )
        self.transport = transport

    async def fetch(self, url: str) -> str:
        """
        Fetch the raw HTML of a page.

        Args:
            url: Absolute page URL

        Returns:
            Response body as text

        Raises:
            NetworkError: On connection failure, timeout or non-2xx status
        """
        # A client per call keeps connection and cookie state request-scoped
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=self.follow_redirects,
            headers=self.header_builder.build_headers(),
            transport=self.transport,
        ) as client:
            try:
                response = await client.get(url)
            except httpx.TimeoutException as e:
                logger.warning(f"Static fetch timed out for {url}: {e}")
                raise NetworkError(f"Timeout fetching {url}", url) from e
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.warning(f"Static fetch failed for {url}: {e}")
                raise NetworkError(f"Failed to fetch {url}: {e}", url) from e

        if not response.is_success:
            logger.warning(f"Static fetch for {url} returned HTTP {response.status_code}")
            raise NetworkError(
                f"HTTP {response.status_code} fetching {url}",
                url,
                status_code=response.status_code,
            )

        logger.debug(f"Fetched {len(response.text)} chars from {url}")
        return response.text
