"""Browser-like HTTP headers for static page requests."""

import logging
from typing import Dict, Optional

from product_scraper.config import settings

logger = logging.getLogger(__name__)


class HeaderBuilder:
    """
    Builds headers that mimic a common desktop browser.

    Includes a Referer spoofing a search-engine origin so the request looks
    like a click-through from search results.
    """

    def __init__(
        self,
        user_agent: Optional[str] = None,
        accept_language: Optional[str] = None,
        referer: Optional[str] = None,
    ):
        self.user_agent = user_agent or settings.user_agent
        self.accept_language = accept_language or settings.accept_language
        self.referer = referer or settings.default_referer

    def build_headers(self, referer: Optional[str] = None) -> Dict[str, str]:
        """
        Build request headers.

        Args:
            referer: Referer override (defaults to the search-engine origin)

        Returns:
            Dict of HTTP headers
        """
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
            "Accept-Encoding": "gzip, deflate, br",
            "Connection": "keep-alive",
            "Referer": referer or self.referer,
        }


# Global instance
header_builder = HeaderBuilder()
