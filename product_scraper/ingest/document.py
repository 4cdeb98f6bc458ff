"""Queryable HTML document backed by selectolax."""

import logging
from typing import Optional, Union

from selectolax.parser import HTMLParser, Node

from product_scraper.ingest.base import ParseError

logger = logging.getLogger(__name__)

# Tags whose content never renders as page text
NON_VISIBLE_TAGS = ["script", "style", "noscript", "template"]


class ProductDocument:
    """Parsed HTML page exposing the lookups the field extractors need."""

    def __init__(self, html: Union[str, bytes], url: Optional[str] = None):
        """
        Parse HTML into a queryable tree.

        Args:
            html: Raw HTML text (or bytes)
            url: Source URL, kept for error messages

        Raises:
            ParseError: If the input is not HTML text or the parser rejects it
        """
        if not isinstance(html, (str, bytes)):
            raise ParseError(
                f"Failed to parse HTML document: expected text, got {type(html).__name__}",
                url,
            )

        self.url = url
        self._html = html
        try:
            self._tree = HTMLParser(html)
        except Exception as e:
            raise ParseError(f"Failed to parse HTML document: {e}", url) from e

    def query_selector(self, selector: str) -> Optional[Node]:
        """Return the first element matching a CSS selector, or None."""
        try:
            return self._tree.css_first(selector)
        except Exception as e:
            logger.debug(f"Selector error: {selector[:50]} - {e}")
            return None

    @staticmethod
    def text_content(node: Node) -> str:
        """Full text content of an element with outer whitespace trimmed."""
        return (node.text(deep=True) or "").strip()

    @staticmethod
    def attribute(node: Node, name: str) -> Optional[str]:
        """Attribute value of an element, or None when it is missing."""
        return node.attributes.get(name)

    def visible_text(self) -> str:
        """Text of the whole document without script and style content."""
        # Stripping mutates the tree, so work on a separate parse
        tree = HTMLParser(self._html)
        tree.strip_tags(NON_VISIBLE_TAGS)

        container = tree.body or tree.root
        if container is None:
            return ""
        return container.text(deep=True) or ""
