"""Field extraction from product pages.

Each field is extracted by a cascade: an ordered sequence of rules, each of
which either produces a match or passes. The first match wins, so rule order
is the precedence order. Site conventions are added by appending rules.

Cascades:
- Name: first ``h1`` with non-empty text
- Price + currency: known price locations, then a regex scan of the page text
- Description: ``.product-description``
- Image: first known product image element, its ``src``
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

from product_scraper.ingest.base import PriceMatch, ProductRecord
from product_scraper.ingest.document import ProductDocument

logger = logging.getLogger(__name__)

# Symbol, optional space, digits with optional thousands commas and decimals
PRICE_PATTERN = re.compile(r"([₹$€£¥])\s?(\d[\d,]*(?:\.\d+)?)")

NAME_SELECTORS = [
    "h1",
]

PRICE_SELECTORS = [
    "#priceblock_ourprice",  # Amazon offer price
    ".price",
    '.item_price[data-hook="product_price"]',
    'meta[itemprop="price"]',
    ".a-offscreen",  # Amazon screen-reader price
]

DESCRIPTION_SELECTORS = [
    ".product-description",
]

IMAGE_SELECTORS = [
    "#landingImage",
    ".a-dynamic-image",
    ".product-image",
    ".primary-image",
]


@dataclass(frozen=True)
class FieldMatch:
    """Value produced by a cascade rule, with the rule that produced it."""

    value: Any
    rule: str


def parse_price(text: str) -> Optional[PriceMatch]:
    """
    Parse the first currency-prefixed amount in a piece of text.

    Args:
        text: Text such as "$1,234.56" or "Now only ₹99!"

    Returns:
        PriceMatch, or None when no symbol-prefixed amount is present
    """
    match = PRICE_PATTERN.search(text)
    if not match:
        return None

    currency, amount = match.groups()
    try:
        price = float(amount.replace(",", ""))
    except ValueError:
        return None
    return PriceMatch(price=price, currency=currency)


class CascadeRule(ABC):
    """One step of a selector cascade."""

    @abstractmethod
    def apply(self, document: ProductDocument) -> Optional[FieldMatch]:
        """Return a match, or None to pass to the next rule."""
        pass


@dataclass(frozen=True)
class TextRule(CascadeRule):
    """Trimmed text of the first element matching a selector; passes on empty text."""

    selector: str

    def apply(self, document):
        node = document.query_selector(self.selector)
        if node is None:
            return None
        text = document.text_content(node)
        return FieldMatch(text, self.selector) if text else None


@dataclass(frozen=True)
class AttributeRule(CascadeRule):
    """Attribute of the first element matching a selector.

    A matched element ends the cascade even if the attribute is missing.
    """

    selector: str
    attribute: str = "src"

    def apply(self, document):
        node = document.query_selector(self.selector)
        if node is None:
            return None
        return FieldMatch(document.attribute(node, self.attribute), self.selector)


@dataclass(frozen=True)
class PriceRule(CascadeRule):
    """Price parsed from the text of the first element matching a selector."""

    selector: str

    def apply(self, document):
        node = document.query_selector(self.selector)
        if node is None:
            return None
        price_match = parse_price(document.text_content(node))
        return FieldMatch(price_match, self.selector) if price_match else None


@dataclass(frozen=True)
class PageTextPriceRule(CascadeRule):
    """First currency-prefixed amount anywhere in the page's visible text."""

    def apply(self, document):
        price_match = parse_price(document.visible_text())
        return FieldMatch(price_match, "page_text_regex") if price_match else None


def run_cascade(
    rules: Iterable[CascadeRule], document: ProductDocument
) -> Optional[FieldMatch]:
    """Apply rules in order and return the first match."""
    for rule in rules:
        match = rule.apply(document)
        if match is not None:
            return match
    return None


NAME_RULES: Sequence[CascadeRule] = tuple(TextRule(s) for s in NAME_SELECTORS)
PRICE_RULES: Sequence[CascadeRule] = tuple(
    PriceRule(s) for s in PRICE_SELECTORS
) + (PageTextPriceRule(),)
DESCRIPTION_RULES: Sequence[CascadeRule] = tuple(
    TextRule(s) for s in DESCRIPTION_SELECTORS
)
IMAGE_RULES: Sequence[CascadeRule] = tuple(AttributeRule(s, "src") for s in IMAGE_SELECTORS)


class ProductExtractor:
    """Runs the field cascades over a document to build a ProductRecord."""

    def __init__(
        self,
        name_rules: Sequence[CascadeRule] = NAME_RULES,
        price_rules: Sequence[CascadeRule] = PRICE_RULES,
        description_rules: Sequence[CascadeRule] = DESCRIPTION_RULES,
        image_rules: Sequence[CascadeRule] = IMAGE_RULES,
    ):
        self.name_rules = tuple(name_rules)
        self.price_rules = tuple(price_rules)
        self.description_rules = tuple(description_rules)
        self.image_rules = tuple(image_rules)

    def _value(self, field: str, rules: Sequence[CascadeRule], document: ProductDocument):
        match = run_cascade(rules, document)
        if match is None:
            logger.debug(f"No {field} found in {len(rules)} rules")
            return None
        logger.debug(f"{field} matched by {match.rule[:50]}")
        return match.value

    def extract_name(self, document: ProductDocument) -> Optional[str]:
        return self._value("name", self.name_rules, document)

    def extract_price(self, document: ProductDocument) -> Optional[PriceMatch]:
        return self._value("price", self.price_rules, document)

    def extract_description(self, document: ProductDocument) -> Optional[str]:
        return self._value("description", self.description_rules, document)

    def extract_image_url(self, document: ProductDocument) -> Optional[str]:
        return self._value("image", self.image_rules, document)

    def extract(self, document: ProductDocument) -> ProductRecord:
        """Extract every field from a parsed document."""
        return ProductRecord.build(
            name=self.extract_name(document),
            price_match=self.extract_price(document),
            description=self.extract_description(document),
            image_url=self.extract_image_url(document),
        )


default_extractor = ProductExtractor()


def extract_name(document: ProductDocument) -> Optional[str]:
    """Product name from the default name cascade."""
    return default_extractor.extract_name(document)


def extract_price(document: ProductDocument) -> Optional[PriceMatch]:
    """Price and currency from the default price cascade."""
    return default_extractor.extract_price(document)


def extract_description(document: ProductDocument) -> Optional[str]:
    """Description from the default description cascade."""
    return default_extractor.extract_description(document)


def extract_image_url(document: ProductDocument) -> Optional[str]:
    """Image URL from the default image cascade."""
    return default_extractor.extract_image_url(document)


def extract_product(html: str, url: Optional[str] = None) -> ProductRecord:
    """Parse HTML and extract a ProductRecord with the default cascades."""
    return default_extractor.extract(ProductDocument(html, url))
