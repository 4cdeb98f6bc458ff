"""Base types for page fetchers and extracted product data."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class FetchStrategy(Enum):
    """Available fetch strategies, cheapest first."""
    STATIC = "static"
    HEADLESS = "headless"


class ScraperError(Exception):
    """Base class for failures inside the extraction pipeline."""

    kind = "internal"

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        super().__init__(message)


class NetworkError(ScraperError):
    """Static fetch failed: connection error, timeout or non-2xx status."""

    kind = "network"

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, url)


class RenderError(ScraperError):
    """Headless browser failed to launch, navigate or capture the page."""

    kind = "render"


class ParseError(ScraperError):
    """HTML could not be parsed into a document."""

    kind = "parse"


@dataclass(frozen=True)
class PriceMatch:
    """A price and its currency symbol, parsed from one regex match."""

    price: float
    currency: str


@dataclass(frozen=True)
class ProductRecord:
    """Structured product data extracted from one page."""

    name: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None

    @classmethod
    def build(
        cls,
        name: Optional[str] = None,
        price_match: Optional[PriceMatch] = None,
        description: Optional[str] = None,
        image_url: Optional[str] = None,
    ) -> "ProductRecord":
        """Build a record, taking price and currency from a single match."""
        return cls(
            name=name,
            price=price_match.price if price_match else None,
            currency=price_match.currency if price_match else None,
            description=description,
            image_url=image_url,
        )

    @property
    def is_complete(self) -> bool:
        """True when both name and price were found."""
        return bool(self.name) and self.price is not None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the boundary JSON shape, omitting absent fields."""
        data = {
            "name": self.name,
            "price": self.price,
            "currency": self.currency,
            "description": self.description,
            "image_url": self.image_url,
        }
        return {key: value for key, value in data.items() if value is not None}


class BaseFetcher(ABC):
    """Abstract base class for page fetchers."""

    strategy: FetchStrategy

    @abstractmethod
    async def fetch(self, url: str) -> str:
        """
        Fetch the HTML for a page.

        Args:
            url: Absolute URL of the product page

        Returns:
            HTML text

        Raises:
            ScraperError: If the fetch fails
        """
        pass
