#!/usr/bin/env python3
"""
Run the extraction pipeline for a single URL and print the JSON result.

Usage:
    python scripts/scrape_url.py https://example.com/product/123
    python scripts/scrape_url.py https://example.com/product/123 --static-only
"""

import asyncio
import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from product_scraper.ingest.base import ScraperError
from product_scraper.ingest.fetch_pipeline import ProductExtractionPipeline
from product_scraper.ingest.extractors import extract_product
from product_scraper.ingest.fetchers.static import StaticHTMLFetcher
from product_scraper.logging_config import setup_logging


async def scrape(url: str, static_only: bool = False):
    """Extract one URL and print the boundary JSON plus a summary line."""
    if static_only:
        try:
            html = await StaticHTMLFetcher().fetch(url)
            result = extract_product(html, url).to_dict()
        except ScraperError as e:
            print(json.dumps({"error": str(e)}, indent=2, ensure_ascii=False))
            return 1
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0

    outcome = await ProductExtractionPipeline().extract(url)

    print(json.dumps(outcome.to_dict(), indent=2, ensure_ascii=False))
    print(
        f"\nStrategy: {outcome.strategy_used.value if outcome.strategy_used else 'none'} "
        f"| Attempts: {[s.value for s in outcome.attempts]} "
        f"| Duration: {outcome.duration_ms:.0f}ms",
        file=sys.stderr,
    )
    return 0 if outcome.ok else 1


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Extract product data from a URL")
    parser.add_argument("url", help="Absolute product page URL")
    parser.add_argument(
        "--static-only",
        action="store_true",
        help="Never launch a headless browser",
    )
    args = parser.parse_args()

    setup_logging()
    sys.exit(asyncio.run(scrape(args.url, static_only=args.static_only)))
