"""FastAPI dependencies."""

from product_scraper.ingest.fetch_pipeline import ProductExtractionPipeline


def get_pipeline() -> ProductExtractionPipeline:
    """Dependency for the extraction pipeline; a fresh one per request."""
    return ProductExtractionPipeline()
