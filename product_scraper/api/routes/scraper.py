"""Product scraping endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse

from product_scraper.api.deps import get_pipeline
from product_scraper.ingest.fetch_pipeline import ProductExtractionPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["scraper"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.options("/scraper")
async def scraper_preflight():
    """CORS preflight."""
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


@router.api_route("/scraper", methods=["GET", "POST"])
async def scrape_product(
    url: Optional[str] = Query(None),
    pipeline: ProductExtractionPipeline = Depends(get_pipeline),
):
    """
    Extract product data from the page at ``url``.

    Pipeline failures are reported as 200 with an ``error`` field; only a
    missing ``url`` parameter is a 400.
    """
    if not url:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Missing URL parameter"},
            headers=CORS_HEADERS,
        )

    outcome = await pipeline.extract(url)
    return JSONResponse(content=outcome.to_dict(), headers=CORS_HEADERS)
