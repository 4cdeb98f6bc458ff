"""Two-tier extraction pipeline: static fetch first, headless render as fallback.

States:
    StaticAttempt  -> fetch raw HTML, parse, extract
    DynamicAttempt -> render in a headless browser, parse, extract

A static record missing its name or price moves the pipeline to
DynamicAttempt. The dynamic record is final whether or not it is complete.
A hard static failure ends the pipeline with an error unless
``escalate_on_static_failure`` is enabled.

Every stage returns a StageResult instead of raising, and extract() always
returns an ExtractionOutcome.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from product_scraper import metrics
from product_scraper.config import settings
from product_scraper.ingest.base import (
    BaseFetcher,
    FetchStrategy,
    ProductRecord,
    ScraperError,
)
from product_scraper.ingest.document import ProductDocument
from product_scraper.ingest.extractors import ProductExtractor, default_extractor
from product_scraper.ingest.fetchers.headless import HeadlessBrowserFetcher
from product_scraper.ingest.fetchers.static import StaticHTMLFetcher
from product_scraper.logging_config import get_logger


class PipelineState(Enum):
    """Orchestrator states."""
    STATIC_ATTEMPT = "static_attempt"
    DYNAMIC_ATTEMPT = "dynamic_attempt"


@dataclass
class StageResult:
    """Result of one fetch, parse and extract pass."""
    strategy: FetchStrategy
    duration_ms: float
    record: Optional[ProductRecord] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.record is not None


@dataclass
class ExtractionOutcome:
    """Final result of an extraction request: a record or a tagged error."""
    url: str
    record: Optional[ProductRecord] = None
    error: Optional[str] = None
    error_kind: Optional[str] = None
    strategy_used: Optional[FetchStrategy] = None
    attempts: List[FetchStrategy] = field(default_factory=list)
    duration_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Boundary JSON: record fields, or {"error": message}."""
        if self.error is not None:
            return {"error": self.error}
        return self.record.to_dict() if self.record else {}


class ProductExtractionPipeline:
    """Extracts a ProductRecord from a URL with static-then-headless fallback."""

    def __init__(
        self,
        static_fetcher: Optional[BaseFetcher] = None,
        dynamic_fetcher: Optional[BaseFetcher] = None,
        extractor: Optional[ProductExtractor] = None,
        escalate_on_static_failure: Optional[bool] = None,
    ):
        self.static_fetcher = static_fetcher or StaticHTMLFetcher()
        self.dynamic_fetcher = dynamic_fetcher or HeadlessBrowserFetcher()
        self.extractor = extractor or default_extractor
        self.escalate_on_static_failure = (
            escalate_on_static_failure
            if escalate_on_static_failure is not None
            else settings.escalate_on_static_failure
        )

    async def extract(self, url: str) -> ExtractionOutcome:
        """
        Run the pipeline for one URL. Never raises.

        Args:
            url: Absolute product page URL

        Returns:
            ExtractionOutcome with the chosen record or an error
        """
        log = get_logger(__name__, url=url)
        start_time = time.monotonic()
        attempts: List[FetchStrategy] = []

        state = PipelineState.STATIC_ATTEMPT
        result = await self._run_stage(self.static_fetcher, url)
        attempts.append(result.strategy)

        if result.ok and result.record.is_complete:
            log.info(f"Static extraction complete for {url}")
        elif result.ok:
            missing = [f for f in ("name", "price") if getattr(result.record, f) is None]
            log.info(f"Static extraction incomplete for {url} (missing {', '.join(missing)}), rendering")
            metrics.record_headless_fallback("incomplete")
            state = PipelineState.DYNAMIC_ATTEMPT
        elif self.escalate_on_static_failure:
            log.info(f"Static fetch failed for {url} ({result.error}), rendering")
            metrics.record_headless_fallback(result.error_kind or "error")
            state = PipelineState.DYNAMIC_ATTEMPT

        if state is PipelineState.DYNAMIC_ATTEMPT:
            result = await self._run_stage(self.dynamic_fetcher, url)
            attempts.append(result.strategy)

        outcome = ExtractionOutcome(
            url=url,
            record=result.record,
            error=result.error,
            error_kind=result.error_kind,
            strategy_used=result.strategy,
            attempts=attempts,
            duration_ms=(time.monotonic() - start_time) * 1000,
        )

        metrics.record_extraction(
            result.strategy.value, "error" if result.error else "success"
        )
        final_log = log.bind(strategy=result.strategy.value)
        if outcome.ok:
            final_log.info(
                f"Extracted {url} via {result.strategy.value} "
                f"({outcome.duration_ms:.0f}ms, fields: {sorted(outcome.to_dict())})"
            )
        else:
            final_log.warning(f"Extraction failed for {url} via {result.strategy.value}: {outcome.error}")
        return outcome

    async def _run_stage(self, fetcher: BaseFetcher, url: str) -> StageResult:
        """Fetch, parse and extract with one fetcher, capturing any failure."""
        strategy = fetcher.strategy
        log = get_logger(__name__, url=url, strategy=strategy.value)
        start_time = time.monotonic()

        def elapsed_ms() -> float:
            return (time.monotonic() - start_time) * 1000

        try:
            html = await fetcher.fetch(url)
        except ScraperError as e:
            metrics.record_fetch_error(strategy.value, e.kind, elapsed_ms() / 1000)
            return StageResult(strategy, elapsed_ms(), error=str(e), error_kind=e.kind)
        except Exception as e:
            log.exception(f"Unexpected {strategy.value} fetch error for {url}")
            metrics.record_fetch_error(strategy.value, "internal", elapsed_ms() / 1000)
            return StageResult(strategy, elapsed_ms(), error=str(e) or type(e).__name__, error_kind="internal")

        metrics.record_fetch_success(strategy.value, elapsed_ms() / 1000)

        try:
            document = ProductDocument(html, url)
            record = self.extractor.extract(document)
        except ScraperError as e:
            return StageResult(strategy, elapsed_ms(), error=str(e), error_kind=e.kind)
        except Exception as e:
            log.exception(f"Unexpected extraction error for {url}")
            return StageResult(strategy, elapsed_ms(), error=str(e) or type(e).__name__, error_kind="internal")

        log.debug(f"{strategy.value} stage for {url} took {elapsed_ms():.0f}ms")
        return StageResult(strategy, elapsed_ms(), record=record)


async def scrape_product_data(url: str) -> Dict[str, Any]:
    """Run the default pipeline and return the boundary JSON object."""
    outcome = await ProductExtractionPipeline().extract(url)
    return outcome.to_dict()
