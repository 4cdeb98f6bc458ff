"""Prometheus metrics for the product scraper."""

from prometheus_client import Counter, Histogram, Info

# Application info
app_info = Info("product_scraper", "Product scraper application info")
app_info.info({"version": "0.1.0", "name": "product-scraper"})

# Fetch metrics
fetch_attempts_total = Counter(
    "scraper_fetch_attempts_total",
    "Total number of page fetch attempts",
    ["strategy", "status"],
)

fetch_errors_total = Counter(
    "scraper_fetch_errors_total",
    "Total number of failed page fetches",
    ["strategy", "error_type"],
)

fetch_duration_seconds = Histogram(
    "scraper_fetch_duration_seconds",
    "Time spent fetching pages",
    ["strategy"],
    buckets=[0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0],
)

# Fallback metrics
headless_fallbacks_total = Counter(
    "scraper_headless_fallbacks_total",
    "Total number of escalations from static to headless fetching",
    ["reason"],
)

# Extraction metrics
extractions_total = Counter(
    "scraper_extractions_total",
    "Total number of completed extraction requests",
    ["strategy", "outcome"],
)


def record_fetch_success(strategy: str, duration: float):
    """Record a successful page fetch."""
    fetch_attempts_total.labels(strategy=strategy, status="success").inc()
    fetch_duration_seconds.labels(strategy=strategy).observe(duration)


def record_fetch_error(strategy: str, error_type: str, duration: float):
    """Record a failed page fetch."""
    fetch_attempts_total.labels(strategy=strategy, status="error").inc()
    fetch_errors_total.labels(strategy=strategy, error_type=error_type).inc()
    fetch_duration_seconds.labels(strategy=strategy).observe(duration)


def record_headless_fallback(reason: str):
    """Record an escalation to the headless strategy."""
    headless_fallbacks_total.labels(reason=reason).inc()


def record_extraction(strategy: str, outcome: str):
    """Record the final outcome of an extraction request."""
    extractions_total.labels(strategy=strategy, outcome=outcome).inc()
