"""
Prometheus metrics for the recipe search service.

Tracks search operations, result sizes, result cache performance and
skipped candidate records.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# Search metrics
search_queries_total = Counter(
    "recipe_search_queries_total", "Total search queries", ["status"]
)

search_query_duration_seconds = Histogram(
    "recipe_search_query_duration_seconds",
    "Search duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5),
)

search_results_per_query = Histogram(
    "recipe_search_results_per_query",
    "Number of results returned per query",
    buckets=(0, 1, 5, 10, 25, 50, 100),
)

search_skipped_records_total = Counter(
    "recipe_search_skipped_records_total",
    "Candidate records skipped because they could not be scored",
)

# Cache metrics
search_cache_hits_total = Counter(
    "recipe_search_cache_hits_total", "Total result cache hits"
)

search_cache_misses_total = Counter(
    "recipe_search_cache_misses_total", "Total result cache misses"
)

search_cache_evictions_total = Counter(
    "recipe_search_cache_evictions_total", "Total result cache evictions"
)

search_cache_size = Gauge("recipe_search_cache_size", "Current result cache size in entries")


def track_search(status: str, duration: float, result_count: int) -> None:
    """
    Record one completed search.

    Args:
        status: "success" or "error"
        duration: Search duration in seconds
        result_count: Number of results returned
    """
    search_queries_total.labels(status=status).inc()
    search_query_duration_seconds.observe(duration)
    if status == "success":
        search_results_per_query.observe(result_count)


def metrics_endpoint() -> Response:
    """Render all metrics in the Prometheus exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
