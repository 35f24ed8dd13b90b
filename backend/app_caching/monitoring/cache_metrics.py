"""
Cache Metrics

Prometheus counters for cache operations, labelled by backend,
operation and result.
"""

from prometheus_client import Counter

cache_requests_total = Counter(
    "app_caching_cache_requests_total",
    "Total number of cache operations",
    ["backend", "operation", "result"],
)


def record_cache_get(backend: str, hit: bool) -> None:
    """Count a cache read as a hit or a miss."""
    cache_requests_total.labels(
        backend=backend, operation="get", result="hit" if hit else "miss"
    ).inc()


def record_cache_set(backend: str) -> None:
    """Count a cache write."""
    cache_requests_total.labels(backend=backend, operation="set", result="stored").inc()
