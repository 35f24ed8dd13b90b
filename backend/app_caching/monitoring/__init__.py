"""
App Caching Monitoring Module

Prometheus metrics for cache operations.
"""

from .cache_metrics import cache_requests_total, record_cache_get, record_cache_set

__all__ = [
    "cache_requests_total",
    "record_cache_get",
    "record_cache_set",
]
