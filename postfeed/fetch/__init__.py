"""HTTP fetch layer with caching, timeouts, and retries.

This module provides the data-acquisition primitives:
- Time-bounded in-memory response cache
- Transport racing each request against a hard timeout
- Fixed-delay retry policy
- Cache-first fetch entry point keyed by URL
- Metrics collection for observability
"""

from postfeed.fetch.cache import CacheEntry, ResponseCache
from postfeed.fetch.client import HttpTransport
from postfeed.fetch.config import FetchConfig
from postfeed.fetch.errors import (
    FetchError,
    FetchErrorClass,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    ResponseDecodeError,
    UnexpectedFetchError,
)
from postfeed.fetch.fetcher import CachedFetcher, JsonTransport
from postfeed.fetch.metrics import FetchMetrics
from postfeed.fetch.models import RetryPolicy


__all__ = [
    # Cache
    "CacheEntry",
    "ResponseCache",
    # Transport
    "HttpTransport",
    "JsonTransport",
    "CachedFetcher",
    # Config
    "FetchConfig",
    "RetryPolicy",
    # Errors
    "FetchError",
    "FetchErrorClass",
    "HttpStatusError",
    "NetworkError",
    "RequestTimeoutError",
    "ResponseDecodeError",
    "UnexpectedFetchError",
    # Metrics
    "FetchMetrics",
]
