"""Cache-first fetch entry point."""

from typing import Any, Protocol

import structlog

from postfeed.fetch.cache import ResponseCache
from postfeed.fetch.metrics import FetchMetrics


logger = structlog.get_logger()


class JsonTransport(Protocol):
    """Protocol for the network side of a fetch.

    Abstracts the transport to enable testing and alternative implementations.
    """

    async def fetch_json(self, url: str) -> Any:
        """Fetch a URL and return its decoded JSON body.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Decoded JSON value.
        """
        ...


class CachedFetcher:
    """Combines a ResponseCache and a transport into "get or fetch".

    The cache key is the exact URL string. A hit is trusted for its whole
    TTL window and never revalidated. Failures are not cached and are not
    retried beyond what the transport already does.
    """

    def __init__(
        self,
        transport: JsonTransport,
        cache: ResponseCache,
        run_id: str = "-",
    ) -> None:
        """Initialize the fetcher.

        Args:
            transport: Transport used on cache misses.
            cache: Shared response cache.
            run_id: Run identifier for logging.
        """
        self._transport = transport
        self._cache = cache
        self._metrics = FetchMetrics.get_instance()
        self._log = logger.bind(component="fetch", run_id=run_id)

    @property
    def cache(self) -> ResponseCache:
        """Get the shared response cache."""
        return self._cache

    async def fetch(self, url: str) -> Any:
        """Return the cached value for a URL or fetch and cache it.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Decoded JSON value.

        Raises:
            FetchError: Propagated unchanged from the transport.
        """
        cached = self._cache.get(url)
        if cached is not None:
            self._metrics.record_cache_hit()
            self._log.debug("cache_hit", url=url)
            return cached

        self._metrics.record_cache_miss()
        data = await self._transport.fetch_json(url)
        self._cache.set(url, data)
        return data
