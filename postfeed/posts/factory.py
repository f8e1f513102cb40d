"""Wiring for a complete post feed pipeline."""

import httpx

from postfeed.config.schemas import FeedConfig
from postfeed.fetch.cache import ResponseCache
from postfeed.fetch.client import HttpTransport
from postfeed.fetch.fetcher import CachedFetcher
from postfeed.posts.api import PostsApi
from postfeed.posts.controller import PaginationController
from postfeed.throttle.throttler import TaskThrottler


class PostFeed:
    """A wired pipeline: cache, transport, fetcher, API, throttler, controller.

    Use as an async context manager so the transport is closed on exit.
    """

    def __init__(
        self,
        controller: PaginationController,
        transport: HttpTransport,
        cache: ResponseCache,
    ) -> None:
        """Initialize the feed.

        Args:
            controller: Pagination controller serving pages.
            transport: Transport to close on exit.
            cache: Shared response cache.
        """
        self.controller = controller
        self.transport = transport
        self.cache = cache

    async def aclose(self) -> None:
        """Close the underlying transport."""
        await self.transport.aclose()

    async def __aenter__(self) -> "PostFeed":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


def create_feed(
    config: FeedConfig,
    run_id: str = "-",
    client: httpx.AsyncClient | None = None,
    cache: ResponseCache | None = None,
) -> PostFeed:
    """Build a post feed from configuration.

    Args:
        config: Feed configuration.
        run_id: Run identifier for logging.
        client: Optional httpx client shared with the caller.
        cache: Optional cache shared with other feeds.

    Returns:
        Wired PostFeed.
    """
    if cache is None:
        cache = ResponseCache(ttl_ms=config.fetch.cache_ttl_ms)
    transport = HttpTransport(config.fetch, client=client, run_id=run_id)
    fetcher = CachedFetcher(transport, cache, run_id=run_id)
    api = PostsApi(fetcher, config.base_url)
    throttler = TaskThrottler(config.pagination.max_concurrent, run_id=run_id)
    controller = PaginationController(
        api=api,
        throttler=throttler,
        page_size=config.pagination.page_size,
        max_concurrent=config.pagination.max_concurrent,
        run_id=run_id,
    )
    return PostFeed(controller=controller, transport=transport, cache=cache)
