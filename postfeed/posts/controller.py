"""Pagination controller: sorted listing, page slicing, and hydration."""

import asyncio
import time
from functools import partial

import structlog

from postfeed.posts.api import PostsApi
from postfeed.posts.errors import InitializationError
from postfeed.posts.metrics import PaginationMetrics
from postfeed.posts.models import PageResult, PostDetail, PostSummary
from postfeed.posts.state_machine import PaginationState, PaginationStateMachine
from postfeed.throttle.throttler import TaskThrottler


logger = structlog.get_logger()


class PaginationController:
    """Owns one listing session and serves it page by page.

    Implements a state machine flow:
        UNINITIALIZED -> READY (initialize) -> UNINITIALIZED (reset)

    The listing is sorted once, on initialize, by like count descending;
    ties keep server order. Pages are fixed slices of that order. Each post
    on a page is hydrated with its detail record and comments through the
    throttler; a post whose hydration fails is replaced by a degraded record
    so one bad post never blocks a page.

    One instance serves one session. Callers must await a page before
    requesting the next.
    """

    def __init__(  # noqa: PLR0913
        self,
        api: PostsApi,
        throttler: TaskThrottler,
        page_size: int,
        max_concurrent: int | None = None,
        run_id: str = "-",
        metrics: PaginationMetrics | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            api: Posts endpoint client.
            throttler: Throttler used to hydrate a page.
            page_size: Number of posts per page.
            max_concurrent: Hydration tasks in flight; defaults to the
                throttler's limit.
            run_id: Run identifier for logging.
            metrics: Optional metrics instance.

        Raises:
            ValueError: If page_size is smaller than 1.
        """
        if page_size < 1:
            msg = f"Page size must be at least 1, got {page_size}"
            raise ValueError(msg)

        self._api = api
        self._throttler = throttler
        self._page_size = page_size
        self._max_concurrent = max_concurrent or throttler.limit
        self._metrics = metrics or PaginationMetrics.get_instance()
        self._state_machine = PaginationStateMachine(run_id=run_id)
        self._summaries: tuple[PostSummary, ...] = ()
        self._page_index = 0
        self._log = logger.bind(component="pagination", run_id=run_id)

    @property
    def state(self) -> PaginationState:
        """Get the current state."""
        return self._state_machine.state

    @property
    def page_size(self) -> int:
        """Get the number of posts per page."""
        return self._page_size

    @property
    def page_index(self) -> int:
        """Get the index of the next page to load."""
        return self._page_index

    @property
    def sorted_summaries(self) -> tuple[PostSummary, ...]:
        """Get the listing in page order."""
        return self._summaries

    @property
    def total_count(self) -> int:
        """Get the number of posts in the listing."""
        return len(self._summaries)

    async def initialize(self) -> PageResult:
        """Fetch and sort the listing, then load the first page.

        Returns:
            The first page.

        Raises:
            InitializationError: If the listing cannot be fetched or parsed.
                The controller is left reset.
        """
        self._log.info("initialize_started", url=self._api.posts_url())

        try:
            summaries = await self._api.fetch_posts()
        except Exception as e:  # noqa: BLE001
            self.reset()
            self._metrics.record_initialize(success=False)
            self._log.error("initialize_failed", error=str(e))
            raise InitializationError(e) from e

        # sorted() is stable with reverse=True: equal counts keep server order
        self._summaries = tuple(
            sorted(summaries, key=lambda s: s.like_count, reverse=True)
        )
        self._page_index = 0
        self._state_machine.to_ready()
        self._metrics.record_initialize(success=True)

        self._log.info(
            "listing_sorted",
            total_count=len(self._summaries),
            page_size=self._page_size,
        )

        return await self.load_next_page()

    async def load_next_page(self) -> PageResult:
        """Hydrate and return the next page of the listing.

        Returns:
            The page, or an empty result with has_more False once the
            listing is exhausted (also before initialize).
        """
        start = self._page_index * self._page_size
        batch = self._summaries[start : start + self._page_size]

        if not batch:
            self._metrics.record_end_of_listing()
            self._log.debug("end_of_listing", page_index=self._page_index)
            return PageResult.end_of_listing()

        start_time = time.perf_counter()
        tasks = [partial(self._hydrate, summary) for summary in batch]
        posts = await self._throttler.run(tasks, limit=self._max_concurrent)

        self._page_index += 1
        has_more = self._page_index * self._page_size < len(self._summaries)

        degraded = sum(1 for post in posts if post.error)
        self._metrics.record_page(hydrated=len(posts) - degraded, degraded=degraded)
        self._log.info(
            "page_loaded",
            page_index=self._page_index - 1,
            post_count=len(posts),
            degraded_count=degraded,
            has_more=has_more,
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )

        return PageResult(posts=posts, has_more=has_more)

    def reset(self) -> None:
        """Drop the listing and rewind to the first page.

        The shared response cache is left untouched.
        """
        self._summaries = ()
        self._page_index = 0
        self._state_machine.to_uninitialized()

    async def _hydrate(self, summary: PostSummary) -> PostDetail:
        """Fetch detail and comments for one post, degrading on failure.

        Args:
            summary: Listing summary of the post.

        Returns:
            Hydrated post, or a degraded record if either fetch failed.
        """
        try:
            detail, comments = await asyncio.gather(
                self._api.fetch_post_detail(summary.id),
                self._api.fetch_post_comments(summary.id),
            )
            return PostDetail.hydrate(summary, detail, comments)
        except Exception as e:  # noqa: BLE001
            self._log.warning(
                "hydration_failed",
                post_id=summary.id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return PostDetail.degraded(summary)
