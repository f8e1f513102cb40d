"""Unit tests for the pagination controller."""

from typing import Any

import pytest

from postfeed.posts.api import PostsApi
from postfeed.posts.controller import PaginationController
from postfeed.posts.errors import InitializationError
from postfeed.posts.metrics import PaginationMetrics
from postfeed.posts.models import PageResult
from postfeed.posts.state_machine import PaginationState
from postfeed.throttle.metrics import ThrottleMetrics
from postfeed.throttle.throttler import TaskThrottler
from tests.helpers.fakes import BASE_URL, FakeFetcher, build_routes, make_posts


LIKES = [10, 50, 30, 30, 5, 80, 20, 60, 0, 40, 70, 90]
POSTS_URL = f"{BASE_URL}/posts"


def _controller(
    fetcher: FakeFetcher,
    page_size: int = 5,
    max_concurrent: int = 3,
) -> PaginationController:
    api = PostsApi(fetcher, BASE_URL)
    return PaginationController(
        api=api,
        throttler=TaskThrottler(max_concurrent),
        page_size=page_size,
        max_concurrent=max_concurrent,
    )


def _ids(page: PageResult) -> list[int]:
    return sorted(post.id for post in page.posts)


class TestConstruction:
    """Tests for controller construction."""

    def test_initial_state(self) -> None:
        """Test a fresh controller has no listing."""
        controller = _controller(FakeFetcher({}))

        assert controller.state == PaginationState.UNINITIALIZED
        assert controller.page_index == 0
        assert controller.total_count == 0
        assert controller.sorted_summaries == ()
        assert controller.page_size == 5

    def test_invalid_page_size(self) -> None:
        """Test that a page size below 1 is rejected."""
        with pytest.raises(ValueError, match="at least 1"):
            _controller(FakeFetcher({}), page_size=0)


class TestInitialize:
    """Tests for fetching and sorting the listing."""

    @pytest.mark.asyncio
    async def test_sorted_by_likes_descending(self) -> None:
        """Test that the listing is ordered by like count, highest first."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)

        await controller.initialize()

        likes = [s.like_count for s in controller.sorted_summaries]
        assert likes == sorted(LIKES, reverse=True)
        assert controller.total_count == 12
        assert controller.state == PaginationState.READY

    @pytest.mark.asyncio
    async def test_ties_keep_server_order(self) -> None:
        """Test that posts with equal likes keep their listing order."""
        fetcher = FakeFetcher(build_routes(make_posts([5, 10, 5, 5])))
        controller = _controller(fetcher)

        await controller.initialize()

        assert [s.id for s in controller.sorted_summaries] == [2, 1, 3, 4]

    @pytest.mark.asyncio
    async def test_returns_first_page(self) -> None:
        """Test that initialize hydrates and returns page one."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)

        page = await controller.initialize()

        # Top five by likes: 90, 80, 70, 60, 50
        assert _ids(page) == [2, 6, 8, 11, 12]
        assert page.has_more is True
        assert controller.page_index == 1

    @pytest.mark.asyncio
    async def test_listing_fetched_once(self) -> None:
        """Test that the listing is requested once per initialize."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)

        await controller.initialize()
        await controller.load_next_page()
        await controller.load_next_page()

        assert fetcher.calls.count(POSTS_URL) == 1

    @pytest.mark.asyncio
    async def test_empty_listing(self) -> None:
        """Test that an empty listing yields an empty final page."""
        fetcher = FakeFetcher(build_routes([]))
        controller = _controller(fetcher)

        page = await controller.initialize()

        assert page.posts == []
        assert page.has_more is False
        assert controller.state == PaginationState.READY

    @pytest.mark.asyncio
    async def test_fetch_failure_raises_initialization_error(self) -> None:
        """Test that a listing failure is wrapped and the cause chained."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)), failing={POSTS_URL})
        controller = _controller(fetcher)

        with pytest.raises(InitializationError) as exc_info:
            await controller.initialize()

        assert str(exc_info.value) == (
            "Failed to initialize posts: Network error: connection reset"
        )
        assert exc_info.value.__cause__ is not None
        assert controller.state == PaginationState.UNINITIALIZED
        assert PaginationMetrics.get_instance().initialize_failures_total == 1

    @pytest.mark.asyncio
    async def test_malformed_listing_raises_initialization_error(self) -> None:
        """Test that a listing without posts is an initialization failure."""
        fetcher = FakeFetcher({POSTS_URL: {"message": "maintenance"}})
        controller = _controller(fetcher)

        with pytest.raises(InitializationError, match="Failed to initialize posts"):
            await controller.initialize()

    @pytest.mark.asyncio
    async def test_failed_reinitialize_resets(self) -> None:
        """Test that a failed re-initialize drops the previous listing."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)
        await controller.initialize()

        fetcher.failing.add(POSTS_URL)
        with pytest.raises(InitializationError):
            await controller.initialize()

        assert controller.state == PaginationState.UNINITIALIZED
        assert controller.total_count == 0
        assert controller.page_index == 0
        page = await controller.load_next_page()
        assert page.posts == []
        assert page.has_more is False

    @pytest.mark.asyncio
    async def test_reinitialize_restarts_at_first_page(self) -> None:
        """Test that initialize on a ready controller starts over."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)
        first = await controller.initialize()
        await controller.load_next_page()

        again = await controller.initialize()

        assert _ids(again) == _ids(first)
        assert controller.page_index == 1


class TestLoadNextPage:
    """Tests for page slicing and hydration."""

    @pytest.mark.asyncio
    async def test_walks_all_pages(self) -> None:
        """Test 12 posts in pages of 5: sizes 5, 5, 2, then the end marker."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)

        first = await controller.initialize()
        second = await controller.load_next_page()
        third = await controller.load_next_page()
        fourth = await controller.load_next_page()

        assert [len(p.posts) for p in (first, second, third, fourth)] == [5, 5, 2, 0]
        assert [p.has_more for p in (first, second, third, fourth)] == [
            True,
            True,
            False,
            False,
        ]
        # Likes 40, 30, 30, 20, 10 then 5, 0
        assert _ids(second) == [1, 3, 4, 7, 10]
        assert _ids(third) == [5, 9]
        assert controller.page_index == 3

    @pytest.mark.asyncio
    async def test_pages_do_not_overlap(self) -> None:
        """Test that every post appears on exactly one page."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher, page_size=4)

        seen: list[int] = []
        page = await controller.initialize()
        seen.extend(p.id for p in page.posts)
        while page.has_more:
            page = await controller.load_next_page()
            seen.extend(p.id for p in page.posts)

        assert sorted(seen) == list(range(1, 13))

    @pytest.mark.asyncio
    async def test_exact_multiple_of_page_size(self) -> None:
        """Test that the last full page reports has_more False."""
        fetcher = FakeFetcher(build_routes(make_posts([1, 2, 3, 4])))
        controller = _controller(fetcher, page_size=2)

        first = await controller.initialize()
        second = await controller.load_next_page()

        assert first.has_more is True
        assert second.has_more is False
        assert len(second.posts) == 2

    @pytest.mark.asyncio
    async def test_before_initialize_returns_end_marker(self) -> None:
        """Test that loading without a listing returns the empty result."""
        fetcher = FakeFetcher({})
        controller = _controller(fetcher)

        page = await controller.load_next_page()

        assert page.posts == []
        assert page.has_more is False
        assert fetcher.calls == []

    @pytest.mark.asyncio
    async def test_past_end_makes_no_requests(self) -> None:
        """Test that the end marker is served without network calls."""
        fetcher = FakeFetcher(build_routes(make_posts([1, 2])))
        controller = _controller(fetcher)
        await controller.initialize()
        calls_before = len(fetcher.calls)

        page = await controller.load_next_page()

        assert page.posts == []
        assert len(fetcher.calls) == calls_before
        assert PaginationMetrics.get_instance().end_of_listing_total == 1

    @pytest.mark.asyncio
    async def test_hydrates_detail_and_comments(self) -> None:
        """Test that each post gets its comments and listing reactions."""
        fetcher = FakeFetcher(build_routes(make_posts([7])))
        controller = _controller(fetcher)

        page = await controller.initialize()

        post = page.posts[0]
        assert post.error is False
        assert post.like_count == 7
        assert [c.author_username for c in post.comments] == ["user1", "user2"]
        assert f"{BASE_URL}/posts/1" in fetcher.calls
        assert f"{BASE_URL}/comments/post/1" in fetcher.calls

    @pytest.mark.asyncio
    async def test_hydration_respects_concurrency_limit(self) -> None:
        """Test that no more than max_concurrent posts hydrate at once."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)), delay=0.01)
        controller = _controller(fetcher, page_size=6, max_concurrent=2)

        await controller.initialize()

        assert ThrottleMetrics.get_instance().peak_in_flight == 2

    @pytest.mark.asyncio
    async def test_failed_comments_degrade_one_post(self) -> None:
        """Test that a comments failure degrades only that post."""
        fetcher = FakeFetcher(
            build_routes(make_posts(LIKES)),
            failing={f"{BASE_URL}/comments/post/8"},
        )
        controller = _controller(fetcher)

        page = await controller.initialize()

        by_id = {post.id: post for post in page.posts}
        assert by_id[8].error is True
        assert by_id[8].comments == []
        assert by_id[8].title == "Post 8"
        assert by_id[8].like_count == 60
        assert all(not p.error for pid, p in by_id.items() if pid != 8)
        metrics = PaginationMetrics.get_instance()
        assert metrics.posts_degraded_total == 1
        assert metrics.posts_hydrated_total == 4

    @pytest.mark.asyncio
    async def test_failed_detail_degrades_post(self) -> None:
        """Test that a detail failure degrades the post."""
        fetcher = FakeFetcher(
            build_routes(make_posts([3, 2])),
            failing={f"{BASE_URL}/posts/2"},
        )
        controller = _controller(fetcher)

        page = await controller.initialize()

        by_id = {post.id: post for post in page.posts}
        assert by_id[2].error is True
        assert by_id[1].error is False

    @pytest.mark.asyncio
    async def test_malformed_detail_degrades_post(self) -> None:
        """Test that a non-object detail payload degrades the post."""
        routes = build_routes(make_posts([3]))
        routes[f"{BASE_URL}/posts/1"] = ["not", "an", "object"]
        controller = _controller(FakeFetcher(routes))

        page = await controller.initialize()

        assert page.posts[0].error is True


class TestReset:
    """Tests for reset."""

    @pytest.mark.asyncio
    async def test_reset_clears_listing(self) -> None:
        """Test that reset returns the controller to its initial state."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)
        await controller.initialize()

        controller.reset()

        assert controller.state == PaginationState.UNINITIALIZED
        assert controller.total_count == 0
        assert controller.page_index == 0

    def test_reset_when_uninitialized(self) -> None:
        """Test that reset on a fresh controller is harmless."""
        controller = _controller(FakeFetcher({}))

        controller.reset()

        assert controller.state == PaginationState.UNINITIALIZED

    @pytest.mark.asyncio
    async def test_initialize_after_reset(self) -> None:
        """Test that a reset controller can be initialized again."""
        fetcher = FakeFetcher(build_routes(make_posts(LIKES)))
        controller = _controller(fetcher)
        await controller.initialize()
        controller.reset()

        page = await controller.initialize()

        assert len(page.posts) == 5
        assert fetcher.calls.count(POSTS_URL) == 2


class ExplodingFetcher(FakeFetcher):
    """Fetcher raising a non-fetch exception for selected URLs."""

    def __init__(self, routes: dict[str, Any], exploding: set[str]) -> None:
        super().__init__(routes)
        self.exploding = exploding

    async def fetch(self, url: str) -> Any:
        if url in self.exploding:
            self.calls.append(url)
            raise RuntimeError(f"unexpected failure for {url}")
        return await super().fetch(url)


class TestUnexpectedFailures:
    """Tests for exceptions outside the fetch error taxonomy."""

    @pytest.mark.asyncio
    async def test_unexpected_listing_error_wrapped(self) -> None:
        """Test that any listing failure becomes InitializationError."""
        fetcher = ExplodingFetcher(build_routes(make_posts(LIKES)), {POSTS_URL})
        controller = _controller(fetcher)

        with pytest.raises(
            InitializationError, match="unexpected failure"
        ) as exc_info:
            await controller.initialize()

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert controller.state == PaginationState.UNINITIALIZED
        assert controller.total_count == 0

    @pytest.mark.asyncio
    async def test_unexpected_hydration_error_degrades(self) -> None:
        """Test that any hydration failure degrades only that post."""
        fetcher = ExplodingFetcher(
            build_routes(make_posts([3, 2])),
            {f"{BASE_URL}/comments/post/2"},
        )
        controller = _controller(fetcher)

        page = await controller.initialize()

        by_id = {post.id: post for post in page.posts}
        assert by_id[2].error is True
        assert by_id[1].error is False

    @pytest.mark.asyncio
    async def test_negative_like_counts_sorted(self) -> None:
        """Test that negative like counts are accepted and ranked last."""
        fetcher = FakeFetcher(build_routes(make_posts([-4, 2, 0])))
        controller = _controller(fetcher)

        await controller.initialize()

        assert [s.like_count for s in controller.sorted_summaries] == [2, 0, -4]
