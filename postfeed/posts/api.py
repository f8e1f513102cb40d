"""Endpoint client for the posts API."""

from typing import Any, Protocol

from postfeed.posts.models import Comment, CommentsPage, PostsPage, PostSummary


class JsonFetcher(Protocol):
    """Protocol for the cache-first fetch entry point."""

    async def fetch(self, url: str) -> Any:
        """Return the decoded JSON body for a URL.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Decoded JSON value.
        """
        ...


class PostsApi:
    """Builds endpoint URLs and parses their payloads.

    Endpoints:
        GET {base_url}/posts
        GET {base_url}/posts/{id}
        GET {base_url}/comments/post/{id}
    """

    def __init__(self, fetcher: JsonFetcher, base_url: str) -> None:
        """Initialize the API client.

        Args:
            fetcher: Cache-first fetcher used for every request.
            base_url: API root, without trailing slash.
        """
        self._fetcher = fetcher
        self._base_url = base_url.rstrip("/")

    @property
    def base_url(self) -> str:
        """Get the API root URL."""
        return self._base_url

    def posts_url(self) -> str:
        """Get the listing URL."""
        return f"{self._base_url}/posts"

    def post_url(self, post_id: int) -> str:
        """Get the detail URL for a post."""
        return f"{self._base_url}/posts/{post_id}"

    def comments_url(self, post_id: int) -> str:
        """Get the comments URL for a post."""
        return f"{self._base_url}/comments/post/{post_id}"

    async def fetch_posts(self) -> list[PostSummary]:
        """Fetch the full listing of post summaries in server order.

        Raises:
            FetchError: If the request fails.
            pydantic.ValidationError: If the payload is malformed.
        """
        payload = await self._fetcher.fetch(self.posts_url())
        return PostsPage.model_validate(payload).posts

    async def fetch_post_detail(self, post_id: int) -> dict[str, Any]:
        """Fetch the raw detail record of a single post.

        Raises:
            FetchError: If the request fails.
            TypeError: If the payload is not a JSON object.
        """
        payload = await self._fetcher.fetch(self.post_url(post_id))
        if not isinstance(payload, dict):
            msg = f"Post {post_id} detail is not an object"
            raise TypeError(msg)
        return payload

    async def fetch_post_comments(self, post_id: int) -> list[Comment]:
        """Fetch the comments of a single post.

        Raises:
            FetchError: If the request fails.
            pydantic.ValidationError: If the payload is malformed.
        """
        payload = await self._fetcher.fetch(self.comments_url(post_id))
        return CommentsPage.model_validate(payload).comments
