"""Data models for posts, comments, and pages."""

from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Reactions(BaseModel):
    """Reaction counters attached to a post."""

    model_config = ConfigDict(frozen=True, extra="allow")

    likes: int = 0
    dislikes: int = 0


class _PostFields(BaseModel):
    """Fields shared by listing summaries and hydrated posts.

    Unknown server fields are preserved so records pass through unchanged.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: int
    title: str
    body: str = ""
    tags: list[str] = Field(default_factory=list)
    reactions: Reactions = Field(default_factory=Reactions)
    views: int | None = None
    user_id: int | None = Field(default=None, alias="userId")

    @field_validator("reactions", mode="before")
    @classmethod
    def coerce_reactions(cls, v: Any) -> Any:
        """Accept a bare like count in place of a reactions object."""
        if isinstance(v, int):
            return {"likes": v}
        return v

    @property
    def like_count(self) -> int:
        """Get the number of likes, the listing sort key."""
        return self.reactions.likes


class PostSummary(_PostFields):
    """A post as returned by the listing endpoint."""


class Comment(BaseModel):
    """A comment on a post."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: int | None = None
    body: str
    author_username: str = Field(default="", alias="authorUsername")
    likes: int = 0

    @model_validator(mode="before")
    @classmethod
    def flatten_user(cls, data: Any) -> Any:
        """Lift ``user.username`` from the server shape into author_username."""
        if isinstance(data, Mapping) and "user" in data:
            data = dict(data)
            user = data.pop("user") or {}
            if isinstance(user, Mapping):
                data.setdefault("authorUsername", user.get("username", ""))
        return data


class PostsPage(BaseModel):
    """Payload of ``GET /posts``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    posts: list[PostSummary]


class CommentsPage(BaseModel):
    """Payload of ``GET /comments/post/{id}``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    comments: list[Comment]


class PostDetail(_PostFields):
    """A post hydrated with its detail record and comments.

    ``error`` is True for a degraded record built from the summary alone.
    """

    comments: list[Comment] = Field(default_factory=list)
    error: bool = False

    @classmethod
    def hydrate(
        cls,
        summary: PostSummary,
        detail: Mapping[str, Any],
        comments: Sequence[Comment],
    ) -> "PostDetail":
        """Merge a detail record with its comments.

        Reactions always come from the listing summary, since that is where
        the sort order was taken from; the detail's own reactions are ignored.

        Args:
            summary: Listing summary the post was selected from.
            detail: Server record for the single post.
            comments: Comments for the post.

        Returns:
            Hydrated post.
        """
        payload = dict(detail)
        payload["reactions"] = summary.reactions
        payload["comments"] = list(comments)
        payload["error"] = False
        return cls.model_validate(payload)

    @classmethod
    def degraded(cls, summary: PostSummary) -> "PostDetail":
        """Build a fallback record from the summary alone.

        Args:
            summary: Listing summary.

        Returns:
            Post with no comments and ``error`` set.
        """
        payload = summary.model_dump(by_alias=True)
        payload["comments"] = []
        payload["error"] = True
        return cls.model_validate(payload)


class PageResult(BaseModel):
    """One page of hydrated posts handed to the presentation layer."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    posts: list[PostDetail] = Field(default_factory=list)
    has_more: bool = Field(default=False, alias="hasMore")

    @classmethod
    def end_of_listing(cls) -> "PageResult":
        """Get the empty result returned past the last page."""
        return cls(posts=[], has_more=False)

    def to_dict(self) -> dict[str, Any]:
        """Convert the page to a JSON-compatible dictionary.

        Returns:
            Dictionary using the upstream field names.
        """
        return self.model_dump(mode="json", by_alias=True)
