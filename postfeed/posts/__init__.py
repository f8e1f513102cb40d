"""Posts listing: models, endpoint client, and pagination controller."""

from postfeed.posts.api import PostsApi
from postfeed.posts.controller import PaginationController
from postfeed.posts.errors import InitializationError
from postfeed.posts.factory import PostFeed, create_feed
from postfeed.posts.metrics import PaginationMetrics
from postfeed.posts.models import (
    Comment,
    PageResult,
    PostDetail,
    PostSummary,
    Reactions,
)
from postfeed.posts.state_machine import (
    PaginationState,
    PaginationStateError,
    PaginationStateMachine,
)


__all__ = [
    # Controller
    "PaginationController",
    "PaginationState",
    "PaginationStateError",
    "PaginationStateMachine",
    "InitializationError",
    # API
    "PostsApi",
    # Wiring
    "PostFeed",
    "create_feed",
    # Models
    "Comment",
    "PageResult",
    "PostDetail",
    "PostSummary",
    "Reactions",
    # Metrics
    "PaginationMetrics",
]
