"""Configuration models for the HTTP fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from postfeed.fetch.constants import (
    DEFAULT_CACHE_TTL_MS,
    DEFAULT_REQUEST_TIMEOUT_MS,
    DEFAULT_USER_AGENT,
)
from postfeed.fetch.models import RetryPolicy


class FetchConfig(BaseModel):
    """Configuration for the HTTP fetch layer.

    Central configuration for all fetch operations: the hard request
    timeout, the retry policy and the response cache lifetime.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    request_timeout_ms: Annotated[int, Field(ge=1, le=300000)] = (
        DEFAULT_REQUEST_TIMEOUT_MS
    )
    cache_ttl_ms: Annotated[int, Field(ge=0, le=24 * 60 * 60 * 1000)] = (
        DEFAULT_CACHE_TTL_MS
    )
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)

    @property
    def request_timeout_seconds(self) -> float:
        """Get the request timeout in seconds."""
        return self.request_timeout_ms / 1000.0
