"""Configuration schema for a post feed."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from postfeed.config.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_PAGE_SIZE,
    VALID_URL_SCHEMES,
)
from postfeed.fetch.config import FetchConfig


class PaginationConfig(BaseModel):
    """Page size and hydration fan-out."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    page_size: Annotated[int, Field(ge=1, le=100)] = DEFAULT_PAGE_SIZE
    max_concurrent: Annotated[int, Field(ge=1, le=64)] = DEFAULT_MAX_CONCURRENT


class FeedConfig(BaseModel):
    """Complete configuration of the post feed pipeline.

    Values are fixed for the lifetime of a feed; build a new config to
    change them.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: Annotated[str, Field(min_length=1)] = DEFAULT_BASE_URL
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    pagination: PaginationConfig = Field(default_factory=PaginationConfig)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate URL scheme and strip the trailing slash."""
        if not v.startswith(VALID_URL_SCHEMES):
            msg = f"base_url must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return v.rstrip("/")
