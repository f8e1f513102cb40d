"""Shared pytest fixtures."""

from collections.abc import Generator

import pytest
import structlog

from postfeed.fetch.metrics import FetchMetrics
from postfeed.posts.metrics import PaginationMetrics
from postfeed.throttle.metrics import ThrottleMetrics


@pytest.fixture(autouse=True)
def _reset_singletons() -> Generator[None, None, None]:
    """Give every test fresh metrics and default structlog settings."""
    FetchMetrics.reset()
    ThrottleMetrics.reset()
    PaginationMetrics.reset()
    yield
    structlog.reset_defaults()
