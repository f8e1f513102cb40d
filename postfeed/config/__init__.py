"""Feed configuration: schema, YAML loading, and defaults."""

from postfeed.config.loader import ConfigValidationError, load_config
from postfeed.config.schemas import FeedConfig, PaginationConfig


__all__ = [
    "ConfigValidationError",
    "FeedConfig",
    "PaginationConfig",
    "load_config",
]
