"""Constants for the configuration module."""

DEFAULT_BASE_URL = "https://dummyjson.com"

# Pagination defaults
DEFAULT_PAGE_SIZE = 5
DEFAULT_MAX_CONCURRENT = 3

# Log component names
COMPONENT_CONFIG = "config"
COMPONENT_CLI = "cli"

# Supported URL schemes
VALID_URL_SCHEMES = ("http://", "https://")
