"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300

# Request defaults
DEFAULT_REQUEST_TIMEOUT_MS = 4000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_MS = 1000

# Cache defaults
DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000  # 5 minutes

DEFAULT_USER_AGENT = "postfeed/0.1"
ACCEPT_JSON = "application/json"
