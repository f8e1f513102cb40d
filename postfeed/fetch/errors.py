"""Error types for the fetch layer."""

from enum import Enum


class FetchErrorClass(str, Enum):
    """Classification of fetch errors for metrics and logging.

    - TIMEOUT: The request timer fired before a response arrived
    - HTTP_STATUS: The server answered with a non-2xx status
    - NETWORK: Transport-level failure (DNS, connect, reset, ...)
    - DECODE: The response body was not valid JSON
    - UNKNOWN: Any other failure raised while fetching or decoding
    """

    TIMEOUT = "TIMEOUT"
    HTTP_STATUS = "HTTP_STATUS"
    NETWORK = "NETWORK"
    DECODE = "DECODE"
    UNKNOWN = "UNKNOWN"


class FetchError(Exception):
    """Base exception for fetch failures.

    Provides structured error information for logging and retry decisions.
    """

    def __init__(
        self,
        error_class: FetchErrorClass,
        message: str,
        url: str,
        details: dict[str, str | int | None] | None = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            url: URL that was being fetched.
            details: Additional structured error details.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.url = url
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | None]]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": self.url,
            "details": self.details,
        }


class RequestTimeoutError(FetchError):
    """The request did not complete within the configured timeout."""

    def __init__(self, url: str, timeout_ms: int) -> None:
        """Initialize the timeout error.

        Args:
            url: URL that timed out.
            timeout_ms: Timeout that was exceeded, in milliseconds.
        """
        super().__init__(
            error_class=FetchErrorClass.TIMEOUT,
            message=f"Request timeout after {timeout_ms}ms",
            url=url,
            details={"timeout_ms": timeout_ms},
        )
        self.timeout_ms = timeout_ms


class HttpStatusError(FetchError):
    """The server responded with a non-2xx status code."""

    def __init__(self, url: str, status_code: int) -> None:
        """Initialize the HTTP status error.

        Args:
            url: URL that was fetched.
            status_code: HTTP status code returned by the server.
        """
        super().__init__(
            error_class=FetchErrorClass.HTTP_STATUS,
            message=f"HTTP {status_code}",
            url=url,
            details={"status_code": status_code},
        )
        self.status_code = status_code


class NetworkError(FetchError):
    """The request failed below the HTTP layer."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize the network error.

        Args:
            url: URL that was being fetched.
            reason: Description of the underlying failure.
        """
        super().__init__(
            error_class=FetchErrorClass.NETWORK,
            message=f"Network error: {reason}",
            url=url,
        )


class ResponseDecodeError(FetchError):
    """The response body could not be decoded as JSON."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize the decode error.

        Args:
            url: URL whose body failed to decode.
            reason: Decoder error message.
        """
        super().__init__(
            error_class=FetchErrorClass.DECODE,
            message=f"Invalid JSON response: {reason}",
            url=url,
        )


class UnexpectedFetchError(FetchError):
    """Any other failure raised while fetching or decoding a response."""

    def __init__(self, url: str, reason: str) -> None:
        """Initialize the unexpected error.

        Args:
            url: URL that was being fetched.
            reason: Description of the underlying failure.
        """
        super().__init__(
            error_class=FetchErrorClass.UNKNOWN,
            message=f"Unexpected error: {reason}",
            url=url,
        )
