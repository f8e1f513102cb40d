"""Data models for the HTTP fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from postfeed.fetch.constants import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY_MS


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    Every failure is retried until the budget is spent. The delay between
    attempts is constant: there is no exponential growth and no jitter.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=10)] = DEFAULT_MAX_RETRIES
    retry_delay_ms: Annotated[int, Field(ge=0, le=60000)] = DEFAULT_RETRY_DELAY_MS

    @property
    def max_attempts(self) -> int:
        """Total number of attempts, the first one included."""
        return self.max_retries + 1

    def should_retry(self, attempt: int) -> bool:
        """Determine if a failed attempt should be retried.

        Args:
            attempt: Attempt number that just failed (0-indexed).

        Returns:
            True if retry budget remains.
        """
        return attempt < self.max_retries

    def get_delay_ms(self, attempt: int) -> int:  # noqa: ARG002
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Attempt number that just failed (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        return self.retry_delay_ms
