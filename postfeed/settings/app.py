"""Application settings powered by Pydantic BaseSettings."""

from typing import Any

from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from postfeed.config.loader import ConfigValidationError, format_validation_errors
from postfeed.config.schemas import FeedConfig


class AppSettings(BaseSettings):
    """Centralized environment configuration.

    Every field is optional; unset fields leave the file or default
    configuration untouched.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTFEED_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str | None = None
    page_size: int | None = None
    max_concurrent: int | None = None
    request_timeout_ms: int | None = None
    max_retries: int | None = None
    retry_delay_ms: int | None = None
    cache_ttl_ms: int | None = None
    log_level: str = "INFO"

    def apply(self, config: FeedConfig) -> FeedConfig:
        """Overlay environment values on a configuration.

        Args:
            config: Configuration loaded from file or defaults.

        Returns:
            New, re-validated configuration.

        Raises:
            ConfigValidationError: If an override is out of range.
        """
        data: dict[str, Any] = config.model_dump()
        fetch = data["fetch"]
        retry_policy = fetch["retry_policy"]
        pagination = data["pagination"]

        overrides: list[tuple[dict[str, Any], str, Any]] = [
            (data, "base_url", self.base_url),
            (pagination, "page_size", self.page_size),
            (pagination, "max_concurrent", self.max_concurrent),
            (fetch, "request_timeout_ms", self.request_timeout_ms),
            (fetch, "cache_ttl_ms", self.cache_ttl_ms),
            (retry_policy, "max_retries", self.max_retries),
            (retry_policy, "retry_delay_ms", self.retry_delay_ms),
        ]
        for section, key, value in overrides:
            if value is not None:
                section[key] = value

        try:
            return FeedConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigValidationError(
                format_validation_errors(e), "environment"
            ) from e


def get_settings() -> AppSettings:
    """Get a settings instance."""
    return AppSettings()
