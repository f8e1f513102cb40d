"""Configuration file loader."""

from pathlib import Path

import structlog
import yaml
from pydantic import ValidationError

from postfeed.config.constants import COMPONENT_CONFIG
from postfeed.config.schemas import FeedConfig


logger = structlog.get_logger()


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, errors: list[dict[str, str]], file_path: str) -> None:
        """Initialize the error.

        Args:
            errors: List of validation error details.
            file_path: Path to the file that failed validation.
        """
        self.errors = errors
        self.file_path = file_path
        super().__init__(f"Validation failed for {file_path}: {len(errors)} errors")


def format_validation_errors(error: ValidationError) -> list[dict[str, str]]:
    """Flatten pydantic errors into location/message pairs."""
    return [
        {
            "location": ".".join(str(part) for part in detail["loc"]),
            "message": detail["msg"],
        }
        for detail in error.errors()
    ]


def load_config(path: Path | None = None) -> FeedConfig:
    """Load a feed configuration from YAML.

    Args:
        path: Path to a YAML file. Defaults are used when None.

    Returns:
        Validated configuration.

    Raises:
        ConfigValidationError: If the file is not valid YAML or fails
            schema validation.
        FileNotFoundError: If the file does not exist.
    """
    if path is None:
        return FeedConfig()

    log = logger.bind(component=COMPONENT_CONFIG, file_path=str(path))
    log.info("loading_config_file")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        log.error("config_parse_failed", error=str(e))
        raise ConfigValidationError(
            [{"location": "", "message": f"Invalid YAML: {e}"}], str(path)
        ) from e

    if not isinstance(data, dict):
        raise ConfigValidationError(
            [{"location": "", "message": "Top-level value must be a mapping"}],
            str(path),
        )

    try:
        config = FeedConfig.model_validate(data)
    except ValidationError as e:
        errors = format_validation_errors(e)
        log.error("config_validation_failed", error_count=len(errors))
        raise ConfigValidationError(errors, str(path)) from e

    log.info("config_file_loaded")
    return config
