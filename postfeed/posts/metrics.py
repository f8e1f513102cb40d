"""Metrics collection for pagination and hydration."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class PaginationMetrics:
    """Metrics for listing pagination.

    Attributes:
        initialize_total: Successful initialize() calls.
        initialize_failures_total: Failed initialize() calls.
        pages_loaded_total: Non-empty pages produced.
        end_of_listing_total: Calls answered with the empty end marker.
        posts_hydrated_total: Posts enriched with detail and comments.
        posts_degraded_total: Posts that fell back to their summary.
    """

    initialize_total: int = 0
    initialize_failures_total: int = 0
    pages_loaded_total: int = 0
    end_of_listing_total: int = 0
    posts_hydrated_total: int = 0
    posts_degraded_total: int = 0

    _instance: ClassVar["PaginationMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "PaginationMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_initialize(self, success: bool) -> None:
        """Record an initialize() outcome.

        Args:
            success: Whether the listing was loaded.
        """
        if success:
            self.initialize_total += 1
        else:
            self.initialize_failures_total += 1

    def record_page(self, hydrated: int, degraded: int) -> None:
        """Record a loaded page.

        Args:
            hydrated: Posts fully hydrated on the page.
            degraded: Posts that fell back to the summary.
        """
        self.pages_loaded_total += 1
        self.posts_hydrated_total += hydrated
        self.posts_degraded_total += degraded

    def record_end_of_listing(self) -> None:
        """Record a call past the last page."""
        self.end_of_listing_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "initialize_total": self.initialize_total,
            "initialize_failures_total": self.initialize_failures_total,
            "pages_loaded_total": self.pages_loaded_total,
            "end_of_listing_total": self.end_of_listing_total,
            "posts_hydrated_total": self.posts_hydrated_total,
            "posts_degraded_total": self.posts_degraded_total,
        }
