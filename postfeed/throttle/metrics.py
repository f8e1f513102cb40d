"""Metrics collection for the task throttler."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class ThrottleMetrics:
    """Metrics for throttled task execution.

    Attributes:
        runs_total: Number of throttler runs.
        tasks_started_total: Tasks started across all runs.
        tasks_completed_total: Tasks that returned a result.
        tasks_failed_total: Tasks that raised despite the no-raise contract.
        peak_in_flight: Highest number of tasks observed running at once.
    """

    runs_total: int = 0
    tasks_started_total: int = 0
    tasks_completed_total: int = 0
    tasks_failed_total: int = 0
    peak_in_flight: int = 0

    _instance: ClassVar["ThrottleMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "ThrottleMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_run(self) -> None:
        """Record a throttler run."""
        self.runs_total += 1

    def record_started(self, in_flight: int) -> None:
        """Record a task start.

        Args:
            in_flight: Number of tasks running after this one started.
        """
        self.tasks_started_total += 1
        self.peak_in_flight = max(self.peak_in_flight, in_flight)

    def record_completed(self) -> None:
        """Record a task that produced a result."""
        self.tasks_completed_total += 1

    def record_failed(self) -> None:
        """Record a task that raised."""
        self.tasks_failed_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "runs_total": self.runs_total,
            "tasks_started_total": self.tasks_started_total,
            "tasks_completed_total": self.tasks_completed_total,
            "tasks_failed_total": self.tasks_failed_total,
            "peak_in_flight": self.peak_in_flight,
        }
