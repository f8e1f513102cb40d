"""Bounded-concurrency execution of independent async tasks."""

from postfeed.throttle.metrics import ThrottleMetrics
from postfeed.throttle.throttler import TaskFactory, TaskThrottler


__all__ = [
    "TaskFactory",
    "TaskThrottler",
    "ThrottleMetrics",
]
