"""Sliding-window throttler for independent async tasks."""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

from postfeed.throttle.metrics import ThrottleMetrics


logger = structlog.get_logger()

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]


class TaskThrottler:
    """Runs a queue of async tasks with at most ``limit`` in flight.

    The window slides: as soon as one task settles the next queued task is
    started. Results are collected in completion order, not submission order,
    and ``run`` returns only after every task has settled.

    Tasks are expected to handle their own failures. If one raises anyway,
    the remaining tasks still run to completion and the first exception is
    re-raised afterwards.
    """

    def __init__(self, limit: int, run_id: str = "-") -> None:
        """Initialize the throttler.

        Args:
            limit: Default maximum number of tasks in flight.
            run_id: Run identifier for logging.

        Raises:
            ValueError: If limit is smaller than 1.
        """
        self._limit = self._validate_limit(limit)
        self._metrics = ThrottleMetrics.get_instance()
        self._log = logger.bind(component="throttle", run_id=run_id)

    @property
    def limit(self) -> int:
        """Get the default concurrency limit."""
        return self._limit

    @staticmethod
    def _validate_limit(limit: int) -> int:
        if limit < 1:
            msg = f"Concurrency limit must be at least 1, got {limit}"
            raise ValueError(msg)
        return limit

    async def run(
        self,
        tasks: Sequence[TaskFactory[T]],
        limit: int | None = None,
    ) -> list[T]:
        """Run all tasks with bounded concurrency.

        Args:
            tasks: Zero-argument callables returning awaitables.
            limit: Override of the default concurrency limit.

        Returns:
            One result per task, in completion order.

        Raises:
            ValueError: If limit is smaller than 1.
        """
        limit = self._limit if limit is None else self._validate_limit(limit)
        results: list[T] = []
        failures: list[BaseException] = []
        in_flight: set[asyncio.Future[T]] = set()

        def settle(future: asyncio.Future[T]) -> None:
            in_flight.discard(future)
            if future.cancelled():
                failures.append(asyncio.CancelledError())
                self._metrics.record_failed()
                return
            error = future.exception()
            if error is not None:
                failures.append(error)
                self._metrics.record_failed()
                return
            results.append(future.result())
            self._metrics.record_completed()

        self._metrics.record_run()
        self._log.debug("throttle_started", task_count=len(tasks), limit=limit)

        for factory in tasks:
            while len(in_flight) >= limit:
                await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
            future = asyncio.ensure_future(factory())
            in_flight.add(future)
            future.add_done_callback(settle)
            self._metrics.record_started(len(in_flight))

        while in_flight:
            await asyncio.wait(in_flight)

        if failures:
            self._log.error(
                "throttled_task_failed",
                failed_count=len(failures),
                error=str(failures[0]),
            )
            raise failures[0]

        self._log.debug("throttle_complete", result_count=len(results))
        return results
