"""HTTP transport with a hard timeout and bounded retries."""

import asyncio
import time
from typing import Any

import httpx
import structlog

from postfeed.fetch.config import FetchConfig
from postfeed.fetch.constants import ACCEPT_JSON, HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN
from postfeed.fetch.errors import (
    FetchError,
    HttpStatusError,
    NetworkError,
    RequestTimeoutError,
    ResponseDecodeError,
    UnexpectedFetchError,
)
from postfeed.fetch.metrics import FetchMetrics


logger = structlog.get_logger()


class HttpTransport:
    """Performs one logical JSON fetch with a timeout and fixed-delay retries.

    Each attempt races the network call against a timer. When the timer wins
    the attempt fails with RequestTimeoutError and the request is left to
    finish in the background; its outcome is discarded. Any failure is
    retried after a constant delay until the retry budget is spent, then the
    last failure is raised.
    """

    def __init__(
        self,
        config: FetchConfig,
        client: httpx.AsyncClient | None = None,
        run_id: str = "-",
    ) -> None:
        """Initialize the transport.

        Args:
            config: Fetch configuration.
            client: Optional shared httpx client. If omitted, a client is
                created and owned by this transport.
            run_id: Run identifier for logging.
        """
        self._config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": config.user_agent, "Accept": ACCEPT_JSON},
        )
        self._metrics = FetchMetrics.get_instance()
        self._abandoned: set[asyncio.Future[Any]] = set()
        self._log = logger.bind(component="fetch", run_id=run_id)

    @property
    def abandoned_count(self) -> int:
        """Number of timed-out requests still running in the background."""
        return len(self._abandoned)

    async def fetch_json(self, url: str) -> Any:
        """Fetch a URL and decode its JSON body, retrying on failure.

        Args:
            url: Absolute URL to fetch.

        Returns:
            Decoded JSON value.

        Raises:
            FetchError: The last failure once the retry budget is exhausted.
        """
        policy = self._config.retry_policy
        log = self._log.bind(url=url)
        start_time_ns = time.perf_counter_ns()
        attempt = 0

        while True:
            try:
                data = await self._fetch_with_timeout(url)
            except FetchError as e:
                self._metrics.record_failure(e.error_class)
                if not policy.should_retry(attempt):
                    log.error(
                        "fetch_failed",
                        attempts=attempt + 1,
                        error_class=e.error_class.value,
                        error=e.message,
                    )
                    raise
                delay_ms = policy.get_delay_ms(attempt)
                attempt += 1
                self._metrics.record_retry()
                log.debug(
                    "retry_attempt",
                    attempt=attempt,
                    delay_ms=delay_ms,
                    max_retries=policy.max_retries,
                    error_class=e.error_class.value,
                )
                await asyncio.sleep(delay_ms / 1000.0)
                continue

            duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
            self._metrics.record_duration(duration_ms)
            log.debug(
                "fetch_complete",
                attempts=attempt + 1,
                duration_ms=round(duration_ms, 2),
            )
            return data

    async def _fetch_with_timeout(self, url: str) -> Any:
        """Race a single request against the configured timeout.

        Args:
            url: URL to fetch.

        Returns:
            Decoded JSON value.

        Raises:
            RequestTimeoutError: If the timer fires first.
            FetchError: If the request itself fails.
        """
        request = asyncio.ensure_future(self._execute_single(url))
        try:
            done, _ = await asyncio.wait(
                {request}, timeout=self._config.request_timeout_seconds
            )
        except asyncio.CancelledError:
            request.cancel()
            raise
        if request in done:
            return request.result()

        # The request keeps running; only its outcome is ignored.
        self._abandoned.add(request)
        request.add_done_callback(self._discard_abandoned)
        self._metrics.record_abandoned()
        self._log.warning(
            "request_timeout",
            url=url,
            timeout_ms=self._config.request_timeout_ms,
        )
        raise RequestTimeoutError(url, self._config.request_timeout_ms)

    def _discard_abandoned(self, request: asyncio.Future[Any]) -> None:
        """Forget an abandoned request once it settles."""
        self._abandoned.discard(request)
        if not request.cancelled():
            # Mark the exception as retrieved; nobody is waiting for it.
            request.exception()

    async def _execute_single(self, url: str) -> Any:
        """Execute a single HTTP GET and decode the body.

        Args:
            url: URL to fetch.

        Returns:
            Decoded JSON value.
        """
        try:
            response = await self._client.get(url)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(url, self._config.request_timeout_ms) from e
        except httpx.HTTPError as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e
        except Exception as e:  # noqa: BLE001
            raise UnexpectedFetchError(url, str(e) or type(e).__name__) from e

        self._metrics.record_request(response.status_code, len(response.content))

        if not HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
            raise HttpStatusError(url, response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ResponseDecodeError(url, str(e)) from e
        except Exception as e:  # noqa: BLE001
            raise UnexpectedFetchError(url, str(e) or type(e).__name__) from e

    async def aclose(self) -> None:
        """Cancel abandoned requests and close the owned httpx client."""
        for request in list(self._abandoned):
            request.cancel()
        if self._abandoned:
            await asyncio.gather(*self._abandoned, return_exceptions=True)
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
