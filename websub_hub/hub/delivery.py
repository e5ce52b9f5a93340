"""Fire-and-forget delivery of fetched content to subscriber callbacks."""

import asyncio
import time
from dataclasses import dataclass, field

import httpx

from websub_hub.errors import DeliveryFailedError
from websub_hub.hub.http_client import HubHttpClient, is_success
from websub_hub.observability.logging import get_logger
from websub_hub.observability.metrics import (
    DELIVERIES,
    DELIVERIES_IN_FLIGHT,
    DELIVERY_LATENCY,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Delivery:
    """One POST of topic content to one callback."""

    topic: str
    callback: str
    body: bytes
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class DeliveryResult:
    """Outcome of a delivery after all attempts."""

    callback: str
    delivered: bool
    attempts: int
    status_code: int | None = None
    error: str | None = None


class DeliveryPool:
    """Runs deliveries as asyncio tasks with bounded concurrency.

    Callers dispatch and move on; results are only logged. A slow or failing
    callback never affects another delivery.
    """

    def __init__(
        self,
        http_client: HubHttpClient,
        *,
        max_concurrency: int = 50,
        max_retries: int = 0,
        retry_backoff_seconds: float = 0.5,
    ) -> None:
        self._http = http_client
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._max_retries = max_retries
        self._retry_backoff_seconds = retry_backoff_seconds
        self._tasks: set[asyncio.Task[DeliveryResult]] = set()
        self._closed = False

    @property
    def pending(self) -> int:
        """Number of deliveries dispatched and not yet finished."""
        return len(self._tasks)

    def dispatch(self, delivery: Delivery) -> asyncio.Task[DeliveryResult]:
        """Schedule a delivery on the running loop and return its task."""
        if self._closed:
            raise RuntimeError("Delivery pool is closed")

        task = asyncio.create_task(self.deliver(delivery))
        self._tasks.add(task)
        DELIVERIES_IN_FLIGHT.inc()
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task[DeliveryResult]) -> None:
        self._tasks.discard(task)
        DELIVERIES_IN_FLIGHT.dec()

    async def deliver(self, delivery: Delivery) -> DeliveryResult:
        """Deliver with bounded retry. Never raises for delivery failures."""
        start = time.perf_counter()
        attempts = 0
        async with self._semaphore:
            while True:
                attempts += 1
                try:
                    response = await self._attempt(delivery)
                except DeliveryFailedError as e:
                    if e.retryable and attempts <= self._max_retries:
                        logger.info(
                            "delivery_retry_scheduled",
                            callback=delivery.callback,
                            attempt=attempts,
                            error=e.message,
                        )
                        await asyncio.sleep(self._retry_backoff_seconds * attempts)
                        continue

                    DELIVERIES.labels(outcome="failed").inc()
                    DELIVERY_LATENCY.observe(time.perf_counter() - start)
                    logger.warning(
                        "delivery_failed",
                        topic=delivery.topic,
                        callback=delivery.callback,
                        attempts=attempts,
                        status_code=e.status_code,
                        error=e.message,
                    )
                    return DeliveryResult(
                        callback=delivery.callback,
                        delivered=False,
                        attempts=attempts,
                        status_code=e.status_code,
                        error=e.message,
                    )

                DELIVERIES.labels(outcome="delivered").inc()
                DELIVERY_LATENCY.observe(time.perf_counter() - start)
                logger.info(
                    "delivery_succeeded",
                    topic=delivery.topic,
                    callback=delivery.callback,
                    attempts=attempts,
                    status_code=response.status_code,
                )
                return DeliveryResult(
                    callback=delivery.callback,
                    delivered=True,
                    attempts=attempts,
                    status_code=response.status_code,
                )

    async def _attempt(self, delivery: Delivery) -> httpx.Response:
        """Single POST; 5xx and transport errors are retryable, 4xx is not."""
        try:
            response = await self._http.post(
                delivery.callback,
                content=delivery.body,
                headers=delivery.headers,
            )
        except httpx.TimeoutException as e:
            raise DeliveryFailedError(
                f"Timeout after {self._http.timeout_seconds}s", cause=e, retryable=True
            ) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DeliveryFailedError(str(e), cause=e, retryable=True) from e

        if is_success(response):
            return response

        raise DeliveryFailedError(
            f"Callback answered {response.status_code}",
            status_code=response.status_code,
            retryable=response.status_code >= 500,
        )

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for every dispatched delivery to finish."""
        if not self._tasks:
            return
        await asyncio.wait(set(self._tasks), timeout=timeout)

    async def close(self, timeout: float = 10.0) -> int:
        """Stop accepting work, drain, then cancel what is left.

        Returns:
            Number of deliveries abandoned
        """
        self._closed = True
        await self.drain(timeout)

        leftover = list(self._tasks)
        for task in leftover:
            task.cancel()
        if leftover:
            await asyncio.gather(*leftover, return_exceptions=True)
            logger.warning("deliveries_abandoned", count=len(leftover))
        return len(leftover)
