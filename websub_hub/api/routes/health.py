"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from websub_hub import __version__
from websub_hub.api.dependencies import HubDep
from websub_hub.api.models.responses import ComponentHealth, HealthResponse
from websub_hub.errors import StoreUnavailableError
from websub_hub.observability.logging import get_logger
from websub_hub.subscriptions.store import SubscriptionStore

logger = get_logger(__name__)

router = APIRouter()

metrics_router = APIRouter()

_PROBE_URL = "http://health.invalid/"


async def _check_store_health(store: SubscriptionStore) -> ComponentHealth:
    """Round-trip a lookup against the store."""
    start = time.perf_counter()
    try:
        await store.find(_PROBE_URL, _PROBE_URL)
    except StoreUnavailableError as e:
        return ComponentHealth(
            name="subscription_store",
            status="unhealthy",
            latency_ms=(time.perf_counter() - start) * 1000,
            message=e.message,
        )
    return ComponentHealth(
        name="subscription_store",
        status="healthy",
        latency_ms=(time.perf_counter() - start) * 1000,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check(hub: HubDep, response: Response) -> HealthResponse:
    """Report service health; 503 when the store is unreachable."""
    components = [await _check_store_health(hub.store)]
    healthy = all(c.status == "healthy" for c in components)
    if not healthy:
        response.status_code = 503

    logger.debug("health_check_completed", healthy=healthy)

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        version=__version__,
        components=components,
        deliveries_in_flight=hub.deliveries.pending,
        timestamp=datetime.now(UTC),
    )


@metrics_router.get("/metrics")
async def get_metrics() -> Response:
    """Prometheus metrics in text exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
