"""API route registration."""

from fastapi import FastAPI

from websub_hub.observability.logging import get_logger

logger = get_logger(__name__)


def register_routes(app: FastAPI, *, metrics_enabled: bool = True) -> None:
    """Register all routes with the FastAPI application.

    Protocol endpoints live at the root so the hub URL is the server URL.
    """
    from websub_hub.api.routes.health import metrics_router
    from websub_hub.api.routes.health import router as health_router
    from websub_hub.api.routes.publish import router as publish_router
    from websub_hub.api.routes.subscribe import router as subscribe_router

    app.include_router(subscribe_router, tags=["Subscriptions"])
    app.include_router(publish_router, tags=["Publishing"])
    app.include_router(health_router, tags=["Health"])
    if metrics_enabled:
        app.include_router(metrics_router, tags=["Health"])

    logger.debug("routes_registered", metrics_enabled=metrics_enabled)
