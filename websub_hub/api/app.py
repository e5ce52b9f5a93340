"""FastAPI application factory.

Creates the hub application with middleware, exception handlers and
routes. Run with uvicorn's factory mode:

    uvicorn websub_hub.api.app:create_app --factory
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from websub_hub import __version__
from websub_hub.api.exceptions import HubAPIError
from websub_hub.api.middleware.context import RequestContextMiddleware
from websub_hub.api.models.errors import ErrorCode, ErrorDetail, ErrorResponse
from websub_hub.api.routes import register_routes
from websub_hub.config import get_settings
from websub_hub.config.settings import Settings
from websub_hub.errors import StoreUnavailableError
from websub_hub.hub.service import Hub
from websub_hub.observability.logging import get_logger

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, *, hub: Hub | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Configuration; loaded with get_settings() when omitted
        hub: Prebuilt hub engine; built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    hub = hub or Hub.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "hub_started",
            host=settings.api.host,
            port=settings.api.port,
            storage_backend=settings.storage.backend,
            request_timeout_ms=settings.hub.request_timeout_ms,
        )
        yield
        await app.state.hub.close()

    app = FastAPI(
        title="WebSub Hub",
        description="Publish/subscribe hub with verified webhook callbacks",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.hub = hub

    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    register_routes(app, metrics_enabled=settings.observability.metrics.enabled)

    logger.debug("app_created", debug=settings.debug)

    return app


def _validation_details(errors: list) -> list[ErrorDetail]:
    details = []
    for error in errors:
        # Drop FastAPI's "body" prefix; keep the protocol field name
        loc = [str(part) for part in error["loc"] if part != "body"]
        details.append(ErrorDetail(field=".".join(loc) or None, message=error["msg"]))
    return details


def _error_response(
    status_code: int,
    code: ErrorCode,
    message: str,
    details: list[ErrorDetail] | None = None,
) -> JSONResponse:
    body = ErrorResponse.build(status_code, code, message, details)
    return JSONResponse(status_code=status_code, content=body.to_content())


def _register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(HubAPIError)
    async def hub_api_error_handler(request: Request, exc: HubAPIError) -> JSONResponse:
        """Handle HubAPIError and its subclasses."""
        logger.warning(
            "api_error",
            error_code=exc.error_code.value,
            message=exc.message,
            path=request.url.path,
        )
        return _error_response(exc.status_code, exc.error_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle FastAPI request validation errors."""
        logger.warning("validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Request validation failed",
            _validation_details(exc.errors()),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_error_handler(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        """Handle hub request body validation errors."""
        logger.warning("pydantic_validation_error", errors=exc.errors(), path=request.url.path)
        return _error_response(
            400,
            ErrorCode.INVALID_REQUEST,
            "Request validation failed",
            _validation_details(exc.errors()),
        )

    @app.exception_handler(StoreUnavailableError)
    async def store_unavailable_handler(
        request: Request, exc: StoreUnavailableError
    ) -> JSONResponse:
        """Storage failures abort the in-flight request."""
        logger.error("store_unavailable", error=exc.message, path=request.url.path)
        return _error_response(
            500, ErrorCode.STORE_UNAVAILABLE, "Subscription store unavailable"
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unexpected_error",
            error=str(exc),
            error_type=type(exc).__name__,
            path=request.url.path,
        )
        return _error_response(500, ErrorCode.INTERNAL_ERROR, "An unexpected error occurred")

    logger.debug("exception_handlers_registered")
