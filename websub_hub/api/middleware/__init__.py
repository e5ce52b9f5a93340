"""API middleware."""

from websub_hub.api.middleware.context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
