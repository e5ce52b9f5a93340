"""Outbound HTTP client shared by verification, topic fetch and delivery."""

import asyncio
from typing import Any

import httpx

from websub_hub.config.models.hub import HubConfig


class HubHttpClient:
    """Thin wrapper around one httpx.AsyncClient with the hub-wide timeout.

    Each call, from connect until the whole body is read, must finish within
    timeout_seconds. httpx's own timeouts only bound single phases and reset
    on every chunk, so the full exchange also runs under asyncio.timeout.
    Overruns surface as httpx.TimeoutException either way. Safe to share
    across concurrent requests.
    """

    def __init__(
        self,
        timeout_seconds: float,
        *,
        user_agent: str = "websub-hub/1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            timeout_seconds: Deadline for a complete request and response
            user_agent: User-Agent header sent with every request
            transport: Optional transport, e.g. httpx.MockTransport in tests
        """
        self.timeout_seconds = timeout_seconds
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": user_agent},
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: HubConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HubHttpClient":
        return cls(
            config.request_timeout_seconds,
            user_agent=config.user_agent,
            transport=transport,
        )

    async def get(self, url: str) -> httpx.Response:
        """GET a URL, following redirects."""
        return await self._request("GET", url, follow_redirects=True)

    async def post(
        self,
        url: str,
        content: bytes,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """POST raw bytes to a URL."""
        return await self._request("POST", url, content=content, headers=headers)

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            async with asyncio.timeout(self.timeout_seconds):
                return await self._client.request(method, url, **kwargs)
        except TimeoutError as e:
            raise httpx.TimeoutException(
                f"{method} {url} did not complete within {self.timeout_seconds}s"
            ) from e

    async def aclose(self) -> None:
        """Close pooled connections."""
        await self._client.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed


def is_success(response: httpx.Response) -> bool:
    """2xx check used for verification, fetch and delivery."""
    return 200 <= response.status_code < 300
