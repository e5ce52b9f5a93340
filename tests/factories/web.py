"""Fake outbound web for hub tests.

Plugs into the hub's HTTP client as an httpx.MockTransport. Callbacks and
topics are registered per URL; any URL without a route behaves like an
unreachable host.
"""

import json
from collections.abc import Callable

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


def _key(method: str, url: str | httpx.URL) -> tuple[str, str]:
    return (method.upper(), str(httpx.URL(str(url))))


class FakeWeb:
    """Routes outbound requests to registered handlers and records them."""

    def __init__(self) -> None:
        self._routes: dict[tuple[str, str], Handler] = {}
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get(_key(request.method, request.url))
        if handler is None:
            raise httpx.ConnectError("Connection refused", request=request)
        return handler(request)

    def on(self, method: str, url: str, handler: Handler) -> None:
        self._routes[_key(method, url)] = handler

    def reply(
        self,
        method: str,
        url: str,
        status_code: int,
        content: bytes = b"",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.on(
            method,
            url,
            lambda request: httpx.Response(status_code, content=content, headers=headers),
        )

    def subscriber(self, callback: str, *, delivery_status: int = 200) -> None:
        """A well-behaved subscriber: echoes verifications, accepts deliveries."""

        def handler(request: httpx.Request) -> httpx.Response:
            if is_delivery(request):
                return httpx.Response(delivery_status)
            return httpx.Response(200, content=request.content)

        self.on("POST", callback, handler)

    def topic(self, url: str, document: dict, status_code: int = 200) -> bytes:
        """Serve a JSON document at a topic URL; returns the exact body bytes."""
        body = json.dumps(document).encode("utf-8")
        self.reply("GET", url, status_code, body, {"Content-Type": "application/json"})
        return body

    def requests_to(self, method: str, url: str) -> list[httpx.Request]:
        key = _key(method, url)
        return [r for r in self.requests if _key(r.method, r.url) == key]

    def deliveries_to(self, callback: str) -> list[httpx.Request]:
        return [r for r in self.requests_to("POST", callback) if is_delivery(r)]

    def verifications_to(self, callback: str) -> list[httpx.Request]:
        return [r for r in self.requests_to("POST", callback) if not is_delivery(r)]


def is_delivery(request: httpx.Request) -> bool:
    """Deliveries carry a Link header; verification pings do not."""
    return "link" in request.headers
