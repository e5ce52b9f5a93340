"""Fixtures for API tests.

The app runs in-process over httpx.ASGITransport while the hub's outbound
calls go to a FakeWeb.
"""

from collections.abc import AsyncIterator

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from tests.factories import FakeWeb
from websub_hub.api.app import create_app
from websub_hub.config.settings import Settings
from websub_hub.hub.service import Hub
from websub_hub.subscriptions.stores.inmemory import InMemorySubscriptionStore


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def settings() -> Settings:
    return Settings(hub={"request_timeout_ms": 500, "shutdown_drain_seconds": 1.0})


@pytest_asyncio.fixture
async def hub(settings: Settings, web: FakeWeb) -> AsyncIterator[Hub]:
    hub = Hub.from_settings(settings, store=InMemorySubscriptionStore(), transport=web.transport)
    yield hub
    await hub.close()


@pytest.fixture
def app(settings: Settings, hub: Hub) -> FastAPI:
    return create_app(settings, hub=hub)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[httpx.AsyncClient]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://hub.test") as client:
        yield client
