"""Fixtures for store integration tests.

Tests skip when no Redis is reachable at TEST_REDIS_URL.
"""

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
import redis.asyncio as redis


@pytest.fixture(scope="session")
def redis_url() -> str:
    """Get Redis URL for tests."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest_asyncio.fixture
async def redis_client(redis_url: str) -> AsyncIterator[redis.Redis]:
    """Redis client on a scratch database; skips when Redis is down."""
    client = redis.from_url(redis_url, decode_responses=True)
    try:
        await client.ping()
    except (redis.ConnectionError, OSError):
        await client.aclose()
        pytest.skip("Redis not available")

    yield client

    await client.aclose()


@pytest_asyncio.fixture
async def clean_redis(redis_client: redis.Redis) -> AsyncIterator[None]:
    """Remove keys written under the test prefix."""
    yield
    keys = [key async for key in redis_client.scan_iter("itest:*")]
    if keys:
        await redis_client.delete(*keys)
