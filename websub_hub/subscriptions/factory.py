"""SubscriptionStore factory for creating backend instances."""

import redis.asyncio as redis

from websub_hub.config.models.storage import StorageConfig
from websub_hub.observability.logging import get_logger
from websub_hub.subscriptions.store import SubscriptionStore
from websub_hub.subscriptions.stores.inmemory import InMemorySubscriptionStore
from websub_hub.subscriptions.stores.redis import RedisSubscriptionStore

logger = get_logger(__name__)

DEFAULT_REDIS_URL = "redis://localhost:6379/0"


def create_subscription_store(config: StorageConfig) -> SubscriptionStore:
    """Create a SubscriptionStore instance based on configuration.

    Args:
        config: Storage configuration from settings

    Returns:
        Configured SubscriptionStore instance

    Raises:
        ValueError: If backend type is not supported
    """
    backend = config.backend

    if backend == "inmemory":
        logger.info("creating_subscription_store", backend="inmemory")
        return InMemorySubscriptionStore()

    elif backend == "redis":
        url = config.connection_url or DEFAULT_REDIS_URL
        client = redis.from_url(url, decode_responses=True)
        # Log without credentials
        logger.info(
            "creating_subscription_store",
            backend="redis",
            url=url.split("@")[-1],
            prefix=config.key_prefix,
        )
        return RedisSubscriptionStore(client, key_prefix=config.key_prefix)

    raise ValueError(f"Unsupported subscription store backend: {backend}")
