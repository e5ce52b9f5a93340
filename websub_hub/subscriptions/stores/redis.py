"""Redis implementation of SubscriptionStore.

Key structure:
- {prefix}:sub:{topic_digest}:{callback_digest} - Subscription JSON
- {prefix}:topic:{topic_digest} - Set of subscription keys for a topic

Digests are SHA-256 hex of the URL so arbitrary URLs map to safe keys.
"""

import hashlib

import redis.asyncio as redis

from websub_hub.errors import StoreUnavailableError
from websub_hub.observability.logging import get_logger
from websub_hub.subscriptions.models import Subscription
from websub_hub.subscriptions.store import SubscriptionStore

logger = get_logger(__name__)


def _digest(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


class RedisSubscriptionStore(SubscriptionStore):
    """Redis implementation of SubscriptionStore.

    Upsert and remove run as MULTI/EXEC pipelines so the record and the
    topic index change together.
    """

    def __init__(self, client: redis.Redis, key_prefix: str = "websub") -> None:
        """Initialize Redis subscription store.

        Args:
            client: Redis client instance
            key_prefix: Prefix for all keys written by this store
        """
        self._client = client
        self._prefix = key_prefix

    def _subscription_key(self, topic: str, callback: str) -> str:
        return f"{self._prefix}:sub:{_digest(topic)}:{_digest(callback)}"

    def _topic_index_key(self, topic: str) -> str:
        return f"{self._prefix}:topic:{_digest(topic)}"

    async def find(self, topic: str, callback: str) -> Subscription | None:
        """Get the subscription for a (topic, callback) pair."""
        try:
            data = await self._client.get(self._subscription_key(topic, callback))
        except redis.RedisError as e:
            logger.error("redis_find_error", topic=topic, callback=callback, error=str(e))
            raise StoreUnavailableError(f"Failed to read subscription: {e}", cause=e) from e

        if data is None:
            return None
        return Subscription.model_validate_json(data)

    async def list_active_subscribers(self, topic: str) -> list[Subscription]:
        """List deliverable subscriptions for a topic."""
        try:
            keys = await self._client.smembers(self._topic_index_key(topic))
            if not keys:
                return []
            values = await self._client.mget(list(keys))
        except redis.RedisError as e:
            logger.error("redis_list_error", topic=topic, error=str(e))
            raise StoreUnavailableError(f"Failed to list subscribers: {e}", cause=e) from e

        subscriptions = [
            Subscription.model_validate_json(value) for value in values if value is not None
        ]
        return [s for s in subscriptions if s.is_deliverable()]

    async def upsert(self, subscription: Subscription) -> None:
        """Create or replace the record for the subscription's pair."""
        key = self._subscription_key(subscription.topic, subscription.callback)
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.set(key, subscription.model_dump_json())
                pipe.sadd(self._topic_index_key(subscription.topic), key)
                await pipe.execute()
        except redis.RedisError as e:
            logger.error(
                "redis_upsert_error",
                topic=subscription.topic,
                callback=subscription.callback,
                error=str(e),
            )
            raise StoreUnavailableError(f"Failed to save subscription: {e}", cause=e) from e

        logger.debug(
            "subscription_saved",
            topic=subscription.topic,
            callback=subscription.callback,
            state=subscription.state.value,
        )

    async def remove(self, topic: str, callback: str) -> bool:
        """Delete the record if present."""
        key = self._subscription_key(topic, callback)
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                pipe.delete(key)
                pipe.srem(self._topic_index_key(topic), key)
                deleted, _ = await pipe.execute()
        except redis.RedisError as e:
            logger.error("redis_remove_error", topic=topic, callback=callback, error=str(e))
            raise StoreUnavailableError(f"Failed to remove subscription: {e}", cause=e) from e

        return bool(deleted)

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._client.aclose()
