"""Subscription store implementations."""

from websub_hub.subscriptions.stores.inmemory import InMemorySubscriptionStore
from websub_hub.subscriptions.stores.redis import RedisSubscriptionStore

__all__ = [
    "InMemorySubscriptionStore",
    "RedisSubscriptionStore",
]
