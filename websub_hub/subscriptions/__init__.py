"""Subscription records and their storage."""

from websub_hub.subscriptions.factory import create_subscription_store
from websub_hub.subscriptions.models import Subscription, SubscriptionState
from websub_hub.subscriptions.store import SubscriptionStore
from websub_hub.subscriptions.stores import (
    InMemorySubscriptionStore,
    RedisSubscriptionStore,
)

__all__ = [
    "Subscription",
    "SubscriptionState",
    "SubscriptionStore",
    "InMemorySubscriptionStore",
    "RedisSubscriptionStore",
    "create_subscription_store",
]
