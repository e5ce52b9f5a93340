"""In-memory implementation of SubscriptionStore."""

import asyncio

from websub_hub.subscriptions.models import Subscription
from websub_hub.subscriptions.store import SubscriptionStore


class InMemorySubscriptionStore(SubscriptionStore):
    """In-memory implementation of SubscriptionStore for testing and development.

    Uses dict storage keyed by (topic, callback) with linear scan per topic.
    State is lost on restart.
    """

    def __init__(self) -> None:
        """Initialize empty storage."""
        self._subscriptions: dict[tuple[str, str], Subscription] = {}
        self._lock = asyncio.Lock()

    async def find(self, topic: str, callback: str) -> Subscription | None:
        """Get the subscription for a (topic, callback) pair."""
        subscription = self._subscriptions.get((topic, callback))
        return subscription.model_copy() if subscription else None

    async def list_active_subscribers(self, topic: str) -> list[Subscription]:
        """List deliverable subscriptions for a topic."""
        return [
            subscription.model_copy()
            for (sub_topic, _), subscription in list(self._subscriptions.items())
            if sub_topic == topic and subscription.is_deliverable()
        ]

    async def upsert(self, subscription: Subscription) -> None:
        """Create or replace the record for the subscription's pair."""
        async with self._lock:
            self._subscriptions[subscription.key] = subscription.model_copy()

    async def remove(self, topic: str, callback: str) -> bool:
        """Delete the record if present."""
        async with self._lock:
            return self._subscriptions.pop((topic, callback), None) is not None
