"""SubscriptionStore abstract interface."""

from abc import ABC, abstractmethod

from websub_hub.subscriptions.models import Subscription


class SubscriptionStore(ABC):
    """Abstract interface for subscription storage.

    Records are keyed by (topic, callback). Implementations must make
    upsert and remove atomic per key; last writer wins.
    """

    @abstractmethod
    async def find(self, topic: str, callback: str) -> Subscription | None:
        """Get the subscription for a (topic, callback) pair."""
        pass

    @abstractmethod
    async def list_active_subscribers(self, topic: str) -> list[Subscription]:
        """List deliverable subscriptions for a topic, in no particular order."""
        pass

    @abstractmethod
    async def upsert(self, subscription: Subscription) -> None:
        """Create or replace the record for the subscription's pair."""
        pass

    @abstractmethod
    async def remove(self, topic: str, callback: str) -> bool:
        """Delete the record if present; returns whether it existed."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        return None
