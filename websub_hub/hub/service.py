"""Hub engine wiring store, HTTP client, verifier and distributor together."""

import httpx

from websub_hub.config.settings import Settings
from websub_hub.hub.delivery import DeliveryPool
from websub_hub.hub.distributor import Distributor, PublishResult
from websub_hub.hub.http_client import HubHttpClient
from websub_hub.hub.verifier import Verifier
from websub_hub.observability.logging import get_logger
from websub_hub.subscriptions.factory import create_subscription_store
from websub_hub.subscriptions.models import Subscription
from websub_hub.subscriptions.store import SubscriptionStore

logger = get_logger(__name__)


class Hub:
    """Subscription lifecycle and publish pipeline.

    Holds no per-request state. The HTTP client and store are injected so
    tests can substitute them; the hub owns them once constructed and
    releases them in close().
    """

    def __init__(
        self,
        store: SubscriptionStore,
        http_client: HubHttpClient,
        *,
        max_concurrent_deliveries: int = 50,
        delivery_max_retries: int = 0,
        delivery_retry_backoff_seconds: float = 0.5,
        shutdown_drain_seconds: float = 10.0,
        hub_url: str | None = None,
    ) -> None:
        self.store = store
        self.http_client = http_client
        self.deliveries = DeliveryPool(
            http_client,
            max_concurrency=max_concurrent_deliveries,
            max_retries=delivery_max_retries,
            retry_backoff_seconds=delivery_retry_backoff_seconds,
        )
        self.verifier = Verifier(http_client, store)
        self.distributor = Distributor(
            http_client, store, self.deliveries, hub_url=hub_url
        )
        self._shutdown_drain_seconds = shutdown_drain_seconds

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        store: SubscriptionStore | None = None,
        http_client: HubHttpClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "Hub":
        """Build a hub from configuration, creating missing collaborators."""
        hub_config = settings.hub
        return cls(
            store or create_subscription_store(settings.storage),
            http_client or HubHttpClient.from_config(hub_config, transport=transport),
            max_concurrent_deliveries=hub_config.max_concurrent_deliveries,
            delivery_max_retries=hub_config.delivery_max_retries,
            delivery_retry_backoff_seconds=hub_config.delivery_retry_backoff_ms / 1000,
            shutdown_drain_seconds=hub_config.shutdown_drain_seconds,
            hub_url=settings.api.public_url,
        )

    async def subscribe(
        self,
        topic: str,
        callback: str,
        *,
        secret: str | None = None,
        lease_seconds: int | None = None,
    ) -> Subscription:
        """Verify intent and store an active subscription."""
        subscription = Subscription(
            topic=topic,
            callback=callback,
            secret=secret,
            lease_seconds=lease_seconds,
        )
        return await self.verifier.subscribe(subscription)

    async def unsubscribe(self, topic: str, callback: str) -> Subscription:
        """Verify intent and remove an active subscription."""
        return await self.verifier.unsubscribe(topic, callback)

    async def publish(self, topic: str) -> PublishResult:
        """Fetch topic content and fan it out."""
        return await self.distributor.publish(topic)

    async def close(self) -> None:
        """Drain deliveries, then release the HTTP client and the store."""
        abandoned = await self.deliveries.close(self._shutdown_drain_seconds)
        await self.http_client.aclose()
        await self.store.close()
        logger.info("hub_closed", deliveries_abandoned=abandoned)
