"""Fetch topic content on publish and fan it out to active subscribers."""

from dataclasses import dataclass

import httpx

from websub_hub.errors import TopicFetchFailedError
from websub_hub.hub.delivery import Delivery, DeliveryPool
from websub_hub.hub.http_client import HubHttpClient, is_success
from websub_hub.hub.signer import SIGNATURE_HEADER, sign
from websub_hub.observability.logging import get_logger
from websub_hub.observability.metrics import PUBLISHES
from websub_hub.subscriptions.models import Subscription
from websub_hub.subscriptions.store import SubscriptionStore

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class TopicContent:
    """Representation of a topic as fetched from its URL."""

    topic: str
    body: bytes
    content_type: str


@dataclass(frozen=True)
class PublishResult:
    """Outcome reported to the publisher."""

    topic: str
    subscribers: int


class Distributor:
    """Publish pipeline: fetch once, then dispatch one delivery per subscriber.

    The publish outcome depends only on the fetch. Deliveries are handed to
    the DeliveryPool and complete after the publisher has its answer.
    """

    def __init__(
        self,
        http_client: HubHttpClient,
        store: SubscriptionStore,
        deliveries: DeliveryPool,
        *,
        hub_url: str | None = None,
    ) -> None:
        self._http = http_client
        self._store = store
        self._deliveries = deliveries
        self._hub_url = hub_url

    async def fetch(self, topic: str) -> TopicContent:
        """GET the topic URL.

        Raises:
            TopicFetchFailedError: On non-2xx, timeout or transport error
        """
        try:
            response = await self._http.get(topic)
        except httpx.TimeoutException as e:
            logger.warning("topic_fetch_failed", topic=topic, reason="timeout")
            raise TopicFetchFailedError(f"Timeout fetching topic {topic}", cause=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("topic_fetch_failed", topic=topic, reason="transport_error", error=str(e))
            raise TopicFetchFailedError(f"Could not fetch topic {topic}", cause=e) from e

        if not is_success(response):
            logger.warning(
                "topic_fetch_failed",
                topic=topic,
                reason="bad_status",
                status_code=response.status_code,
            )
            raise TopicFetchFailedError(
                f"Topic {topic} answered with status {response.status_code}"
            )

        return TopicContent(
            topic=topic,
            body=response.content,
            content_type=response.headers.get("Content-Type", DEFAULT_CONTENT_TYPE),
        )

    def build_delivery(self, subscription: Subscription, content: TopicContent) -> Delivery:
        """Prepare the POST for one subscriber, signing when it holds a secret."""
        headers = {
            "Content-Type": content.content_type,
            "Link": self._link_header(content.topic),
        }
        if subscription.secret:
            headers[SIGNATURE_HEADER] = sign(subscription.secret, content.body)

        return Delivery(
            topic=content.topic,
            callback=subscription.callback,
            body=content.body,
            headers=headers,
        )

    async def publish(self, topic: str) -> PublishResult:
        """Fetch the topic and dispatch deliveries to its active subscribers.

        Raises:
            TopicFetchFailedError: Fetch failed; no deliveries were attempted
        """
        try:
            content = await self.fetch(topic)
        except TopicFetchFailedError:
            PUBLISHES.labels(outcome="fetch_failed").inc()
            raise

        subscribers = await self._store.list_active_subscribers(topic)
        for subscription in subscribers:
            self._deliveries.dispatch(self.build_delivery(subscription, content))

        PUBLISHES.labels(outcome="dispatched").inc()
        logger.info(
            "publish_dispatched",
            topic=topic,
            subscribers=len(subscribers),
            content_type=content.content_type,
            content_length=len(content.body),
        )
        return PublishResult(topic=topic, subscribers=len(subscribers))

    def _link_header(self, topic: str) -> str:
        links = [f'<{topic}>; rel="self"']
        if self._hub_url:
            links.append(f'<{self._hub_url}>; rel="hub"')
        return ", ".join(links)
