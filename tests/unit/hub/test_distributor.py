"""Unit tests for the publish pipeline."""

import pytest
import pytest_asyncio

from tests.factories import FakeWeb
from websub_hub.errors import TopicFetchFailedError
from websub_hub.hub.delivery import DeliveryPool
from websub_hub.hub.distributor import Distributor, TopicContent
from websub_hub.hub.http_client import HubHttpClient
from websub_hub.hub.signer import SIGNATURE_HEADER, verify
from websub_hub.subscriptions.models import Subscription
from websub_hub.subscriptions.stores.inmemory import InMemorySubscriptionStore

TOPIC = "http://testblog.de/feeds"


@pytest.fixture
def web() -> FakeWeb:
    return FakeWeb()


@pytest.fixture
def store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest_asyncio.fixture
async def http_client(web):
    client = HubHttpClient(0.5, transport=web.transport)
    yield client
    await client.aclose()


@pytest.fixture
def deliveries(http_client) -> DeliveryPool:
    return DeliveryPool(http_client, retry_backoff_seconds=0)


@pytest.fixture
def distributor(http_client, store, deliveries) -> Distributor:
    return Distributor(http_client, store, deliveries, hub_url="http://hub.test")


class TestFetch:
    """Tests for fetching topic content."""

    async def test_returns_exact_body_and_type(self, distributor, web) -> None:
        body = web.topic(TOPIC, {"foo": "bar"})

        content = await distributor.fetch(TOPIC)

        assert content.body == body
        assert content.content_type == "application/json"

    async def test_non_2xx_fails(self, distributor, web) -> None:
        web.reply("GET", TOPIC, 500)

        with pytest.raises(TopicFetchFailedError):
            await distributor.fetch(TOPIC)

    async def test_unreachable_fails(self, distributor) -> None:
        with pytest.raises(TopicFetchFailedError):
            await distributor.fetch(TOPIC)


class TestBuildDelivery:
    """Tests for per-subscriber delivery preparation."""

    @pytest.fixture
    def content(self) -> TopicContent:
        return TopicContent(topic=TOPIC, body=b'{"foo":"bar"}', content_type="application/json")

    def test_signed_when_secret(self, distributor, content) -> None:
        sub = Subscription(topic=TOPIC, callback="http://127.0.0.1:3001", secret="123456")

        delivery = distributor.build_delivery(sub, content)

        assert delivery.body == content.body
        assert verify("123456", content.body, delivery.headers[SIGNATURE_HEADER])

    def test_unsigned_without_secret(self, distributor, content) -> None:
        sub = Subscription(topic=TOPIC, callback="http://127.0.0.1:3001")

        delivery = distributor.build_delivery(sub, content)

        assert SIGNATURE_HEADER not in delivery.headers
        assert delivery.headers["Content-Type"] == "application/json"

    def test_link_header(self, distributor, content) -> None:
        sub = Subscription(topic=TOPIC, callback="http://127.0.0.1:3001")

        link = distributor.build_delivery(sub, content).headers["Link"]

        assert f'<{TOPIC}>; rel="self"' in link
        assert '<http://hub.test>; rel="hub"' in link


class TestPublish:
    """Tests for fetch-and-fan-out."""

    async def test_fans_out_to_active_subscribers(
        self, distributor, store, deliveries, web
    ) -> None:
        body = web.topic(TOPIC, {"foo": "bar"})
        for port in (3001, 3002):
            web.subscriber(f"http://127.0.0.1:{port}")
            await store.upsert(
                Subscription(topic=TOPIC, callback=f"http://127.0.0.1:{port}").activate()
            )
        await store.upsert(Subscription(topic=TOPIC, callback="http://127.0.0.1:3003"))

        result = await distributor.publish(TOPIC)
        await deliveries.drain()

        assert result.subscribers == 2
        for port in (3001, 3002):
            received = web.deliveries_to(f"http://127.0.0.1:{port}")
            assert len(received) == 1
            assert received[0].content == body
        assert web.requests_to("POST", "http://127.0.0.1:3003") == []

    async def test_fetch_failure_skips_deliveries(self, distributor, store, web) -> None:
        web.reply("GET", TOPIC, 404)
        web.subscriber("http://127.0.0.1:3001")
        await store.upsert(
            Subscription(topic=TOPIC, callback="http://127.0.0.1:3001").activate()
        )

        with pytest.raises(TopicFetchFailedError):
            await distributor.publish(TOPIC)

        assert web.deliveries_to("http://127.0.0.1:3001") == []

    async def test_no_subscribers(self, distributor, web) -> None:
        web.topic(TOPIC, {"foo": "bar"})

        result = await distributor.publish(TOPIC)

        assert result.subscribers == 0

    async def test_failing_subscriber_does_not_fail_publish(
        self, distributor, store, deliveries, web
    ) -> None:
        web.topic(TOPIC, {"foo": "bar"})
        web.subscriber("http://127.0.0.1:3001", delivery_status=500)
        await store.upsert(
            Subscription(topic=TOPIC, callback="http://127.0.0.1:3001").activate()
        )

        result = await distributor.publish(TOPIC)
        await deliveries.drain()

        assert result.subscribers == 1
        assert len(web.deliveries_to("http://127.0.0.1:3001")) == 1
