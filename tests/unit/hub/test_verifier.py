"""Unit tests for intent verification."""

import json
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from websub_hub.errors import SubscriptionNotFoundError, VerificationFailedError
from websub_hub.hub.verifier import (
    INVALID_ANSWER_MESSAGE,
    VerificationPayload,
    Verifier,
    new_challenge,
)
from websub_hub.subscriptions.models import Subscription, SubscriptionState
from websub_hub.subscriptions.stores.inmemory import InMemorySubscriptionStore

TOPIC = "http://testblog.de/feeds"
CALLBACK = "http://127.0.0.1:3001"


def echo(url: str, content: bytes, headers: dict | None = None) -> httpx.Response:
    return httpx.Response(200, content=content)


@pytest.fixture
def http_client() -> MagicMock:
    client = MagicMock()
    client.timeout_seconds = 2.0
    client.post = AsyncMock(side_effect=echo)
    return client


@pytest.fixture
def store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest.fixture
def verifier(http_client, store) -> Verifier:
    return Verifier(http_client, store)


def sent_payload(http_client: MagicMock, index: int = -1) -> dict:
    return json.loads(http_client.post.await_args_list[index].kwargs["content"])


class TestVerificationPayload:
    """Tests for the challenge payload."""

    def test_encoded_fields(self) -> None:
        payload = VerificationPayload(
            mode="subscribe", topic=TOPIC, callback=CALLBACK, lease_seconds=60
        )

        decoded = json.loads(payload.encode())

        assert decoded["mode"] == "subscribe"
        assert decoded["topic"] == TOPIC
        assert decoded["callback"] == CALLBACK
        assert decoded["lease_seconds"] == 60
        assert decoded["challenge"]

    def test_lease_omitted_when_absent(self) -> None:
        payload = VerificationPayload(mode="unsubscribe", topic=TOPIC, callback=CALLBACK)
        assert "lease_seconds" not in json.loads(payload.encode())

    def test_challenges_are_fresh(self) -> None:
        assert new_challenge() != new_challenge()


class TestVerifyIntent:
    """Tests for the handshake itself."""

    async def test_exact_echo_succeeds(self, verifier, http_client) -> None:
        await verifier.verify_intent("subscribe", Subscription(topic=TOPIC, callback=CALLBACK))

        http_client.post.assert_awaited_once()
        assert http_client.post.await_args.args[0] == CALLBACK
        assert sent_payload(http_client)["mode"] == "subscribe"

    async def test_wrong_echo_fails(self, verifier, http_client) -> None:
        http_client.post.side_effect = None
        http_client.post.return_value = httpx.Response(200, content=b"nope")

        with pytest.raises(VerificationFailedError) as exc_info:
            await verifier.verify_intent("subscribe", Subscription(topic=TOPIC, callback=CALLBACK))

        assert exc_info.value.message == INVALID_ANSWER_MESSAGE

    async def test_non_2xx_fails(self, verifier, http_client) -> None:
        http_client.post.side_effect = lambda url, content, headers=None: httpx.Response(
            500, content=content
        )

        with pytest.raises(VerificationFailedError):
            await verifier.verify_intent("subscribe", Subscription(topic=TOPIC, callback=CALLBACK))

    async def test_timeout_fails(self, verifier, http_client) -> None:
        http_client.post.side_effect = httpx.ReadTimeout("slow")

        with pytest.raises(VerificationFailedError) as exc_info:
            await verifier.verify_intent("subscribe", Subscription(topic=TOPIC, callback=CALLBACK))

        assert isinstance(exc_info.value.cause, httpx.ReadTimeout)

    async def test_connection_error_fails(self, verifier, http_client) -> None:
        http_client.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(VerificationFailedError):
            await verifier.verify_intent("subscribe", Subscription(topic=TOPIC, callback=CALLBACK))


class TestSubscribe:
    """Tests for subscribe outcomes on the store."""

    async def test_success_stores_active(self, verifier, store) -> None:
        result = await verifier.subscribe(
            Subscription(topic=TOPIC, callback=CALLBACK, secret="123456", lease_seconds=60)
        )

        assert result.state == SubscriptionState.ACTIVE
        assert result.expires_at is not None
        stored = await store.find(TOPIC, CALLBACK)
        assert stored is not None
        assert stored.secret == "123456"

    async def test_failure_leaves_store_untouched(self, verifier, store, http_client) -> None:
        http_client.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(VerificationFailedError):
            await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK))

        assert await store.find(TOPIC, CALLBACK) is None

    async def test_resubscribe_replaces_secret_keeps_created_at(self, verifier, store) -> None:
        first = await verifier.subscribe(
            Subscription(topic=TOPIC, callback=CALLBACK, secret="old")
        )
        await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK, secret="new"))

        stored = await store.find(TOPIC, CALLBACK)
        assert stored.secret == "new"
        assert stored.created_at == first.created_at
        assert len(await store.list_active_subscribers(TOPIC)) == 1

    async def test_failed_resubscribe_keeps_existing(self, verifier, store, http_client) -> None:
        await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK, secret="old"))
        http_client.post.side_effect = httpx.ConnectError("refused")

        with pytest.raises(VerificationFailedError):
            await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK, secret="new"))

        stored = await store.find(TOPIC, CALLBACK)
        assert stored.secret == "old"
        assert stored.state == SubscriptionState.ACTIVE


class TestUnsubscribe:
    """Tests for unsubscribe outcomes on the store."""

    async def test_success_removes(self, verifier, store, http_client) -> None:
        await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK))

        result = await verifier.unsubscribe(TOPIC, CALLBACK)

        assert result.state == SubscriptionState.REMOVED
        assert await store.find(TOPIC, CALLBACK) is None
        assert sent_payload(http_client)["mode"] == "unsubscribe"

    async def test_unknown_pair_never_contacts_callback(self, verifier, http_client) -> None:
        with pytest.raises(SubscriptionNotFoundError):
            await verifier.unsubscribe(TOPIC, CALLBACK)

        http_client.post.assert_not_awaited()

    async def test_other_topic_is_not_found(self, verifier, http_client) -> None:
        await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK))
        http_client.post.reset_mock()

        with pytest.raises(SubscriptionNotFoundError):
            await verifier.unsubscribe("http://testblog.de/other", CALLBACK)

        http_client.post.assert_not_awaited()

    async def test_failed_unsubscribe_keeps_active(self, verifier, store, http_client) -> None:
        await verifier.subscribe(Subscription(topic=TOPIC, callback=CALLBACK))
        http_client.post.side_effect = lambda url, content, headers=None: httpx.Response(404)

        with pytest.raises(VerificationFailedError):
            await verifier.unsubscribe(TOPIC, CALLBACK)

        stored = await store.find(TOPIC, CALLBACK)
        assert stored.state == SubscriptionState.ACTIVE
