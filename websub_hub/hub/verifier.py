"""Intent verification for subscribe and unsubscribe requests.

The hub POSTs a JSON challenge payload to the callback. The subscriber
proves it asked for the (un)subscription by answering 2xx with the exact
same bytes. Anything else is a verification failure and the store is left
untouched.
"""

import secrets
from typing import Literal

import httpx
from pydantic import BaseModel, Field

from websub_hub.errors import (
    SubscriptionNotFoundError,
    VerificationFailedError,
)
from websub_hub.hub.http_client import HubHttpClient, is_success
from websub_hub.observability.logging import get_logger
from websub_hub.observability.metrics import VERIFICATIONS
from websub_hub.subscriptions.models import Subscription, SubscriptionState
from websub_hub.subscriptions.store import SubscriptionStore

logger = get_logger(__name__)

Mode = Literal["subscribe", "unsubscribe"]

INVALID_ANSWER_MESSAGE = "Subscriber has return an invalid answer"


def new_challenge() -> str:
    """Generate a fresh, unguessable challenge token."""
    return secrets.token_urlsafe(32)


class VerificationPayload(BaseModel):
    """Challenge sent to a callback. Never persisted.

    Serialized as compact JSON with keys in declaration order; lease_seconds
    is omitted when not requested.
    """

    mode: Mode
    topic: str
    callback: str
    challenge: str = Field(default_factory=new_challenge)
    lease_seconds: int | None = None

    def encode(self) -> bytes:
        return self.model_dump_json(exclude_none=True).encode("utf-8")


class Verifier:
    """Runs the verification handshake and applies its outcome to the store."""

    def __init__(self, http_client: HubHttpClient, store: SubscriptionStore) -> None:
        self._http = http_client
        self._store = store

    async def verify_intent(self, mode: Mode, subscription: Subscription) -> None:
        """Ping the callback and require an exact echo.

        Raises:
            VerificationFailedError: On non-2xx, timeout, transport error or
                a body that differs from the payload sent
        """
        payload = VerificationPayload(
            mode=mode,
            topic=subscription.topic,
            callback=subscription.callback,
            lease_seconds=subscription.lease_seconds if mode == "subscribe" else None,
        )
        body = payload.encode()

        try:
            response = await self._http.post(
                subscription.callback,
                content=body,
                headers={"Content-Type": "application/json"},
            )
        except httpx.TimeoutException as e:
            self._record_failure(mode, subscription, reason="timeout")
            raise VerificationFailedError(INVALID_ANSWER_MESSAGE, cause=e) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            self._record_failure(mode, subscription, reason="transport_error", error=str(e))
            raise VerificationFailedError(INVALID_ANSWER_MESSAGE, cause=e) from e

        if not is_success(response):
            self._record_failure(
                mode, subscription, reason="bad_status", status_code=response.status_code
            )
            raise VerificationFailedError(INVALID_ANSWER_MESSAGE)

        if response.content != body:
            self._record_failure(mode, subscription, reason="challenge_mismatch")
            raise VerificationFailedError(INVALID_ANSWER_MESSAGE)

        VERIFICATIONS.labels(mode=mode, outcome="verified").inc()
        logger.info(
            "intent_verified",
            mode=mode,
            topic=subscription.topic,
            callback=subscription.callback,
        )

    async def subscribe(self, subscription: Subscription) -> Subscription:
        """Verify and activate a subscription.

        Re-subscribing an existing pair is always re-verified; on success the
        record is replaced, refreshing secret and lease.
        """
        pending = subscription.with_state(SubscriptionState.PENDING_VERIFICATION)
        await self.verify_intent("subscribe", pending)

        existing = await self._store.find(pending.topic, pending.callback)
        active = pending.activate()
        if existing is not None:
            active.created_at = existing.created_at
        await self._store.upsert(active)

        logger.info(
            "subscription_activated",
            topic=active.topic,
            callback=active.callback,
            renewed=existing is not None,
            signed=active.secret is not None,
            expires_at=active.expires_at.isoformat() if active.expires_at else None,
        )
        return active

    async def unsubscribe(self, topic: str, callback: str) -> Subscription:
        """Verify and remove an active subscription.

        Unknown pairs fail before the callback is contacted.

        Raises:
            SubscriptionNotFoundError: No active subscription for the pair
            VerificationFailedError: Callback did not confirm; record stays active
        """
        existing = await self._store.find(topic, callback)
        if existing is None or existing.state != SubscriptionState.ACTIVE:
            logger.info("unsubscribe_unknown_subscription", topic=topic, callback=callback)
            raise SubscriptionNotFoundError(
                f"No subscription for callback {callback} on topic {topic}"
            )

        pending = existing.with_state(SubscriptionState.PENDING_UNVERIFICATION)
        await self.verify_intent("unsubscribe", pending)

        await self._store.remove(topic, callback)
        logger.info("subscription_removed", topic=topic, callback=callback)
        return pending.with_state(SubscriptionState.REMOVED)

    def _record_failure(self, mode: Mode, subscription: Subscription, **fields: object) -> None:
        VERIFICATIONS.labels(mode=mode, outcome="failed").inc()
        logger.warning(
            "intent_verification_failed",
            mode=mode,
            topic=subscription.topic,
            callback=subscription.callback,
            **fields,
        )
