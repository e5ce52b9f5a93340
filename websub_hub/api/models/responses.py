"""Response bodies for successful hub requests."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from websub_hub.subscriptions.models import Subscription, SubscriptionState


class SubscriptionResponse(BaseModel):
    """Result of a verified subscribe or unsubscribe."""

    mode: Literal["subscribe", "unsubscribe"]
    topic: str
    callback: str
    state: SubscriptionState
    expires_at: datetime | None = None

    @classmethod
    def from_subscription(
        cls, mode: Literal["subscribe", "unsubscribe"], sub: Subscription
    ) -> "SubscriptionResponse":
        return cls(
            mode=mode,
            topic=sub.topic,
            callback=sub.callback,
            state=sub.state,
            expires_at=sub.expires_at,
        )


class PublishResponse(BaseModel):
    """Result of a publish whose fetch succeeded."""

    topic: str
    subscribers: int


class ComponentHealth(BaseModel):
    """Health of one dependency."""

    name: str
    status: Literal["healthy", "unhealthy"]
    latency_ms: float | None = None
    message: str | None = None


class HealthResponse(BaseModel):
    """Body of GET /health."""

    status: Literal["healthy", "unhealthy"]
    version: str
    components: list[ComponentHealth]
    deliveries_in_flight: int
    timestamp: datetime
