"""Subscription record model."""

from datetime import UTC, datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Ten years; keeps verified_at + lease well inside the datetime range
MAX_LEASE_SECONDS = 10 * 365 * 24 * 60 * 60


def utc_now() -> datetime:
    """Return current UTC time."""
    return datetime.now(UTC)


class SubscriptionState(str, Enum):
    """Subscription lifecycle states."""

    PENDING_VERIFICATION = "pending-verification"
    ACTIVE = "active"
    PENDING_UNVERIFICATION = "pending-unverification"
    REMOVED = "removed"


class Subscription(BaseModel):
    """A registered interest of one callback in one topic.

    Identified by the (topic, callback) pair; a store holds at most one
    record per pair.
    """

    model_config = ConfigDict(frozen=False, validate_assignment=True)

    topic: str = Field(..., description="Canonical topic URL")
    callback: str = Field(..., description="Subscriber URL receiving notifications")
    secret: str | None = Field(
        default=None, description="Shared secret for content signing"
    )
    lease_seconds: int | None = Field(
        default=None,
        gt=0,
        le=MAX_LEASE_SECONDS,
        description="Requested lease duration",
    )
    state: SubscriptionState = Field(
        default=SubscriptionState.PENDING_VERIFICATION,
        description="Lifecycle state",
    )
    created_at: datetime = Field(default_factory=utc_now)
    verified_at: datetime | None = Field(default=None)
    expires_at: datetime | None = Field(default=None)

    @property
    def key(self) -> tuple[str, str]:
        return (self.topic, self.callback)

    def activate(self, now: datetime | None = None) -> "Subscription":
        """Return a copy promoted to ACTIVE with a fresh lease."""
        verified_at = now or utc_now()
        expires_at = (
            verified_at + timedelta(seconds=self.lease_seconds)
            if self.lease_seconds
            else None
        )
        return self.model_copy(
            update={
                "state": SubscriptionState.ACTIVE,
                "verified_at": verified_at,
                "expires_at": expires_at,
            }
        )

    def with_state(self, state: SubscriptionState) -> "Subscription":
        return self.model_copy(update={"state": state})

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        return self.expires_at <= (now or utc_now())

    def is_deliverable(self, now: datetime | None = None) -> bool:
        """Whether content should be pushed to this subscription."""
        return self.state == SubscriptionState.ACTIVE and not self.is_expired(now)
