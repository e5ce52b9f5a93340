"""Typed request bodies for /subscribe and /publish.

Field names are fixed by the protocol (``hub.callback``, ``hub.mode``, ...)
and mapped onto attributes through aliases. URLs are checked but kept
verbatim so the stored pair matches what the subscriber sent.
"""

from typing import Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

from websub_hub.subscriptions.models import MAX_LEASE_SECONDS


def check_http_url(value: str) -> str:
    """Require an absolute http(s) URL."""
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError("must be an absolute http or https URL")
    return value


class SubscribeRequest(BaseModel):
    """Body of POST /subscribe."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    callback: str = Field(alias="hub.callback")
    mode: Literal["subscribe", "unsubscribe"] = Field(alias="hub.mode")
    topic: str = Field(alias="hub.topic")
    secret: str | None = Field(default=None, alias="hub.secret", max_length=200)
    lease_seconds: int | None = Field(
        default=None, alias="hub.lease_seconds", gt=0, le=MAX_LEASE_SECONDS
    )

    @field_validator("callback", "topic")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_http_url(v)

    @field_validator("secret", "lease_seconds", mode="before")
    @classmethod
    def empty_as_missing(cls, v: object) -> object:
        """Form posts send empty strings for blank optional fields."""
        if v == "":
            return None
        return v


class PublishRequest(BaseModel):
    """Body of POST /publish."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mode: Literal["publish"] = Field(alias="hub.mode")
    url: str = Field(alias="hub.url")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return check_http_url(v)
