"""Storage configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "redis"]


class StorageConfig(BaseModel):
    """Configuration for the subscription store backend."""

    backend: BackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Connection URL, e.g. redis://localhost:6379/0",
    )
    key_prefix: str = Field(
        default="websub",
        description="Key prefix for Redis keys",
    )
