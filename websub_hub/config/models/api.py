"""API server configuration models."""

from pydantic import BaseModel, Field


class APIConfig(BaseModel):
    """Configuration for the inbound HTTP server."""

    host: str = Field(default="127.0.0.1", description="Bind address")
    port: int = Field(default=3000, ge=0, le=65535, description="Port number")
    public_url: str | None = Field(
        default=None,
        description="Externally reachable hub URL advertised in Link headers",
    )
