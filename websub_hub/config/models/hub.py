"""Hub engine configuration models."""

from pydantic import BaseModel, Field


class HubConfig(BaseModel):
    """Outbound I/O and fan-out settings for the hub engine."""

    request_timeout_ms: int = Field(
        default=2000,
        gt=0,
        description="Timeout for every outbound request (verification, fetch, delivery)",
    )
    max_concurrent_deliveries: int = Field(
        default=50,
        gt=0,
        description="Maximum number of deliveries in flight at once",
    )
    delivery_max_retries: int = Field(
        default=0,
        ge=0,
        le=10,
        description="Retries for a delivery that failed with 5xx or a transport error",
    )
    delivery_retry_backoff_ms: int = Field(
        default=500,
        ge=0,
        description="Linear backoff step between delivery retries",
    )
    shutdown_drain_seconds: float = Field(
        default=10.0,
        ge=0,
        description="How long shutdown waits for in-flight deliveries",
    )
    user_agent: str = Field(
        default="websub-hub/1.0",
        description="User-Agent sent on outbound requests",
    )

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000
