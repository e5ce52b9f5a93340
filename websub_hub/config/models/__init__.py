"""Configuration model exports.

    from websub_hub.config.models import HubConfig, StorageConfig
"""

from websub_hub.config.models.api import APIConfig
from websub_hub.config.models.hub import HubConfig
from websub_hub.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from websub_hub.config.models.storage import StorageConfig

__all__ = [
    "APIConfig",
    "HubConfig",
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    "StorageConfig",
]
