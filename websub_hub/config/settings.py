"""Hub settings.

Precedence, highest first: explicit overrides (command-line flags),
``WEBSUB_HUB_*`` environment variables (nested with ``__``), TOML files,
model defaults.
"""

from contextvars import ContextVar
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from websub_hub.config.loader import load_config
from websub_hub.config.models.api import APIConfig
from websub_hub.config.models.hub import HubConfig
from websub_hub.config.models.observability import ObservabilityConfig
from websub_hub.config.models.storage import StorageConfig

# Merged TOML files for the Settings.load() call in progress
_file_config: ContextVar[dict[str, Any]] = ContextVar("websub_hub_file_config")


class FileConfigSource(PydanticBaseSettingsSource):
    """Serves values read from the TOML files, below the environment."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        return _file_config.get({}).get(field_name), field_name, False

    def __call__(self) -> dict[str, Any]:
        return dict(_file_config.get({}))


class Settings(BaseSettings):
    """Hub configuration: HTTP server, hub engine, storage and observability.

    ``Settings()`` uses defaults and the environment only; ``Settings.load()``
    also reads the TOML files.
    """

    model_config = SettingsConfigDict(
        env_prefix="WEBSUB_HUB_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    app_name: str = Field(default="websub-hub", description="Application name for logging")
    debug: bool = Field(default=False, description="Enable debug mode")

    api: APIConfig = Field(default_factory=APIConfig, description="HTTP server configuration")
    hub: HubConfig = Field(default_factory=HubConfig, description="Hub engine configuration")
    storage: StorageConfig = Field(
        default_factory=StorageConfig,
        description="Subscription store configuration",
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig,
        description="Observability configuration",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, FileConfigSource(settings_cls))

    @classmethod
    def load(cls, extra_file: Path | None = None, **overrides: Any) -> "Settings":
        """Build settings from the TOML files, the environment and overrides.

        Args:
            extra_file: TOML file merged over the config directory files
            **overrides: Section values that win over every other source,
                e.g. ``api={"port": 4000}``

        Raises:
            FileNotFoundError: If extra_file or WEBSUB_HUB_CONFIG_DIR is missing
            tomllib.TOMLDecodeError: If a file is not valid TOML
        """
        token = _file_config.set(load_config(extra_file))
        try:
            return cls(**overrides)
        finally:
            _file_config.reset(token)
