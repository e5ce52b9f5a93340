"""Hub configuration.

Usage:
    from websub_hub.config import get_settings

    timeout = get_settings().hub.request_timeout_seconds
"""

from functools import lru_cache

from websub_hub.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read once from files and environment."""
    return Settings.load()


def reload_settings() -> Settings:
    """Drop the cached settings and read them again."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
