"""Layered TOML configuration files.

Files come from the config directory (``WEBSUB_HUB_CONFIG_DIR``, else
``./config``) and are merged lowest precedence first: ``default.toml``,
``{WEBSUB_HUB_ENV}.toml``, then a file named with ``websub-hub --file``.
Directory files are optional since the model defaults form a complete
configuration; a file named explicitly must exist.
"""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR_ENV = "WEBSUB_HUB_CONFIG_DIR"
ENVIRONMENT_ENV = "WEBSUB_HUB_ENV"
DEFAULT_ENVIRONMENT = "development"


def get_config_dir() -> Path:
    """Directory holding default.toml and the per-environment files.

    Raises:
        FileNotFoundError: If WEBSUB_HUB_CONFIG_DIR names no directory
    """
    configured = os.environ.get(CONFIG_DIR_ENV)
    if not configured:
        return Path.cwd() / "config"

    path = Path(configured)
    if not path.is_dir():
        raise FileNotFoundError(f"{CONFIG_DIR_ENV} is not a directory: {configured}")
    return path


def get_environment() -> str:
    return os.environ.get(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)


def load_toml(file_path: Path) -> dict[str, Any]:
    """Read one TOML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Return base updated with override; tables present in both merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def config_files(extra_file: Path | None = None) -> list[Path]:
    """Files making up the configuration, lowest precedence first."""
    config_dir = get_config_dir()
    layered = [config_dir / "default.toml", config_dir / f"{get_environment()}.toml"]
    files = [path for path in layered if path.is_file()]
    if extra_file is not None:
        files.append(extra_file)
    return files


def load_config(extra_file: Path | None = None) -> dict[str, Any]:
    """Merge every configuration file into one dictionary."""
    config: dict[str, Any] = {}
    for path in config_files(extra_file):
        config = deep_merge(config, load_toml(path))
    return config
