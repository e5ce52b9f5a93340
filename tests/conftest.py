"""Shared test fixtures for the hub test suite."""

import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from websub_hub.config import get_settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the hub at an empty config directory with no WEBSUB_HUB_* variables.

    Keeps the repository's config/*.toml and the caller's environment out of
    every test.
    """
    for name in list(os.environ):
        if name.startswith("WEBSUB_HUB_"):
            monkeypatch.delenv(name)

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("WEBSUB_HUB_CONFIG_DIR", str(config_dir))

    get_settings.cache_clear()
    yield config_dir
    get_settings.cache_clear()


@pytest.fixture
def config_dir(isolated_config: Path) -> Path:
    """Config directory the hub reads during this test."""
    return isolated_config


@pytest.fixture
def write_config(config_dir: Path) -> Callable[..., None]:
    """Write TOML files into the test config directory.

    Usage:
        def test_something(write_config):
            write_config(**{"default.toml": "[api]\\nport = 4000\\n"})
    """

    def _write(**files: str) -> None:
        for filename, content in files.items():
            (config_dir / filename).write_text(content)

    return _write
