"""Command-line entry point for running the hub.

Registered as a console script in pyproject.toml:
    [project.scripts]
    websub-hub = "websub_hub.cli:main"

Usage:
    websub-hub --port 3000 --timeout 2000 --log-level INFO
    websub-hub --storage-url redis://localhost:6379/0
    websub-hub --file ./hub.toml
"""

import argparse
import sys
from pathlib import Path
from typing import Any

import uvicorn

from websub_hub.api.app import create_app
from websub_hub.config.settings import Settings
from websub_hub.observability.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="websub-hub",
        description="Run a WebSub hub (subscribe, unsubscribe, publish over HTTP)",
    )
    parser.add_argument("-p", "--port", type=int, help="Port to listen on (default 3000)")
    parser.add_argument("-a", "--address", help="Address to bind (default 127.0.0.1)")
    parser.add_argument(
        "-t", "--timeout", type=int, help="Outbound request timeout in milliseconds"
    )
    parser.add_argument(
        "-l",
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Minimum log level",
    )
    parser.add_argument(
        "-s",
        "--storage-url",
        help="Redis URL for the subscription store; in-memory when omitted",
    )
    parser.add_argument(
        "-f", "--file", type=Path, help="Extra TOML file merged over the loaded configuration"
    )
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if args.port is not None:
        overrides.setdefault("api", {})["port"] = args.port
    if args.address:
        overrides.setdefault("api", {})["host"] = args.address
    if args.timeout is not None:
        overrides.setdefault("hub", {})["request_timeout_ms"] = args.timeout
    if args.log_level:
        overrides["observability"] = {"logging": {"level": args.log_level}}
    if args.storage_url:
        overrides["storage"] = {"backend": "redis", "connection_url": args.storage_url}
    return overrides


def load_settings(args: argparse.Namespace) -> Settings:
    """Build Settings from config files, the environment and CLI flags.

    Flags win over WEBSUB_HUB_* environment variables, which win over
    --file and the config directory files.
    """
    return Settings.load(args.file, **_cli_overrides(args))


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args)
        log_config = settings.observability.logging
        setup_logging(
            level=log_config.level,
            format=log_config.format,
            redact_secrets=log_config.redact_secrets,
        )
        app = create_app(settings)
    except Exception as e:
        logger.error("hub_startup_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)

    logger.info(
        "hub_listening",
        url=f"http://{settings.api.host}:{settings.api.port}",
    )
    uvicorn.run(app, host=settings.api.host, port=settings.api.port, log_config=None)


if __name__ == "__main__":
    main()
