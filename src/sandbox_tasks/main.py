"""CLI entrypoint for the sandbox task service."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn
from pydantic import ValidationError

from sandbox_tasks import __version__
from sandbox_tasks.config import ServiceSettings
from sandbox_tasks.logging import configure_logging
from sandbox_tasks.server.app import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sandbox-tasks",
        description="Simulated asynchronous sandbox task service",
    )
    parser.add_argument("--version", action="version", version=f"sandbox-tasks {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=None, help="Bind address (overrides SANDBOX_HOST)")
    serve.add_argument(
        "--port", type=int, default=None, help="Listen port (overrides SANDBOX_PORT)"
    )
    serve.add_argument(
        "--log-level", default=None, help="Root log level (overrides LOG_LEVEL)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = {
        key: value
        for key, value in (
            ("host", args.host),
            ("port", args.port),
            ("log_level", args.log_level),
        )
        if value is not None
    }
    try:
        settings = ServiceSettings(**overrides)
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    configure_logging(settings.log_level)

    if args.command == "serve":
        logger.info("Server starting", extra={"host": settings.host, "port": settings.port})
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_config=None,
        )
        return 0

    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
