"""Command line entry point: ``huddle serve`` and ``huddle provision``."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from huddle.config import Settings, get_settings
from huddle.database import Database
from huddle.errors import ConfigError, DatabaseConnectionError
from huddle.main import LOGGING_CONFIG, configure_logging, create_app
from huddle.provisioning import provision

logger = logging.getLogger("huddle")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="huddle", description=__doc__)
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Provision the schema and serve the HTTP API")
    serve.add_argument("--host", default=None, help="Interface to bind (defaults to HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port to bind (defaults to PORT)")

    subparsers.add_parser("provision", help="Create missing tables and exit")
    return parser.parse_args(argv)


def _serve(settings: Settings, database: Database, args: argparse.Namespace) -> int:
    app = create_app(settings, database)
    uvicorn.run(
        app,
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_config=LOGGING_CONFIG,
    )
    return 0


def _provision(settings: Settings, database: Database, args: argparse.Namespace) -> int:
    report = provision(database.engine, fail_fast=settings.provision_fail_fast)
    for name in report.created:
        print(f"created   {name}")
    for name in report.existing:
        print(f"existing  {name}")
    for name, error in report.failed.items():
        print(f"failed    {name}: {error.reason}")
    return 0 if report.ok else 1


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging()

    try:
        settings = get_settings()
        database = Database.from_settings(settings)
        database.ping()
    except (ConfigError, DatabaseConnectionError) as exc:
        logger.critical("%s", exc)
        return 1

    handlers = {"serve": _serve, "provision": _provision}
    try:
        return handlers[args.command](settings, database, args)
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
