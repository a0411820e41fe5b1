"""Command-line interface for Vehicle Insight.

This module provides the main entry point for the CLI application. The CLI
reads a credential JSON file produced by whatever performed the OAuth
exchange; it never refreshes or rewrites that file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from vehicle_insight import __version__
from vehicle_insight.agent.assembler import compute_stats
from vehicle_insight.agent.notification_agent import fetch_notification_emails
from vehicle_insight.config import get_settings
from vehicle_insight.exceptions import AuthExpiredError, ConfigurationError
from vehicle_insight.models import EmailRecord, MailCredential

logger = structlog.get_logger()

EXIT_AUTH_EXPIRED = 3


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vehicle-insight", description="Vehicle Insight")
    subparsers = parser.add_subparsers(dest="command", required=True)

    fetch_parser = subparsers.add_parser(
        "fetch",
        help="Fetch vehicle hit notifications and print the parsed records",
    )
    fetch_parser.add_argument(
        "--credentials",
        type=Path,
        required=True,
        help="Path to a JSON file holding access_token/refresh_token/expiry_date",
    )
    fetch_parser.add_argument(
        "--json",
        action="store_true",
        help="Print records as JSON instead of tab-separated lines",
    )

    stats_parser = subparsers.add_parser("stats", help="Show new/total/today notification counts")
    stats_parser.add_argument(
        "--credentials",
        type=Path,
        required=True,
        help="Path to a JSON file holding access_token/refresh_token/expiry_date",
    )

    return parser


def load_credential(path: Path) -> MailCredential:
    """Read a MailCredential from a JSON token file.

    Raises:
        ConfigurationError: If the file is missing or not a valid credential.
    """
    try:
        return MailCredential.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except OSError as exc:
        raise ConfigurationError(f"Cannot read credential file {path}: {exc}") from exc
    except (ValueError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid credential file {path}: {exc}") from exc


def _format_record(record: EmailRecord) -> str:
    return "\t".join(
        [
            record.status.value,
            f"{record.date_display} {record.time_display}",
            record.vin,
            record.vehicle,
            record.plate or "-",
            record.state or "-",
        ]
    )


async def _cmd_fetch(args: argparse.Namespace) -> int:
    credential = load_credential(args.credentials)
    records = await fetch_notification_emails(credential, settings=get_settings())

    if args.json:
        payload = [r.model_dump(mode="json", exclude={"raw_content"}) for r in records]
        print(json.dumps(payload, indent=2))
        return 0

    for record in records:
        print(_format_record(record))
    return 0


async def _cmd_stats(args: argparse.Namespace) -> int:
    credential = load_credential(args.credentials)
    records = await fetch_notification_emails(credential, settings=get_settings())

    stats = compute_stats(records)
    print(f"New notifications: {stats.new_count}")
    print(f"Total notifications: {stats.total_count}")
    print(f"Received today: {stats.today_count}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Vehicle Insight CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    settings = get_settings()

    # Configure logging; stdout is reserved for command output.
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(settings.log_level.upper())
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    logger.info("vehicle_insight_started", version=__version__, debug=settings.debug)

    parser = _build_parser()
    parsed = parser.parse_args(args)

    commands = {"fetch": _cmd_fetch, "stats": _cmd_stats}
    command = commands.get(parsed.command)
    if command is None:
        logger.error("unknown_command", command=parsed.command)
        return 2

    try:
        return asyncio.run(command(parsed))
    except ConfigurationError as exc:
        logger.error("configuration_error", error=str(exc))
        print(str(exc), file=sys.stderr)
        return 2
    except AuthExpiredError as exc:
        logger.error("gmail_auth_expired", error=str(exc))
        print("Gmail authentication expired. Please reconnect.", file=sys.stderr)
        return EXIT_AUTH_EXPIRED


if __name__ == "__main__":
    sys.exit(main())
