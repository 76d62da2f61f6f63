#!/usr/bin/env python3
"""Send one notification through the configured destinations.

Usage::

    # Message from an argument
    python scripts/notify.py -m "backup finished" -t "Backup" -c database/backup

    # Message from stdin
    some_job 2>&1 | python scripts/notify.py --level error -t "some_job failed"

    # Sectioned body: lines like "#<Timing>#" start a new section
    python scripts/notify.py -f -t "Backup" < report.txt

    # Custom config file, show the message without sending it
    python scripts/notify.py --config config/herald.yaml --dry-run -m "hello"

Exits 0 when every attempted delivery succeeded, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

import structlog

from herald.core.config import default_destinations, load_settings
from herald.core.logging import setup_logging
from herald.destinations.factory import build_registry
from herald.message import Component, FormattedDetail, Level, Message, make_author
from herald.routing.router import MessageRouter

logger = structlog.get_logger(__name__)


def build_message(args: argparse.Namespace, detail: str) -> Message:
    return Message(
        level=Level.parse(args.level),
        title=args.title,
        detail=FormattedDetail.parse(detail) if args.formatted else detail,
        component=Component.parse(args.component) if args.component else None,
        author=make_author(args.author),
    )


async def run(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    setup_logging(level=args.log_level or ("DEBUG" if args.verbose else None))

    detail = args.message if args.message is not None else sys.stdin.read()
    msg = build_message(args, detail)

    if args.dry_run:
        print(msg.model_dump_json(indent=2))
        return 0

    entries = settings.destinations or default_destinations()
    router = MessageRouter(build_registry(settings, entries))
    try:
        report = await router.route(msg)
    finally:
        await router.close()

    if args.verbose or not report.ok:
        print(report.render(), file=sys.stderr)
    return 0 if report.ok else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Route a notification to the configured destinations.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/herald.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the message instead of routing it",
    )
    parser.add_argument("-m", "--message", default=None, help="Message body (default: stdin)")
    parser.add_argument("-l", "--level", default="info", help="info, warn, error")
    parser.add_argument("-t", "--title", default=None)
    parser.add_argument("-c", "--component", default=None, help="e.g. database/backup")
    parser.add_argument("-a", "--author", default=None, help="Appended to the host name")
    parser.add_argument(
        "-f",
        "--formatted",
        action="store_true",
        help="Split the body into sections on \"#<Title>#\" lines",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
