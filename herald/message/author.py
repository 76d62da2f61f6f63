"""Author tags — who (which host / program) sent a message."""

from __future__ import annotations

import socket

import structlog

logger = structlog.get_logger(__name__)


def _hostname() -> str:
    try:
        return socket.gethostname() or "?"
    except OSError:
        logger.warning("hostname_lookup_failed", exc_info=True)
        return "?"


def make_author(parts: str | None = None) -> str:
    """Build an author tag prefixed with the local host name.

    ``make_author("backup/nightly")`` -> ``"myhost/backup/nightly"``.
    Empty segments are dropped; ``"?"`` stands in for an unknown host.
    """
    segments = [_hostname()]
    if parts:
        segments.extend(p for p in parts.split("/") if p)
    return "/".join(segments)
