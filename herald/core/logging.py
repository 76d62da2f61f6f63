"""Structured logging setup using structlog, plus routing context helpers."""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from herald.message import Message

# Libraries whose INFO chatter would drown out delivery logs.
_NOISY_LOGGERS = ("aiohttp.access", "asyncio")


def message_context(msg: Message) -> AbstractContextManager[None]:
    """Tag log lines emitted inside the block with the message being routed.

    Tasks spawned inside the block inherit the tags.
    """
    return structlog.contextvars.bound_contextvars(
        msg_level=msg.level.name,
        msg_title=msg.title,
    )


def destination_context(destination_id: str) -> AbstractContextManager[None]:
    """Tag log lines emitted inside the block with ``destination``."""
    return structlog.contextvars.bound_contextvars(destination=destination_id)


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog with a JSON or console renderer on stderr.

    Args:
        level: Log level override (e.g. "DEBUG"). Uses config if None.
        fmt: Renderer format override ("json" or "console"). Uses config if None.
    """
    from herald.core.config import get_settings

    config = get_settings().logging
    log_level = getattr(logging, (level or config.level).upper(), logging.INFO)

    if (fmt or config.format) == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))
