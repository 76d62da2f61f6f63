"""Convenience factory for wiring a destination registry from config."""

from __future__ import annotations

from collections.abc import Callable

import structlog
from pydantic import ValidationError

from herald.core.config import (
    DestinationConfig,
    DiscordConfig,
    FileConfig,
    HttpConfig,
    MailConfig,
    Settings,
    TelegramConfig,
)
from herald.destinations.base import Destination
from herald.destinations.exceptions import DestinationConfigError
from herald.destinations.file import FileDestination
from herald.destinations.mail import MailDestination
from herald.destinations.webhooks import DiscordDestination, TelegramDestination
from herald.routing.registry import DestinationRegistry
from herald.routing.router import MessageRouter

Builder = Callable[[dict, HttpConfig], Destination]

_BUILDERS: dict[str, Builder] = {
    "file": lambda opts, http: FileDestination(FileConfig(**opts)),
    "discord": lambda opts, http: DiscordDestination(DiscordConfig(**opts), http),
    "telegram": lambda opts, http: TelegramDestination(TelegramConfig(**opts), http),
    "mail": lambda opts, http: MailDestination(MailConfig(**opts)),
}

logger = structlog.get_logger(__name__)


def build_destination(entry: DestinationConfig, http: HttpConfig | None = None) -> Destination:
    """Instantiate the destination described by one config entry.

    Raises:
        DestinationConfigError: unknown kind or invalid options.
    """
    builder = _BUILDERS.get(entry.kind.lower())
    if builder is None:
        raise DestinationConfigError(
            f"destination {entry.id!r}: unknown kind {entry.kind!r} "
            f"(expected one of {', '.join(sorted(_BUILDERS))})"
        )
    try:
        return builder(entry.options, http or HttpConfig())
    except ValidationError as exc:
        raise DestinationConfigError(f"destination {entry.id!r}: {exc}") from exc


def build_registry(
    settings: Settings,
    entries: list[DestinationConfig] | None = None,
) -> DestinationRegistry:
    """Build a registry from ``settings.destinations`` (or *entries*).

    Disabled entries are skipped. Order is preserved.
    """
    registry = DestinationRegistry()
    for entry in entries if entries is not None else settings.destinations:
        if not entry.enabled:
            logger.debug("destination_disabled", destination=entry.id)
            continue
        registry.add(entry.id, build_destination(entry, settings.http), entry.routing)

    if not registry.roots():
        logger.warning("no_root_destinations", destinations=len(registry))
    return registry


def create_router(settings: Settings) -> MessageRouter:
    return MessageRouter(build_registry(settings))
