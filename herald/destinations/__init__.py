"""Destinations — where messages are delivered."""

from herald.destinations.base import Destination
from herald.destinations.exceptions import (
    DestinationConfigError,
    DestinationError,
    DestinationSendError,
)
from herald.destinations.factory import build_destination, build_registry, create_router
from herald.destinations.file import FileDestination
from herald.destinations.mail import MailDestination
from herald.destinations.memory import MemoryDestination
from herald.destinations.webhooks import DiscordDestination, TelegramDestination

__all__ = [
    "Destination",
    "DestinationConfigError",
    "DestinationError",
    "DestinationSendError",
    "DiscordDestination",
    "FileDestination",
    "MailDestination",
    "MemoryDestination",
    "TelegramDestination",
    "build_destination",
    "build_registry",
    "create_router",
]
