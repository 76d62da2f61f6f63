"""Core module — config and logging."""

from herald.core.config import (
    DestinationConfig,
    Settings,
    get_settings,
    load_settings,
    reset_settings,
)
from herald.core.logging import destination_context, message_context, setup_logging

__all__ = [
    "DestinationConfig",
    "Settings",
    "destination_context",
    "get_settings",
    "load_settings",
    "message_context",
    "reset_settings",
    "setup_logging",
]
