"""Exception hierarchy for destinations."""

from __future__ import annotations


class DestinationError(Exception):
    """Base exception for all destination errors."""


class DestinationSendError(DestinationError):
    """A destination failed to deliver a message (HTTP/SMTP/file)."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class DestinationConfigError(DestinationError):
    """A destination entry in the configuration could not be built."""
