"""Base class for message destinations."""

from __future__ import annotations

import abc

from herald.message import Message


class Destination(abc.ABC):
    """Something a message can be delivered to.

    ``send`` returns normally on success and raises on failure; any
    exception counts as a failed delivery. Destinations hold no routing
    state; routing is attached by the registry.
    """

    @abc.abstractmethod
    async def send(self, msg: Message) -> None:
        """Deliver *msg*, raising on failure."""

    async def close(self) -> None:
        """Release resources (HTTP sessions, etc.)."""
