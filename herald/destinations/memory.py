"""In-process destination — hands messages to the embedding program."""

from __future__ import annotations

import asyncio

from herald.destinations.base import Destination
from herald.destinations.exceptions import DestinationSendError
from herald.message import Message


class MemoryDestination(Destination):
    """Collects every message it is sent.

    Messages are kept in ``received`` and also put on ``queue`` for
    consumers that want to await them. A full bounded queue fails the
    send rather than blocking the router.
    """

    def __init__(self, maxsize: int = 0) -> None:
        self.received: list[Message] = []
        self.queue: asyncio.Queue[Message] = asyncio.Queue(maxsize=maxsize)

    async def send(self, msg: Message) -> None:
        try:
            self.queue.put_nowait(msg)
        except asyncio.QueueFull:
            raise DestinationSendError(
                f"memory queue full ({self.queue.maxsize} messages)"
            ) from None
        self.received.append(msg)
