"""Destination registry — the ordered set of (id, destination, routing) entries."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from herald.core.logging import destination_context
from herald.message import Message
from herald.routing.policy import RoutingBehaviour, RoutingInfo

if TYPE_CHECKING:
    from herald.destinations.base import Destination

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RoutedDestination:
    """A destination plus the id and routing policy it was configured with.

    The id is only used in diagnostics; duplicates are allowed but make
    delivery reports ambiguous.
    """

    id: str
    destination: Destination
    routing: RoutingInfo = field(default_factory=RoutingInfo)

    @property
    def behaviour(self) -> RoutingBehaviour:
        return self.routing.behaviour

    @property
    def is_root(self) -> bool:
        return self.routing.behaviour.always_receives_errors()

    def should_receive(self, msg: Message) -> bool:
        return self.routing.applies_to(msg)

    async def send(self, msg: Message) -> None:
        with destination_context(self.id):
            await self.destination.send(msg)


class DestinationRegistry:
    """Ordered, read-only-while-routing list of routed destinations.

    Order only affects how reports are presented; every eligible
    destination is attempted regardless of its position.
    """

    def __init__(self, destinations: Iterable[RoutedDestination] = ()) -> None:
        self._destinations: list[RoutedDestination] = list(destinations)

    def add(
        self,
        id: str,
        destination: Destination,
        routing: RoutingInfo | None = None,
    ) -> RoutedDestination:
        entry = RoutedDestination(id, destination, routing or RoutingInfo())
        self._destinations.append(entry)
        return entry

    @property
    def destinations(self) -> tuple[RoutedDestination, ...]:
        return tuple(self._destinations)

    def roots(self) -> list[RoutedDestination]:
        """Every ROOT entry, whatever its condition."""
        return [d for d in self._destinations if d.is_root]

    async def close(self) -> None:
        for entry in self._destinations:
            try:
                await entry.destination.close()
            except Exception:
                logger.exception("destination_close_error", destination=entry.id)

    def __iter__(self) -> Iterator[RoutedDestination]:
        return iter(self._destinations)

    def __len__(self) -> int:
        return len(self._destinations)
