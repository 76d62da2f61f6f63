"""Message router — picks destinations for a message, delivers, escalates failures."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass

import structlog

from herald.core.logging import message_context
from herald.message import Message
from herald.routing.escalation import escalate
from herald.routing.policy import RoutingBehaviour
from herald.routing.registry import DestinationRegistry, RoutedDestination
from herald.routing.report import DeliveryFailure, DeliveryReport

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class _Outcome:
    destination: RoutedDestination
    failure: DeliveryFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class MessageRouter:
    """Routes messages to a registry of destinations.

    - ROOT and ADDITIVE destinations whose condition matches are sent
      every message (primary pass).
    - DRAIN destinations whose condition matches are sent the message
      only if no non-root destination accepted it (fallback pass).
    - Every failure is reported once to all ROOT destinations.

    Sends within a pass run concurrently; a pass is fully settled before
    the next decision is taken. ``route`` never raises for delivery
    failures; they come back in the DeliveryReport.
    """

    def __init__(self, registry: DestinationRegistry | None = None) -> None:
        self._registry = registry if registry is not None else DestinationRegistry()

    @property
    def registry(self) -> DestinationRegistry:
        return self._registry

    async def route(self, msg: Message) -> DeliveryReport:
        with message_context(msg):
            return await self._route(msg)

    async def close(self) -> None:
        await self._registry.close()

    # ── Internal ────────────────────────────────────────────────

    async def _route(self, msg: Message) -> DeliveryReport:
        primary = [
            d
            for d in self._registry
            if d.behaviour.always_send_messages() and d.should_receive(msg)
        ]
        outcomes = await self._send_all(primary, msg)
        reached_non_root = any(o.ok and not o.destination.is_root for o in outcomes)

        if not reached_non_root:
            drains = [
                d
                for d in self._registry
                if d.behaviour is RoutingBehaviour.DRAIN and d.should_receive(msg)
            ]
            if drains:
                logger.debug("routing_to_drains", drains=[d.id for d in drains])
            outcomes += await self._send_all(drains, msg)

        successful = sum(1 for o in outcomes if o.ok)
        failures = [o.failure for o in outcomes if o.failure is not None]

        if not outcomes:
            logger.warning("message_unrouted")
        else:
            logger.info("message_routed", successful=successful, failed=len(failures))

        if not failures:
            return DeliveryReport(message=msg, successful=successful)

        reported = await escalate(failures, self._registry.roots())
        return DeliveryReport(
            message=msg,
            successful=successful,
            failures=tuple(reported),
        )

    @staticmethod
    async def _send_one(dest: RoutedDestination, msg: Message) -> _Outcome:
        try:
            await dest.send(msg)
        except Exception as exc:
            logger.warning(
                "delivery_failed",
                destination=dest.id,
                error=str(exc),
            )
            return _Outcome(dest, DeliveryFailure(dest.id, exc, msg))
        return _Outcome(dest)

    async def _send_all(
        self,
        destinations: Iterable[RoutedDestination],
        msg: Message,
    ) -> list[_Outcome]:
        return list(
            await asyncio.gather(*(self._send_one(d, msg) for d in destinations))
        )
