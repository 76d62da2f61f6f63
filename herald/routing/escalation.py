"""Failure escalation — report failed deliveries to the root destinations.

Escalation runs exactly once per routing call: failures collected from
the delivery passes are turned into SELF_ERROR messages and sent to
every root. Failures *while escalating* are recorded, never escalated
again, so a broken root cannot cause a report storm.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from herald.message import Level, Message, make_author
from herald.routing.registry import RoutedDestination
from herald.routing.report import DeliveryFailure, EscalationSummary, ReportedFailure

logger = structlog.get_logger(__name__)

ENGINE_AUTHOR = "herald"


def build_report_message(failure: DeliveryFailure) -> Message:
    """Describe *failure* as a SELF_ERROR message for the root destinations.

    The timestamp is the original message's so reports line up with the
    event that caused them.
    """
    original = failure.message
    detail = (
        f"herald failed to send a message {original!r} to destination id "
        f"'{failure.destination_id}'. Error: '{failure.error_text}'. "
        "A notification has been sent here because this is configured as "
        "a root destination."
    )
    return Message(
        level=Level.SELF_ERROR,
        title=f"Failed to send notification to destination {failure.destination_id}",
        detail=detail,
        component=None,
        author=make_author(ENGINE_AUTHOR),
        unix_timestamp_millis=original.unix_timestamp_millis,
    )


async def _attempt(root: RoutedDestination, report: Message) -> DeliveryFailure | None:
    try:
        await root.send(report)
    except Exception as exc:
        logger.warning(
            "escalation_failed",
            destination=root.id,
            error=str(exc),
            title=report.title,
        )
        return DeliveryFailure(root.id, exc, report)
    return None


async def escalate_one(
    failure: DeliveryFailure,
    roots: Sequence[RoutedDestination],
) -> ReportedFailure:
    if not roots:
        return ReportedFailure(failure, EscalationSummary())

    report = build_report_message(failure)
    outcomes = await asyncio.gather(*(_attempt(root, report) for root in roots))
    failed = tuple(o for o in outcomes if o is not None)
    return ReportedFailure(
        failure,
        EscalationSummary(was_reported=len(failed) < len(roots), failures=failed),
    )


async def escalate(
    failures: Sequence[DeliveryFailure],
    roots: Sequence[RoutedDestination],
) -> list[ReportedFailure]:
    """Report every failure to every root, one level deep."""
    if not roots:
        logger.warning("escalation_no_roots", failures=len(failures))
    return [await escalate_one(failure, roots) for failure in failures]
