"""Routing engine — policies, registry, router, escalation and reports."""

from herald.routing.escalation import build_report_message, escalate
from herald.routing.policy import MessageCondition, RoutingBehaviour, RoutingInfo
from herald.routing.registry import DestinationRegistry, RoutedDestination
from herald.routing.report import (
    DeliveryFailure,
    DeliveryReport,
    EscalationSummary,
    ReportedFailure,
)
from herald.routing.router import MessageRouter

__all__ = [
    "DeliveryFailure",
    "DeliveryReport",
    "DestinationRegistry",
    "EscalationSummary",
    "MessageCondition",
    "MessageRouter",
    "ReportedFailure",
    "RoutedDestination",
    "RoutingBehaviour",
    "RoutingInfo",
    "build_report_message",
    "escalate",
]
