"""Delivery reports — what got through, what failed, and whether failures were escalated."""

from __future__ import annotations

from dataclasses import dataclass, field

from herald.message import Message


def error_text(error: BaseException) -> str:
    text = str(error)
    return f"{type(error).__name__}: {text}" if text else type(error).__name__


@dataclass(frozen=True)
class DeliveryFailure:
    """One failed send: which destination, why, and what was being sent."""

    destination_id: str
    error: BaseException
    message: Message

    @property
    def error_text(self) -> str:
        return error_text(self.error)


@dataclass(frozen=True)
class EscalationSummary:
    """Outcome of reporting one failure to the root destinations.

    ``was_reported`` with no failures and no roots attempted is the
    "nowhere to report" case; ``failures`` non-empty means the
    escalation channel itself is (partly) broken.
    """

    was_reported: bool = False
    failures: tuple[DeliveryFailure, ...] = ()

    @property
    def nowhere_to_report(self) -> bool:
        return not self.was_reported and not self.failures


@dataclass(frozen=True)
class ReportedFailure:
    failure: DeliveryFailure
    escalation: EscalationSummary = field(default_factory=EscalationSummary)

    @property
    def destination_id(self) -> str:
        return self.failure.destination_id

    @property
    def error(self) -> BaseException:
        return self.failure.error

    @property
    def message(self) -> Message:
        return self.failure.message

    @property
    def was_reported(self) -> bool:
        return self.escalation.was_reported

    @property
    def escalation_failures(self) -> tuple[DeliveryFailure, ...]:
        return self.escalation.failures


@dataclass(frozen=True)
class DeliveryReport:
    """Result of routing one message."""

    message: Message
    successful: int = 0
    failures: tuple[ReportedFailure, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def unrouted(self) -> bool:
        """No destination was even attempted."""
        return self.successful == 0 and not self.failures

    def render(self) -> str:
        lines = [
            "-----",
            "Summary:",
            f"Successfully sent to {self.successful} destinations",
            f"Failed to send to {len(self.failures)} destinations",
            f"Message: {self.message!r}",
        ]
        for reported in self.failures:
            lines.append("--")
            lines.append(
                f"Failed to send a message to destination '{reported.destination_id}'"
            )
            lines.append(f"Due to error: {reported.failure.error_text}")

            if reported.was_reported:
                lines.append("This was reported to at least one root destination.")
            elif reported.escalation.nowhere_to_report:
                lines.append("No root destinations were configured to report this error to.")
            else:
                lines.append("This could not be reported to any root destination.")

            if reported.escalation_failures:
                lines.append(
                    f"Reporting failed at {len(reported.escalation_failures)} "
                    "root destination(s):"
                )
                for esc in reported.escalation_failures:
                    lines.append(
                        f"   - '{esc.destination_id}': {esc.error_text} ; "
                        f"tried to send: {esc.message.title!r}"
                    )
        lines.append("-----")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()
