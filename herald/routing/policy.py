"""Per-destination routing policy — behaviour plus an optional match condition."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from herald.message import Component, Level, Message


class MessageCondition(BaseModel):
    """A filter over messages. All set criteria must hold.

    The default condition (no component, full level range) matches
    every message.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    component: Component | None = None
    min_level: Level = Level.min()
    max_level: Level = Level.max()

    @field_validator("min_level", "max_level", mode="before")
    @classmethod
    def _parse_level(cls, v: Any) -> Level:
        return Level.parse(v)

    def matches(self, msg: Message) -> bool:
        if self.component is not None:
            if msg.component is None or not msg.component.is_child_of(self.component):
                return False
        return self.min_level <= msg.level <= self.max_level


class RoutingBehaviour(str, Enum):
    """How a destination takes part in routing and escalation.

    ROOT:     always sent matching messages, and always sent reports
              about failed deliveries. Usually a local log file.
    DRAIN:    only sent messages that no non-root destination took.
    ADDITIVE: always sent matching messages; never sent failure reports.
    """

    ROOT = "root"
    DRAIN = "drain"
    ADDITIVE = "additive"

    @classmethod
    def _missing_(cls, value: object) -> RoutingBehaviour | None:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.lower():
                    return member
        return None

    def always_send_messages(self) -> bool:
        return self in (RoutingBehaviour.ROOT, RoutingBehaviour.ADDITIVE)

    def always_receives_errors(self) -> bool:
        return self is RoutingBehaviour.ROOT


class RoutingInfo(BaseModel):
    """Behaviour + optional condition attached to one destination."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    behaviour: RoutingBehaviour = RoutingBehaviour.ADDITIVE
    condition: MessageCondition | None = None

    @classmethod
    def of(
        cls,
        behaviour: RoutingBehaviour,
        condition: MessageCondition | None = None,
    ) -> RoutingInfo:
        return cls(behaviour=behaviour, condition=condition)

    @classmethod
    def root(cls) -> RoutingInfo:
        return cls(behaviour=RoutingBehaviour.ROOT)

    def applies_to(self, msg: Message) -> bool:
        if self.condition is None:
            return True
        return self.condition.matches(msg)
