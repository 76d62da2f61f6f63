"""The Message value object routed to destinations."""

from __future__ import annotations

import time
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from herald.message.component import Component
from herald.message.detail import FormattedDetail
from herald.message.level import Level


def now_millis() -> int:
    return int(time.time() * 1000)


class Message(BaseModel):
    """A single structured notification.

    Immutable: the router only reads it, and escalation derives new
    messages rather than editing the original. ``detail`` is either a
    plain string or a FormattedDetail.
    """

    model_config = ConfigDict(frozen=True)

    level: Level = Level.INFO
    title: str | None = None
    detail: str | FormattedDetail = ""
    component: Component | None = None
    author: str = ""
    unix_timestamp_millis: int = Field(default_factory=now_millis)

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, v: Any) -> Level:
        return Level.parse(v)

    @property
    def has_formatting(self) -> bool:
        return isinstance(self.detail, FormattedDetail)

    @property
    def raw_detail(self) -> str:
        if isinstance(self.detail, FormattedDetail):
            return self.detail.raw
        return self.detail
