"""Severity levels for messages."""

from __future__ import annotations

import re
from enum import IntEnum

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z])(?=[A-Z])")


class Level(IntEnum):
    """Message severity. Each value is the level's priority.

    Ordering follows these values, not declaration order.
    ``SELF_*`` levels are produced by herald itself.
    """

    INFO = 1
    SELF_INFO = 2
    WARN = 3
    ERROR = 4
    SELF_ERROR = 5

    @property
    def priority(self) -> int:
        return int(self)

    @classmethod
    def min(cls) -> Level:
        return cls.INFO

    @classmethod
    def max(cls) -> Level:
        return cls.SELF_ERROR

    @classmethod
    def parse(cls, value: object) -> Level:
        """Coerce a level name or priority into a Level.

        Accepts ``"warn"``, ``"WARN"``, ``"SelfError"``, ``"self_error"``
        and plain priorities.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = _CAMEL_BOUNDARY.sub("_", value.strip()).replace("-", "_").upper()
            try:
                return cls[key]
            except KeyError:
                raise ValueError(f"Unknown level: {value!r}") from None
        return cls(value)  # type: ignore[arg-type]

    def __str__(self) -> str:
        return self.name
