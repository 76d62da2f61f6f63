"""Hierarchical topic tags (``database/backup``) used to scope routing."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


def _split(path: str) -> tuple[str, ...]:
    return tuple(part for part in path.split("/") if part)


class Component(BaseModel):
    """An immutable path of non-empty segments.

    Accepts a plain string anywhere a Component is expected, so config
    files can write ``component: database/backup``.
    """

    model_config = ConfigDict(frozen=True)

    parts: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _coerce_str(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"parts": _split(data)}
        return data

    @field_validator("parts", mode="before")
    @classmethod
    def _drop_empty(cls, v: Any) -> Any:
        if isinstance(v, str):
            return _split(v)
        if isinstance(v, (list, tuple)):
            return tuple(part for part in v if part)
        return v

    @classmethod
    def parse(cls, path: str) -> Component:
        return cls(parts=_split(path))

    def is_child_of(self, parent: Component) -> bool:
        """True if *parent*'s segments are a prefix of this component's.

        Reflexive, and whole segments only: ``ab`` is not a child of ``a``.
        """
        depth = len(parent.parts)
        if depth > len(self.parts):
            return False
        return self.parts[:depth] == parent.parts

    def __str__(self) -> str:
        return "/".join(self.parts)
