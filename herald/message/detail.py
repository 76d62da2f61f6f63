"""Formatted message detail — sections of styled text with a raw fallback."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

RAW_NOT_AVAILABLE = "Raw not available"


class Style(str, Enum):
    BOLD = "bold"
    ITALICS = "italics"
    MONOSPACE = "monospace"


class StyledText(BaseModel):
    """A run of text with zero or more styles applied, innermost first."""

    model_config = ConfigDict(frozen=True)

    text: str
    styles: tuple[Style, ...] = ()

    @classmethod
    def plain(cls, text: str) -> StyledText:
        return cls(text=text)

    @classmethod
    def styled(cls, text: str, *styles: Style) -> StyledText:
        return cls(text=text, styles=styles)


class DetailBlock(BaseModel):
    """A titled section, or an untitled block of text when ``title`` is None."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    parts: tuple[StyledText, ...] = ()

    @property
    def is_section(self) -> bool:
        return self.title is not None

    @property
    def plain_text(self) -> str:
        return "".join(part.text for part in self.parts)


class FormattedDetail(BaseModel):
    """Structured message body.

    Destinations that understand formatting render ``blocks``; the rest
    fall back to ``raw``.
    """

    model_config = ConfigDict(frozen=True)

    raw: str = RAW_NOT_AVAILABLE
    blocks: tuple[DetailBlock, ...] = ()

    @classmethod
    def parse(cls, raw: str) -> FormattedDetail:
        """Split *raw* into sections on ``#<Title>#`` header lines.

        Text before the first header becomes an untitled block. Every
        line keeps its trailing newline.
        """
        blocks: list[DetailBlock] = []
        title: str | None = None
        lines: list[str] = []

        def flush() -> None:
            if title is not None or lines:
                blocks.append(
                    DetailBlock(title=title, parts=(StyledText.plain("".join(lines)),))
                )

        for line in raw.splitlines():
            if len(line) > 4 and line.startswith("#<") and line.endswith(">#"):
                flush()
                title, lines = line[2:-2], []
            else:
                lines.append(line + "\n")
        flush()
        return cls(raw=raw, blocks=tuple(blocks))


class _BlockBuilder:
    def __init__(self, title: str | None) -> None:
        self._title = title
        self._parts: list[StyledText] = []

    def append(self, part: StyledText) -> _BlockBuilder:
        self._parts.append(part)
        return self

    def append_plain(self, text: str) -> _BlockBuilder:
        return self.append(StyledText.plain(text))

    def append_styled(self, text: str, *styles: Style) -> _BlockBuilder:
        return self.append(StyledText.styled(text, *styles))

    def build(self) -> DetailBlock:
        return DetailBlock(title=self._title, parts=tuple(self._parts))


class DetailBuilder:
    """Assembles a FormattedDetail block by block.

    Example::

        builder = DetailBuilder()
        builder.text().append_plain("Nightly backup finished late.")
        builder.section("Timing").append_styled("3h12m", Style.BOLD)
        detail = builder.build()

    Without an explicit ``raw``, the raw fallback is derived from the
    blocks as plain text.
    """

    def __init__(self, raw: str | None = None) -> None:
        self._raw = raw
        self._blocks: list[_BlockBuilder] = []

    def raw(self, raw: str) -> DetailBuilder:
        self._raw = raw
        return self

    def section(self, title: str) -> _BlockBuilder:
        block = _BlockBuilder(title)
        self._blocks.append(block)
        return block

    def text(self) -> _BlockBuilder:
        block = _BlockBuilder(None)
        self._blocks.append(block)
        return block

    def build(self) -> FormattedDetail:
        blocks = tuple(b.build() for b in self._blocks)
        raw = self._raw if self._raw is not None else _plain_rendering(blocks)
        return FormattedDetail(raw=raw, blocks=blocks)


def _plain_rendering(blocks: tuple[DetailBlock, ...]) -> str:
    chunks = []
    for block in blocks:
        body = block.plain_text.rstrip("\n")
        chunks.append(f"{block.title}:\n{body}" if block.is_section else body)
    return "\n\n".join(chunks) if chunks else RAW_NOT_AVAILABLE
