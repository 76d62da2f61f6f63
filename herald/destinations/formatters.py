"""Pure functions that render a Message for each destination kind."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone
from html import escape as html_escape
from typing import Any

from herald import __version__
from herald.message import FormattedDetail, Level, Message, Style, StyledText

DEFAULT_TITLE = "Herald Notification"

# Discord embed colours keyed by level.
_DISCORD_COLORS: dict[Level, int] = {
    Level.INFO: 0x00F4D0,
    Level.SELF_INFO: 0x00A896,
    Level.WARN: 0xFFFF00,
    Level.ERROR: 0xFF0000,
    Level.SELF_ERROR: 0xB30000,
}

_HTML_TAGS: dict[Style, str] = {
    Style.BOLD: "b",
    Style.ITALICS: "i",
    Style.MONOSPACE: "code",
}


def format_timestamp(unix_timestamp_millis: int) -> str:
    """RFC 3339 timestamp in UTC with millisecond precision."""
    dt = datetime.fromtimestamp(unix_timestamp_millis / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds")


def _inline(text: str) -> str:
    return "\\n".join(text.splitlines())


def _join(parts: Iterable[StyledText], render: Callable[[StyledText], str]) -> str:
    return "".join(render(part) for part in parts)


def _html_part(part: StyledText) -> str:
    out = html_escape(part.text, quote=False)
    for style in part.styles:
        tag = _HTML_TAGS[style]
        out = f"<{tag}>{out}</{tag}>"
    return out


def format_detail_html(detail: FormattedDetail) -> str:
    """HTML body for a formatted detail: ``<div><h2>`` per section, ``<p>`` per text block."""
    chunks = []
    for block in detail.blocks:
        body = _join(block.parts, _html_part)
        if block.is_section:
            chunks.append(f"<div><h2>{html_escape(block.title or '')}</h2><p>{body}</p></div>")
        else:
            chunks.append(f"<p>{body}</p>")
    return "".join(chunks)


# ── File ────────────────────────────────────────────────────────


def format_file_line(msg: Message) -> str:
    """One log line: ``<ts> - LEVEL: [component] title - 'detail' @ author``."""
    parts = [f"{format_timestamp(msg.unix_timestamp_millis)} - {msg.level.name}: "]
    if msg.component is not None:
        parts.append(f"[{msg.component}] ")
    if msg.title:
        parts.append(f"{msg.title} - ")
    parts.append(f"'{_inline(msg.raw_detail)}'")
    if msg.author:
        parts.append(f" @ {msg.author}")
    return "".join(parts)


# ── Telegram ────────────────────────────────────────────────────


def _telegram_detail(detail: FormattedDetail) -> str:
    chunks = []
    for block in detail.blocks:
        body = _join(block.parts, _html_part)
        if block.is_section:
            body = f"<b><u>{html_escape(block.title or '')}</u></b>\n{body}"
        chunks.append(body.rstrip("\n"))
    return "\n".join(chunks)


def format_telegram_text(msg: Message) -> str:
    """HTML text for the Bot API ``sendMessage`` call."""
    header = html_escape(msg.level.name)
    if msg.title:
        header += f": <b>{html_escape(msg.title)}</b>"
    if msg.component is not None:
        header += f" <i>[{html_escape(str(msg.component))}]</i>"

    lines = [header]
    if isinstance(msg.detail, FormattedDetail):
        lines.append(_telegram_detail(msg.detail))
    elif msg.detail:
        lines.append(html_escape(msg.detail))
    lines.append("-----")
    lines.append(f"<pre>{format_timestamp(msg.unix_timestamp_millis)}</pre>")
    if msg.author:
        lines.append(f"@ {html_escape(msg.author)}")
    return "\n".join(lines)


# ── Discord ─────────────────────────────────────────────────────


def _discord_part(part: StyledText) -> str:
    out = part.text
    for style in part.styles:
        if style is Style.BOLD:
            out = f"**{out}**"
        elif style is Style.ITALICS:
            out = f"_{out}_"
        elif not out or "\n" in out:
            out = f"```\n{out}\n```"
        else:
            out = f"`{out}`"
    return out


def format_discord_payload(
    msg: Message,
    mentions: Sequence[str] = (),
    username: str | None = None,
) -> dict[str, Any]:
    """Webhook payload with a single colour-coded embed.

    Formatted detail sections become embed fields; untitled blocks are
    joined into the description.
    """
    footer = f"{format_timestamp(msg.unix_timestamp_millis)}"
    if msg.author:
        footer += f" @ {msg.author}"
    footer += f"\nherald v{__version__}"

    embed: dict[str, Any] = {
        "title": msg.title or DEFAULT_TITLE,
        "color": _DISCORD_COLORS.get(msg.level, 0x95A5A6),
        "footer": {"text": footer},
    }
    if isinstance(msg.detail, FormattedDetail):
        texts = []
        fields = []
        for block in msg.detail.blocks:
            body = _join(block.parts, _discord_part).rstrip("\n")
            if block.is_section:
                fields.append({"name": block.title, "value": body, "inline": False})
            else:
                texts.append(body)
        if texts:
            embed["description"] = "\n".join(texts)
        if fields:
            embed["fields"] = fields
    elif msg.detail:
        embed["description"] = msg.detail
    if msg.component is not None:
        embed["author"] = {"name": f"[{msg.component}]"}

    payload: dict[str, Any] = {"embeds": [embed]}
    if mentions:
        payload["content"] = " ".join(mentions)
    if username:
        payload["username"] = username
    return payload


# ── Mail ────────────────────────────────────────────────────────


def format_mail_subject(msg: Message) -> str:
    title = msg.title or DEFAULT_TITLE
    if msg.component is not None:
        return f"[{msg.level.name}] [{msg.component}] {title}"
    return f"[{msg.level.name}] {title}"


def format_mail_body(msg: Message) -> str:
    lines = [
        msg.title or DEFAULT_TITLE,
        "=" * 40,
        f"Level:     {msg.level.name}",
        f"Component: {msg.component if msg.component is not None else '-'}",
        f"Author:    {msg.author or '-'}",
        f"Timestamp: {format_timestamp(msg.unix_timestamp_millis)}",
        "",
        msg.raw_detail,
        "",
        "-- herald",
    ]
    return "\n".join(lines)
