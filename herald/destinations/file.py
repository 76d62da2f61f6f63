"""Local file destination — appends one line per message.

Rarely fails, which makes it the usual ROOT destination.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import structlog

from herald.core.config import FileConfig
from herald.destinations.base import Destination
from herald.destinations.exceptions import DestinationSendError
from herald.destinations.formatters import format_file_line
from herald.message import Message

logger = structlog.get_logger(__name__)


class FileDestination(Destination):
    """Appends formatted messages to a log file, creating parent dirs."""

    def __init__(self, config: FileConfig | None = None) -> None:
        self._path = Path((config or FileConfig()).path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def _append(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    async def send(self, msg: Message) -> None:
        line = format_file_line(msg)
        try:
            await asyncio.to_thread(self._append, line)
        except OSError as exc:
            raise DestinationSendError(f"could not write to {self._path}: {exc}") from exc
        logger.debug("file_written", path=str(self._path))
