"""HTTP destinations — Discord webhooks and the Telegram Bot API."""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp
import structlog

from herald.core.config import DiscordConfig, HttpConfig, TelegramConfig
from herald.destinations.base import Destination
from herald.destinations.exceptions import DestinationSendError
from herald.destinations.formatters import format_discord_payload, format_telegram_text
from herald.message import Message

logger = structlog.get_logger(__name__)


class _HttpDestination(Destination):
    """Lazily-created aiohttp session shared by all sends of one destination."""

    _name = "http"
    _ok_statuses: tuple[int, ...] = (200,)

    def __init__(self, http: HttpConfig | None = None) -> None:
        self._timeout = aiohttp.ClientTimeout(total=(http or HttpConfig()).timeout_secs)
        self._session: aiohttp.ClientSession | None = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
        return self._session

    async def _post_json(self, url: str, payload: dict[str, Any]) -> None:
        try:
            session = self._get_session()
            async with session.post(url, json=payload) as resp:
                if resp.status in self._ok_statuses:
                    return
                body = await resp.text()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            reason = str(exc) or type(exc).__name__
            raise DestinationSendError(f"{self._name} request failed: {reason}") from exc

        logger.warning(f"{self._name}_send_failed", status=resp.status, body=body[:200])
        raise DestinationSendError(
            f"{self._name} returned HTTP {resp.status}: {body[:200]}",
            status=resp.status,
        )

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None


class DiscordDestination(_HttpDestination):
    """Delivers messages via a Discord webhook with colour-coded embeds.

    ``notify`` entries add mentions to the message content when their
    condition matches the message.
    """

    _name = "discord"
    _ok_statuses = (200, 204)

    def __init__(self, config: DiscordConfig, http: HttpConfig | None = None) -> None:
        super().__init__(http)
        self._webhook_url = config.webhook_url.get_secret_value()
        self._username = config.username
        self._notify = list(config.notify)

    def mentions_for(self, msg: Message) -> list[str]:
        return [entry.notify for entry in self._notify if entry.matches(msg)]

    async def send(self, msg: Message) -> None:
        payload = format_discord_payload(
            msg,
            mentions=self.mentions_for(msg),
            username=self._username,
        )
        await self._post_json(self._webhook_url, payload)


class TelegramDestination(_HttpDestination):
    """Delivers messages via the Telegram Bot API (HTML parse mode)."""

    _name = "telegram"

    def __init__(self, config: TelegramConfig, http: HttpConfig | None = None) -> None:
        super().__init__(http)
        self._token = config.bot_token.get_secret_value()
        self._chat_id = config.chat_id
        self._api_base = config.api_base.rstrip("/")

    @property
    def api_url(self) -> str:
        return f"{self._api_base}/bot{self._token}/sendMessage"

    async def send(self, msg: Message) -> None:
        payload = {
            "chat_id": self._chat_id,
            "text": format_telegram_text(msg),
            "parse_mode": "HTML",
            "disable_notification": False,
        }
        await self._post_json(self.api_url, payload)
