"""Tests for destinations — file writes, HTTP mocking, SMTP mocking, memory queue."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest
from pydantic import SecretStr

from herald.core.config import (
    DiscordConfig,
    DiscordNotifyEntry,
    FileConfig,
    MailConfig,
    TelegramConfig,
)
from herald.destinations.exceptions import DestinationSendError
from herald.destinations.file import FileDestination
from herald.destinations.mail import MailDestination
from herald.destinations.memory import MemoryDestination
from herald.destinations.webhooks import DiscordDestination, TelegramDestination
from herald.message import DetailBuilder, Level, Message, Style


# ── Helpers ─────────────────────────────────────────────────────


def _msg(**kw: object) -> Message:
    defaults: dict[str, object] = {
        "level": Level.INFO,
        "title": "TEST_TITLE",
        "detail": "test body",
        "author": "host/test",
        "unix_timestamp_millis": 1_000,
    }
    defaults.update(kw)
    return Message(**defaults)  # type: ignore[arg-type]


def _tg_config(**kw: object) -> TelegramConfig:
    defaults: dict[str, object] = {
        "bot_token": SecretStr("fake-token"),
        "chat_id": "12345",
    }
    defaults.update(kw)
    return TelegramConfig(**defaults)  # type: ignore[arg-type]


def _dc_config(**kw: object) -> DiscordConfig:
    defaults: dict[str, object] = {
        "webhook_url": SecretStr("https://discord.com/api/webhooks/fake"),
    }
    defaults.update(kw)
    return DiscordConfig(**defaults)  # type: ignore[arg-type]


def _mock_response(status: int = 200, text: str = "ok") -> AsyncMock:
    resp = AsyncMock()
    resp.status = status
    resp.text = AsyncMock(return_value=text)
    resp.__aenter__ = AsyncMock(return_value=resp)
    resp.__aexit__ = AsyncMock(return_value=False)
    return resp


def _mock_session(resp: AsyncMock | None = None, **post_kw: object) -> MagicMock:
    session = MagicMock()
    if resp is not None:
        session.post = MagicMock(return_value=resp)
    else:
        session.post = MagicMock(**post_kw)
    session.closed = False
    return session


# ── FileDestination ─────────────────────────────────────────────


class TestFileDestination:
    async def test_appends_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "logs" / "herald.log"
        dest = FileDestination(FileConfig(path=path))

        await dest.send(_msg(title="one"))
        await dest.send(_msg(title="two"))

        lines = path.read_text().splitlines()
        assert len(lines) == 2
        assert "one" in lines[0]
        assert "two" in lines[1]

    async def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "c.log"
        await FileDestination(FileConfig(path=path)).send(_msg())
        assert path.exists()

    async def test_unwritable_path_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("not a dir")
        dest = FileDestination(FileConfig(path=blocker / "herald.log"))
        with pytest.raises(DestinationSendError):
            await dest.send(_msg())

    def test_expands_home(self) -> None:
        dest = FileDestination(FileConfig(path=Path("~/x.log")))
        assert "~" not in str(dest.path)


# ── TelegramDestination ─────────────────────────────────────────


class TestTelegramDestination:
    async def test_send_success(self) -> None:
        dest = TelegramDestination(_tg_config())
        session = _mock_session(_mock_response(200))
        dest._session = session

        await dest.send(_msg())
        session.post.assert_called_once()
        url = session.post.call_args[0][0]
        assert url == "https://api.telegram.org/botfake-token/sendMessage"
        payload = session.post.call_args[1]["json"]
        assert payload["chat_id"] == "12345"
        assert payload["parse_mode"] == "HTML"
        assert "TEST_TITLE" in payload["text"]

    async def test_send_failure_status(self) -> None:
        dest = TelegramDestination(_tg_config())
        dest._session = _mock_session(_mock_response(400, "bad request"))

        with pytest.raises(DestinationSendError, match="HTTP 400") as exc_info:
            await dest.send(_msg())
        assert exc_info.value.status == 400

    async def test_client_error_wrapped(self) -> None:
        dest = TelegramDestination(_tg_config())
        dest._session = _mock_session(side_effect=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(DestinationSendError, match="refused"):
            await dest.send(_msg())

    async def test_close_session(self) -> None:
        dest = TelegramDestination(_tg_config())
        session = AsyncMock()
        session.closed = False
        dest._session = session

        await dest.close()
        session.close.assert_awaited_once()

    async def test_close_when_no_session(self) -> None:
        await TelegramDestination(_tg_config()).close()  # should not raise

    async def test_lazy_session_creation(self) -> None:
        dest = TelegramDestination(_tg_config())
        assert dest._session is None
        assert dest._get_session() is not None
        await dest.close()


# ── DiscordDestination ──────────────────────────────────────────


class TestDiscordDestination:
    async def test_send_success_204(self) -> None:
        dest = DiscordDestination(_dc_config())
        session = _mock_session(_mock_response(204))
        dest._session = session

        await dest.send(_msg(level=Level.ERROR))
        url = session.post.call_args[0][0]
        assert url == "https://discord.com/api/webhooks/fake"
        payload = session.post.call_args[1]["json"]
        assert payload["embeds"][0]["color"] == 0xFF0000

    async def test_send_failure_status(self) -> None:
        dest = DiscordDestination(_dc_config())
        dest._session = _mock_session(_mock_response(500, "oops"))

        with pytest.raises(DestinationSendError, match="discord returned HTTP 500"):
            await dest.send(_msg())

    async def test_timeout_wrapped(self) -> None:
        dest = DiscordDestination(_dc_config())
        dest._session = _mock_session(side_effect=asyncio.TimeoutError())

        with pytest.raises(
            DestinationSendError, match="discord request failed: TimeoutError"
        ) as exc_info:
            await dest.send(_msg())
        assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)

    async def test_notify_mentions(self) -> None:
        config = _dc_config(
            notify=[
                DiscordNotifyEntry(notify="<@&1>", min_level=Level.ERROR),
                DiscordNotifyEntry(notify="<@&2>", component="db"),
            ]
        )
        dest = DiscordDestination(config)
        assert dest.mentions_for(_msg(level=Level.INFO)) == []
        assert dest.mentions_for(_msg(level=Level.ERROR)) == ["<@&1>"]
        assert dest.mentions_for(_msg(level=Level.ERROR, component="db/x")) == [
            "<@&1>",
            "<@&2>",
        ]

        session = _mock_session(_mock_response(200))
        dest._session = session
        await dest.send(_msg(level=Level.ERROR))
        assert session.post.call_args[1]["json"]["content"] == "<@&1>"


# ── MailDestination ─────────────────────────────────────────────


def _mail_config(**kw: object) -> MailConfig:
    defaults: dict[str, object] = {
        "smtp_host": "smtp.example.com",
        "from_address": "herald@example.com",
        "to_addresses": ["ops@example.com", "dev@example.com"],
    }
    defaults.update(kw)
    return MailConfig(**defaults)  # type: ignore[arg-type]


class TestMailDestination:
    def test_build_mail(self) -> None:
        mail = MailDestination(_mail_config()).build_mail(_msg())
        assert mail["Subject"] == "[INFO] TEST_TITLE"
        assert mail["To"] == "ops@example.com, dev@example.com"

    def test_formatted_detail_adds_html_alternative(self) -> None:
        builder = DetailBuilder()
        builder.section("Timing").append_styled("3h", Style.BOLD)
        mail = MailDestination(_mail_config()).build_mail(_msg(detail=builder.build()))

        assert mail.get_content_type() == "multipart/alternative"
        plain, html = mail.get_payload()
        assert plain.get_content_type() == "text/plain"
        assert "Timing:\n3h" in plain.get_payload(decode=True).decode()
        assert html.get_content_type() == "text/html"
        assert "<h2>Timing</h2><p><b>3h</b></p>" in html.get_payload(decode=True).decode()

    def test_plain_detail_stays_single_part(self) -> None:
        mail = MailDestination(_mail_config()).build_mail(_msg())
        assert mail.get_content_type() == "text/plain"

    async def test_send_uses_starttls_and_login(self) -> None:
        dest = MailDestination(
            _mail_config(smtp_user="u", smtp_password=SecretStr("p"))
        )
        with patch("herald.destinations.mail.smtplib.SMTP") as smtp_cls:
            await dest.send(_msg())

        smtp = smtp_cls.return_value
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("u", "p")
        args = smtp.sendmail.call_args[0]
        assert args[0] == "herald@example.com"
        assert args[1] == ["ops@example.com", "dev@example.com"]
        smtp.quit.assert_called_once()

    async def test_smtp_error_wrapped(self) -> None:
        import smtplib

        dest = MailDestination(_mail_config())
        with patch("herald.destinations.mail.smtplib.SMTP") as smtp_cls:
            smtp_cls.return_value.sendmail.side_effect = smtplib.SMTPRecipientsRefused({})
            with pytest.raises(DestinationSendError, match="smtp delivery failed"):
                await dest.send(_msg())
            smtp_cls.return_value.quit.assert_called_once()


# ── MemoryDestination ───────────────────────────────────────────


class TestMemoryDestination:
    async def test_collects_and_queues(self) -> None:
        dest = MemoryDestination()
        msg = _msg()
        await dest.send(msg)
        assert dest.received == [msg]
        assert await dest.queue.get() == msg

    async def test_full_queue_fails_send(self) -> None:
        dest = MemoryDestination(maxsize=1)
        await dest.send(_msg())
        with pytest.raises(DestinationSendError, match="queue full"):
            await dest.send(_msg())
        assert len(dest.received) == 1
