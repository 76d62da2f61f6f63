"""Tests for the destination factory — wiring logic with various config combinations."""

from __future__ import annotations

from pathlib import Path

import pytest

from herald.core.config import DestinationConfig, HttpConfig, Settings
from herald.destinations.exceptions import DestinationConfigError
from herald.destinations.factory import build_destination, build_registry, create_router
from herald.destinations.file import FileDestination
from herald.destinations.mail import MailDestination
from herald.destinations.webhooks import DiscordDestination, TelegramDestination
from herald.message import Message
from herald.routing.policy import RoutingBehaviour, RoutingInfo


# ── Helpers ─────────────────────────────────────────────────────


def _entry(**kw: object) -> DestinationConfig:
    defaults: dict[str, object] = {"id": "x", "kind": "file", "options": {}}
    defaults.update(kw)
    return DestinationConfig(**defaults)  # type: ignore[arg-type]


# ── build_destination ───────────────────────────────────────────


class TestBuildDestination:
    def test_file(self, tmp_path: Path) -> None:
        dest = build_destination(_entry(options={"path": str(tmp_path / "a.log")}))
        assert isinstance(dest, FileDestination)
        assert dest.path == tmp_path / "a.log"

    def test_discord(self) -> None:
        dest = build_destination(
            _entry(kind="discord", options={"webhook_url": "https://example.com/hook"})
        )
        assert isinstance(dest, DiscordDestination)

    def test_telegram_kind_case_insensitive(self) -> None:
        dest = build_destination(
            _entry(kind="Telegram", options={"bot_token": "t", "chat_id": "1"}),
            HttpConfig(timeout_secs=2),
        )
        assert isinstance(dest, TelegramDestination)

    def test_mail(self) -> None:
        dest = build_destination(
            _entry(
                kind="mail",
                options={"from_address": "a@example.com", "to_addresses": ["b@example.com"]},
            )
        )
        assert isinstance(dest, MailDestination)

    def test_unknown_kind(self) -> None:
        with pytest.raises(DestinationConfigError, match="unknown kind 'pager'"):
            build_destination(_entry(id="p", kind="pager"))

    def test_invalid_options(self) -> None:
        with pytest.raises(DestinationConfigError, match="destination 'tg'"):
            build_destination(_entry(id="tg", kind="telegram", options={"chat_id": "1"}))


# ── build_registry ──────────────────────────────────────────────


class TestBuildRegistry:
    def test_no_destinations(self) -> None:
        registry = build_registry(Settings())
        assert len(registry) == 0

    def test_order_and_routing_preserved(self, tmp_path: Path) -> None:
        settings = Settings(
            destinations=[
                _entry(id="log", routing=RoutingInfo.root(),
                       options={"path": str(tmp_path / "log")}),
                _entry(id="drain", routing=RoutingInfo.of(RoutingBehaviour.DRAIN),
                       options={"path": str(tmp_path / "drain")}),
            ]
        )
        registry = build_registry(settings)
        assert [d.id for d in registry.destinations] == ["log", "drain"]
        assert [d.id for d in registry.roots()] == ["log"]
        assert registry.destinations[1].behaviour is RoutingBehaviour.DRAIN

    def test_disabled_entries_skipped(self, tmp_path: Path) -> None:
        settings = Settings(
            destinations=[
                _entry(id="on", options={"path": str(tmp_path / "on")}),
                _entry(id="off", enabled=False, kind="pager"),
            ]
        )
        registry = build_registry(settings)
        assert [d.id for d in registry.destinations] == ["on"]

    def test_explicit_entries_override_settings(self, tmp_path: Path) -> None:
        entries = [_entry(id="only", options={"path": str(tmp_path / "only")})]
        registry = build_registry(Settings(), entries)
        assert [d.id for d in registry.destinations] == ["only"]


class TestCreateRouter:
    async def test_routes_to_configured_file(self, tmp_path: Path) -> None:
        log = tmp_path / "herald.log"
        settings = Settings(
            destinations=[
                _entry(id="log", routing=RoutingInfo.root(), options={"path": str(log)})
            ]
        )
        router = create_router(settings)
        report = await router.route(Message(title="hello"))
        await router.close()

        assert report.ok
        assert report.successful == 1
        assert "hello" in log.read_text()
