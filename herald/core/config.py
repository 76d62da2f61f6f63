"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, SecretStr

from herald.routing.policy import MessageCondition, RoutingInfo

_settings: Settings | None = None

CONFIG_ENV_VAR = "HERALD_CONFIG"

# Searched in order when no path is given.
_CONFIG_SEARCH_PATHS = (
    Path("config/herald.yaml"),
    Path.home() / ".herald" / "herald.yaml",
)

DEFAULT_LOG_PATH = Path.home() / ".herald" / "herald.log"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"


class HttpConfig(BaseModel):
    """Shared settings for HTTP-backed destinations."""

    timeout_secs: float = 10.0


class FileConfig(BaseModel):
    """Append-only log file destination."""

    path: Path = DEFAULT_LOG_PATH


class DiscordNotifyEntry(MessageCondition):
    """Mention *notify* (e.g. ``<@&123>``) when the condition matches."""

    notify: str


class DiscordConfig(BaseModel):
    """Discord webhook destination."""

    webhook_url: SecretStr
    username: str | None = None
    notify: list[DiscordNotifyEntry] = []


class TelegramConfig(BaseModel):
    """Telegram Bot API destination."""

    bot_token: SecretStr
    chat_id: str
    api_base: str = "https://api.telegram.org"


class MailConfig(BaseModel):
    """SMTP mail destination."""

    smtp_host: str = "localhost"
    smtp_port: int = 587
    use_tls: bool = True
    use_ssl: bool = False
    smtp_user: str | None = None
    smtp_password: SecretStr | None = None
    from_address: str
    to_addresses: list[str]
    timeout_secs: float = 30.0


class DestinationConfig(BaseModel):
    """One configured destination.

    ``options`` are validated against the config model of ``kind`` when
    the registry is built. Unknown keys are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    id: str
    kind: str
    enabled: bool = True
    routing: RoutingInfo = RoutingInfo()
    options: dict[str, Any] = {}


class Settings(BaseModel):
    """Root settings container."""

    destinations: list[DestinationConfig] = []
    http: HttpConfig = HttpConfig()
    logging: LoggingConfig = LoggingConfig()


def default_destinations() -> list[DestinationConfig]:
    """A single root log file, used when no destinations are configured."""
    return [
        DestinationConfig(
            id="log",
            kind="file",
            routing=RoutingInfo.root(),
            options={"path": str(DEFAULT_LOG_PATH)},
        )
    ]


def find_config_file(path: str | Path | None = None) -> Path | None:
    """Resolve which YAML file to read.

    An explicit *path* wins, then $HERALD_CONFIG, then the first existing
    entry of ``config/herald.yaml`` and ``~/.herald/herald.yaml``. An
    explicit path or env value is returned even if it does not exist.
    """
    if path:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    for candidate in _CONFIG_SEARCH_PATHS:
        if candidate.exists():
            return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML and cache them globally.

    A missing file yields default settings. See ``find_config_file`` for
    how the file is chosen.
    """
    global _settings  # noqa: PLW0603

    config_path = find_config_file(path)

    data: dict[str, Any] = {}
    if config_path is not None and config_path.is_file():
        with open(config_path) as f:
            raw = yaml.safe_load(f)
        if isinstance(raw, dict):
            data = raw

    _settings = Settings(**data)
    return _settings


def get_settings() -> Settings:
    """Return the cached settings, loading defaults if not yet loaded."""
    global _settings  # noqa: PLW0603
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Reset the cached settings (useful for testing)."""
    global _settings  # noqa: PLW0603
    _settings = None
