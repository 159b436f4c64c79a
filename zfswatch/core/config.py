"""Pydantic settings loaded from YAML configuration."""

from __future__ import annotations

import socket
import tempfile
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

DEFAULT_CONFIG_PATH = Path("/etc/zfswatch.yaml")


class ConfigError(Exception):
    """The configuration file could not be read or failed validation."""


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)


class SmtpConfig(_Section):
    """SMTP relay used by the ``smtp`` transport."""

    host: str = "localhost"
    port: int = 25
    use_tls: bool = False
    username: str = ""
    password: SecretStr = SecretStr("")


class TelegramConfig(_Section):
    """Telegram Bot API delivery."""

    enabled: bool = False
    bot_token: SecretStr = SecretStr("")
    chat_id: str = ""


class DiscordConfig(_Section):
    """Discord webhook delivery."""

    enabled: bool = False
    webhook_url: SecretStr = SecretStr("")


class AlertsConfig(_Section):
    """Who gets told, and how."""

    recipient: str = "root"
    sender: str | None = None
    subject_prefix: str = "ZFS alert"
    preamble: str = "The zfs-watch script has detected a potential problem:"
    # auto: sendmail on Linux, mail(1) on FreeBSD/macOS
    transport: Literal["auto", "sendmail", "mail", "smtp", "none"] = "auto"
    sendmail_path: str = "/usr/sbin/sendmail"
    mail_path: str = "/usr/bin/mail"
    send_timeout_secs: float = Field(default=30.0, gt=0)
    smtp: SmtpConfig = SmtpConfig()
    telegram: TelegramConfig = TelegramConfig()
    discord: DiscordConfig = DiscordConfig()

    @property
    def from_address(self) -> str:
        return self.sender or self.recipient


class DebounceConfig(_Section):
    """Per-pool alert debouncing."""

    # 21600 = 6 hours, 43200 = 12 hours
    window_secs: int = Field(default=21600, ge=0)
    state_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))
    record_failed_sends: bool = False


class PoolsConfig(_Section):
    """Pool query settings."""

    expected_health: str = "ONLINE"
    zpool_path: str | None = None
    command_timeout_secs: float = Field(default=30.0, gt=0)


class LoggingConfig(_Section):
    """Logging configuration."""

    level: str = "INFO"
    format: Literal["console", "json"] = "console"


class Settings(_Section):
    """Root settings container. Built once per invocation and passed explicitly."""

    alerts: AlertsConfig = AlertsConfig()
    debounce: DebounceConfig = DebounceConfig()
    pools: PoolsConfig = PoolsConfig()
    logging: LoggingConfig = LoggingConfig()
    require_root: bool = True
    hostname: str = Field(default_factory=socket.getfqdn)


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from a YAML file.

    A missing file yields the defaults; an unreadable or invalid one raises
    ConfigError.

    Args:
        path: Path to YAML config. Defaults to /etc/zfswatch.yaml.

    Returns:
        Parsed Settings instance.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH

    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path) as f:
                raw = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError(f"cannot read {config_path}: {exc}") from exc
        if isinstance(raw, dict):
            data = raw
        elif raw is not None:
            raise ConfigError(f"{config_path} must contain a mapping")

    try:
        return Settings(**data)
    except ValidationError as exc:
        raise ConfigError(f"invalid configuration in {config_path}: {exc}") from exc
