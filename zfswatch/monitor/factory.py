"""Convenience factory for wiring the alerting stack."""

from __future__ import annotations

from zfswatch.core.config import AlertsConfig
from zfswatch.monitor.channels import (
    DiscordChannel,
    MailCommandChannel,
    NotificationChannel,
    SendmailChannel,
    SmtpChannel,
    TelegramChannel,
)
from zfswatch.monitor.dispatcher import NotificationDispatcher
from zfswatch.pools.platform import PlatformProfile


def create_dispatcher(
    config: AlertsConfig,
    platform: PlatformProfile | None = None,
) -> NotificationDispatcher:
    """Build a dispatcher from config.

    ``transport: auto`` picks the platform's local mail program: sendmail on
    Linux, mail(1) on FreeBSD and macOS (sendmail if the platform is unknown).
    Telegram and Discord are added on top when enabled.
    """
    channels: list[NotificationChannel] = []
    timeout = config.send_timeout_secs

    transport = config.transport
    if transport == "auto":
        transport = platform.mail_transport if platform is not None else "sendmail"

    if transport == "sendmail":
        channels.append(SendmailChannel(config.sendmail_path, timeout))
    elif transport == "mail":
        channels.append(MailCommandChannel(config.mail_path, timeout))
    elif transport == "smtp":
        channels.append(SmtpChannel(config.smtp, timeout))

    if config.telegram.enabled:
        channels.append(TelegramChannel(config.telegram, timeout))

    if config.discord.enabled:
        channels.append(DiscordChannel(config.discord, timeout))

    return NotificationDispatcher(channels=channels)
