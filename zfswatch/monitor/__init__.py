"""Alert formatting and delivery."""

from zfswatch.monitor.channels import (
    DiscordChannel,
    MailCommandChannel,
    NotificationChannel,
    SendmailChannel,
    SmtpChannel,
    TelegramChannel,
)
from zfswatch.monitor.dispatcher import NotificationDispatcher
from zfswatch.monitor.factory import create_dispatcher
from zfswatch.monitor.formatters import format_body, format_pool_alert, format_subject
from zfswatch.monitor.types import AlertMessage, Severity

__all__ = [
    "AlertMessage",
    "DiscordChannel",
    "MailCommandChannel",
    "NotificationChannel",
    "NotificationDispatcher",
    "SendmailChannel",
    "Severity",
    "SmtpChannel",
    "TelegramChannel",
    "create_dispatcher",
    "format_body",
    "format_pool_alert",
    "format_subject",
]
