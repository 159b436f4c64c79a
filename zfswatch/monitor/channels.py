"""Notification channels — local mail, SMTP, Telegram and Discord delivery."""

from __future__ import annotations

import abc
import smtplib
import subprocess
from collections.abc import Callable
from datetime import datetime, timezone
from email.message import EmailMessage
from html import escape as html_escape

import httpx
import structlog

from zfswatch.core.config import DiscordConfig, SmtpConfig, TelegramConfig
from zfswatch.monitor.types import AlertMessage, Severity

logger = structlog.stdlib.get_logger()

Runner = Callable[..., subprocess.CompletedProcess[str]]

# Discord embed colours keyed by severity.
_DISCORD_COLORS: dict[Severity, int] = {
    Severity.WARNING: 0xF39C12,  # orange
    Severity.CRITICAL: 0xE74C3C, # red
}

# Telegram rejects messages longer than this.
_TELEGRAM_MAX_CHARS = 4096


def _escape_truncated(text: str, limit: int) -> str:
    """HTML-escape ``text``, cutting the raw text so the result fits ``limit``.

    Cutting before escaping keeps every entity whole; a dangling ``&amp``
    fails Telegram's HTML parser.
    """
    escaped = html_escape(text)
    if len(escaped) <= limit:
        return escaped
    pieces: list[str] = []
    used = 0
    for ch in text:
        piece = html_escape(ch)
        if used + len(piece) > limit - 1:
            break
        pieces.append(piece)
        used += len(piece)
    return "".join(pieces) + "…"


def build_email(msg: AlertMessage) -> EmailMessage:
    """RFC 5322 message for the mail-based channels."""
    email = EmailMessage()
    email["From"] = msg.sender
    email["To"] = msg.recipient
    email["Subject"] = msg.subject
    email.set_content(msg.body)
    return email


class NotificationChannel(abc.ABC):
    """Base class for alert delivery channels."""

    name: str = "channel"

    @abc.abstractmethod
    def send(self, msg: AlertMessage) -> bool:
        """Send an alert message. Returns True on success."""

    def close(self) -> None:
        """Release resources (HTTP clients, etc.)."""


class _CommandChannel(NotificationChannel):
    """Pipes a message into a local mail program."""

    def __init__(self, path: str, timeout_secs: float, runner: Runner = subprocess.run) -> None:
        self._path = path
        self._timeout = timeout_secs
        self._run = runner

    @abc.abstractmethod
    def _command(self, msg: AlertMessage) -> tuple[list[str], str]:
        """Return (argv, stdin) for the message."""

    def send(self, msg: AlertMessage) -> bool:
        cmd, stdin = self._command(msg)
        try:
            proc = self._run(
                cmd,
                input=stdin,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning("mail_send_timeout", channel=self.name, timeout=self._timeout)
            return False
        except OSError:
            logger.exception("mail_send_error", channel=self.name, command=self._path)
            return False

        if proc.returncode != 0:
            logger.warning(
                "mail_send_failed",
                channel=self.name,
                returncode=proc.returncode,
                stderr=(proc.stderr or "")[:200],
            )
            return False
        return True


class SendmailChannel(_CommandChannel):
    """``sendmail <recipient>`` with the headers in the message (Linux)."""

    name = "sendmail"

    def _command(self, msg: AlertMessage) -> tuple[list[str], str]:
        return [self._path, msg.recipient], build_email(msg).as_string()


class MailCommandChannel(_CommandChannel):
    """``mail -s <subject> <recipient>`` (FreeBSD, macOS)."""

    name = "mail"

    def _command(self, msg: AlertMessage) -> tuple[list[str], str]:
        return [self._path, "-s", msg.subject, msg.recipient], msg.body


class SmtpChannel(NotificationChannel):
    """Delivers through an SMTP relay."""

    name = "smtp"

    def __init__(self, config: SmtpConfig, timeout_secs: float) -> None:
        self._config = config
        self._timeout = timeout_secs

    def send(self, msg: AlertMessage) -> bool:
        cfg = self._config
        try:
            with smtplib.SMTP(cfg.host, cfg.port, timeout=self._timeout) as server:
                if cfg.use_tls:
                    server.starttls()
                if cfg.username:
                    server.login(cfg.username, cfg.password.get_secret_value())
                server.send_message(build_email(msg))
        except (smtplib.SMTPException, OSError):
            logger.exception("smtp_send_error", host=cfg.host, port=cfg.port)
            return False
        return True


class _HttpChannel(NotificationChannel):
    def __init__(self, timeout_secs: float) -> None:
        self._timeout = timeout_secs
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(timeout=self._timeout)
        return self._client

    def _post(self, url: str, payload: dict, ok: tuple[int, ...]) -> bool:
        try:
            resp = self._get_client().post(url, json=payload)
        except httpx.HTTPError:
            logger.exception(f"{self.name}_send_error")
            return False
        if resp.status_code in ok:
            return True
        logger.warning(
            f"{self.name}_send_failed",
            status=resp.status_code,
            body=resp.text[:200],
        )
        return False

    def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            self._client.close()
            self._client = None


class TelegramChannel(_HttpChannel):
    """Delivers alerts via the Telegram Bot API (HTML parse mode)."""

    name = "telegram"

    def __init__(self, config: TelegramConfig, timeout_secs: float = 30.0) -> None:
        super().__init__(timeout_secs)
        self._token = config.bot_token.get_secret_value()
        self._chat_id = config.chat_id

    def send(self, msg: AlertMessage) -> bool:
        header = f"<b>[{msg.severity.name}] {html_escape(msg.subject)}</b>\n"
        budget = _TELEGRAM_MAX_CHARS - len(header) - len("<pre></pre>")
        body = _escape_truncated(msg.body, budget)
        payload = {
            "chat_id": self._chat_id,
            "text": f"{header}<pre>{body}</pre>",
            "parse_mode": "HTML",
        }
        url = f"https://api.telegram.org/bot{self._token}/sendMessage"
        return self._post(url, payload, ok=(200,))


class DiscordChannel(_HttpChannel):
    """Delivers alerts via a Discord webhook with colour-coded embeds."""

    name = "discord"

    def __init__(self, config: DiscordConfig, timeout_secs: float = 30.0) -> None:
        super().__init__(timeout_secs)
        self._webhook_url = config.webhook_url.get_secret_value()

    def send(self, msg: AlertMessage) -> bool:
        embed = {
            "title": msg.subject,
            "description": f"```\n{msg.body[:4000]}\n```",
            "color": _DISCORD_COLORS.get(msg.severity, 0xE74C3C),
            "timestamp": datetime.fromtimestamp(msg.timestamp, tz=timezone.utc).isoformat(),
            "fields": [
                {"name": "pool", "value": msg.pool, "inline": True},
                {"name": "health", "value": msg.health, "inline": True},
                {"name": "host", "value": msg.host, "inline": True},
            ],
        }
        return self._post(self._webhook_url, {"embeds": [embed]}, ok=(200, 204))
