"""Alert dispatcher — fans a pool alert out to every configured channel."""

from __future__ import annotations

import structlog

from zfswatch.monitor.channels import NotificationChannel
from zfswatch.monitor.types import AlertMessage

logger = structlog.stdlib.get_logger()


class NotificationDispatcher:
    """Sends each alert once to every channel.

    - A channel that fails (returns False or raises) is logged and skipped.
    - ``send`` returns True when at least one channel delivered.
    - Nothing is retried; the debounce window decides when to try again.
    """

    def __init__(self, channels: list[NotificationChannel] | None = None) -> None:
        self._channels: list[NotificationChannel] = channels or []

    @property
    def channels(self) -> list[NotificationChannel]:
        return list(self._channels)

    def send(self, msg: AlertMessage) -> bool:
        if not self._channels:
            logger.warning("no_channels_configured", pool=msg.pool, subject=msg.subject)
            return False

        delivered: list[str] = []
        for ch in self._channels:
            try:
                ok = ch.send(msg)
            except Exception:
                logger.exception("channel_dispatch_error", channel=ch.name, pool=msg.pool)
                ok = False
            if ok:
                delivered.append(ch.name)

        logger.info(
            "alert_dispatched" if delivered else "alert_not_delivered",
            pool=msg.pool,
            health=msg.health,
            recipient=msg.recipient,
            subject=msg.subject,
            delivered=delivered,
            attempted=[ch.name for ch in self._channels],
        )
        return bool(delivered)

    # ── Lifecycle ───────────────────────────────────────────────

    def close(self) -> None:
        for ch in self._channels:
            try:
                ch.close()
            except Exception:
                logger.exception("channel_close_error", channel=ch.name)
