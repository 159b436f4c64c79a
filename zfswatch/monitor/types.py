"""Domain types for the alerting subsystem."""

from __future__ import annotations

import time
from enum import IntEnum

from pydantic import BaseModel, Field


class Severity(IntEnum):
    """Alert severity; picks the Telegram label and the Discord embed colour."""

    WARNING = 2
    CRITICAL = 3


class AlertMessage(BaseModel):
    """A pool alert ready for delivery to channels."""

    subject: str
    body: str
    recipient: str
    sender: str
    pool: str
    host: str
    health: str
    severity: Severity = Severity.CRITICAL
    # Epoch seconds of the check that raised the alert; shown in the Discord embed.
    timestamp: float = Field(default_factory=time.time)
