"""Domain types shared across the pool watcher."""

from __future__ import annotations

from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, Field

# Returns the current time as epoch seconds (time.time in production).
Clock = Callable[[], float]


class PoolHealth(StrEnum):
    """Health tokens reported by ``zpool list -o health``."""

    ONLINE = "ONLINE"
    DEGRADED = "DEGRADED"
    FAULTED = "FAULTED"
    OFFLINE = "OFFLINE"
    UNAVAIL = "UNAVAIL"
    REMOVED = "REMOVED"
    SUSPENDED = "SUSPENDED"
    UNKNOWN = "UNKNOWN"


class DecisionReason(StrEnum):
    """Why a pool was or was not due for a notification."""

    NO_RECORD = "no_record"
    WINDOW_ELAPSED = "window_elapsed"
    WITHIN_WINDOW = "within_window"
    STATE_UNREADABLE = "state_unreadable"


class PoolAction(StrEnum):
    """What a pass did for one pool."""

    HEALTHY = "healthy"
    NOTIFIED = "notified"
    SUPPRESSED = "suppressed"
    SEND_FAILED = "send_failed"
    QUERY_FAILED = "query_failed"
    LOCKED = "locked"


class PoolStatus(BaseModel):
    """A pool as seen during one pass."""

    name: str
    health: str
    diagnostics: str = ""


class AlertDecision(BaseModel):
    """Result of the debounce check for an unhealthy pool."""

    should_notify: bool
    reason: DecisionReason
    age_secs: int | None = None


class PoolOutcome(BaseModel):
    """Per-pool result of a pass."""

    pool: str
    action: PoolAction
    health: str | None = None
    reason: str = ""


class RunReport(BaseModel):
    """Summary of one evaluation pass."""

    host: str
    started_at: int
    outcomes: list[PoolOutcome] = Field(default_factory=list)

    @property
    def notified(self) -> list[str]:
        return [o.pool for o in self.outcomes if o.action == PoolAction.NOTIFIED]

    def count(self, action: PoolAction) -> int:
        return sum(1 for o in self.outcomes if o.action == action)
