"""Core module — config, types, logging."""

from zfswatch.core.config import ConfigError, Settings, load_settings
from zfswatch.core.logging import setup_logging
from zfswatch.core.types import (
    AlertDecision,
    Clock,
    DecisionReason,
    PoolAction,
    PoolHealth,
    PoolOutcome,
    PoolStatus,
    RunReport,
)

__all__ = [
    "AlertDecision",
    "Clock",
    "ConfigError",
    "DecisionReason",
    "PoolAction",
    "PoolHealth",
    "PoolOutcome",
    "PoolStatus",
    "RunReport",
    "Settings",
    "load_settings",
    "setup_logging",
]
