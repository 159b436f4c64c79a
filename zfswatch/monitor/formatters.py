"""Pure functions that turn an unhealthy pool into an AlertMessage."""

from __future__ import annotations

from zfswatch.core.config import AlertsConfig
from zfswatch.core.types import PoolHealth, PoolStatus
from zfswatch.monitor.types import AlertMessage, Severity

# Cosmetic only: every non-expected state is alerted on the same way.
_HEALTH_SEVERITY: dict[PoolHealth, Severity] = {
    PoolHealth.DEGRADED: Severity.WARNING,
    PoolHealth.OFFLINE: Severity.WARNING,
    PoolHealth.REMOVED: Severity.WARNING,
}


def format_subject(config: AlertsConfig, pool: str, host: str) -> str:
    return f"{config.subject_prefix} for {pool} on {host}!"


def format_body(config: AlertsConfig, diagnostics: str) -> str:
    # Plain concatenation: diagnostics may contain "%" and must arrive verbatim.
    return config.preamble + "\n\n" + diagnostics + "\n"


def format_pool_alert(
    status: PoolStatus,
    host: str,
    config: AlertsConfig,
    timestamp: float | None = None,
) -> AlertMessage:
    """Build the alert for an unhealthy pool."""
    try:
        severity = _HEALTH_SEVERITY.get(PoolHealth(status.health), Severity.CRITICAL)
    except ValueError:
        severity = Severity.CRITICAL

    msg = AlertMessage(
        subject=format_subject(config, status.name, host),
        body=format_body(config, status.diagnostics),
        recipient=config.recipient,
        sender=config.from_address,
        pool=status.name,
        host=host,
        health=status.health,
        severity=severity,
    )
    if timestamp is not None:
        msg.timestamp = timestamp
    return msg
