"""Binary health classification against the configured expected token."""

from __future__ import annotations

from zfswatch.core.types import PoolHealth


class HealthEvaluator:
    """Decides whether a pool's reported health is the expected one.

    Any token other than the expected one counts as unhealthy, including
    states such as DEGRADED where the pool still serves I/O.
    """

    def __init__(self, expected: str = PoolHealth.ONLINE) -> None:
        self._expected = expected

    @property
    def expected(self) -> str:
        return self._expected

    def is_healthy(self, health: str) -> bool:
        return health == self._expected

    @staticmethod
    def classify(health: str) -> PoolHealth:
        """Map a raw token to its enumerated variant (UNKNOWN if unrecognised)."""
        try:
            return PoolHealth(health)
        except ValueError:
            return PoolHealth.UNKNOWN
