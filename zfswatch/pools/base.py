"""Abstract pool query service."""

from __future__ import annotations

import abc


class PoolQueryService(abc.ABC):
    """Read-only view of the pool-management facility.

    Implementations raise ``PoolFacilityUnavailableError`` from
    ``list_pools()`` when the facility cannot be used at all, and
    ``PoolQueryError`` from the per-pool calls.
    """

    @abc.abstractmethod
    def list_pools(self) -> list[str]:
        """Return pool names in enumeration order. Empty when there are none."""

    @abc.abstractmethod
    def get_health(self, pool: str) -> str:
        """Return the pool's current health token, e.g. ``ONLINE``."""

    @abc.abstractmethod
    def get_diagnostics(self, pool: str) -> str:
        """Return the detailed, timestamped status text for the pool."""
