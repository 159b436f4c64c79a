"""Exception hierarchy for pool queries and the execution environment."""

from __future__ import annotations


class PoolError(Exception):
    """Base exception for all pool errors."""


class EnvironmentCheckError(PoolError):
    """The host cannot run a check at all. Fatal, raised before any pool is read."""


class UnsupportedPlatformError(EnvironmentCheckError):
    """The operating system is not one we know how to drive."""


class PoolFacilityUnavailableError(EnvironmentCheckError):
    """The ``zpool`` binary is missing or cannot be executed."""


class InsufficientPrivilegesError(EnvironmentCheckError):
    """The check must run as root."""


class PoolQueryError(PoolError):
    """A single pool query failed (non-zero exit, timeout, OS error)."""
