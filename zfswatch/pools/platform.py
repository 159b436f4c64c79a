"""Host environment detection, done once at startup."""

from __future__ import annotations

import os
import platform
import shutil
from typing import Literal

import structlog
from pydantic import BaseModel

from zfswatch.pools.exceptions import (
    InsufficientPrivilegesError,
    PoolFacilityUnavailableError,
    UnsupportedPlatformError,
)

logger = structlog.stdlib.get_logger()

# Where zpool lives when it is not on PATH (cron often runs with a bare PATH).
_FALLBACK_ZPOOL_PATHS = ("/sbin/zpool", "/usr/sbin/zpool", "/usr/local/sbin/zpool")

# uname prefix → (display name, default mail transport)
_KNOWN_SYSTEMS: dict[str, tuple[str, Literal["sendmail", "mail"]]] = {
    "linux": ("Linux", "sendmail"),
    "freebsd": ("FreeBSD", "mail"),
    "darwin": ("macOS", "mail"),
}


class PlatformProfile(BaseModel):
    """What the rest of the program needs to know about the host."""

    name: str
    zpool_path: str
    mail_transport: Literal["sendmail", "mail"]


def _system_profile(system: str) -> tuple[str, Literal["sendmail", "mail"]]:
    lowered = system.lower()
    for prefix, profile in _KNOWN_SYSTEMS.items():
        if lowered.startswith(prefix):
            return profile
    raise UnsupportedPlatformError(f"Unknown OS detected: {system or 'unknown'}")


def find_zpool(configured: str | None = None) -> str:
    """Locate an executable ``zpool`` binary.

    Raises:
        PoolFacilityUnavailableError: if none is found.
    """
    if configured:
        if os.access(configured, os.X_OK):
            return configured
        raise PoolFacilityUnavailableError(
            f'The "zpool" binary was not found at {configured}. Is it installed?'
        )

    found = shutil.which("zpool")
    if found:
        return found
    for candidate in _FALLBACK_ZPOOL_PATHS:
        if os.access(candidate, os.X_OK):
            return candidate
    raise PoolFacilityUnavailableError('The "zpool" binary was not found. Is it installed?')


def detect_platform(
    zpool_path: str | None = None,
    require_root: bool = True,
    system: str | None = None,
) -> PlatformProfile:
    """Check the environment and return the platform profile.

    Args:
        zpool_path: Configured zpool location; searched for if None.
        require_root: Refuse to run unless the effective uid is 0.
        system: ``uname`` override, for tests.

    Raises:
        InsufficientPrivilegesError: not root while ``require_root`` is set.
        PoolFacilityUnavailableError: no zpool binary.
        UnsupportedPlatformError: unrecognised operating system.
    """
    if require_root and os.geteuid() != 0:
        raise InsufficientPrivilegesError("Please run this script as root (or using sudo).")

    zpool = find_zpool(zpool_path)
    name, transport = _system_profile(system if system is not None else platform.system())

    logger.debug("platform_detected", platform=name, zpool=zpool, mail_transport=transport)
    return PlatformProfile(name=name, zpool_path=zpool, mail_transport=transport)
