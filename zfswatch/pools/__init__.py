"""Pool enumeration, health queries and environment checks."""

from zfswatch.pools.base import PoolQueryService
from zfswatch.pools.exceptions import (
    EnvironmentCheckError,
    InsufficientPrivilegesError,
    PoolError,
    PoolFacilityUnavailableError,
    PoolQueryError,
    UnsupportedPlatformError,
)
from zfswatch.pools.health import HealthEvaluator
from zfswatch.pools.platform import PlatformProfile, detect_platform, find_zpool
from zfswatch.pools.zpool import ZpoolQueryService

__all__ = [
    "EnvironmentCheckError",
    "HealthEvaluator",
    "InsufficientPrivilegesError",
    "PlatformProfile",
    "PoolError",
    "PoolFacilityUnavailableError",
    "PoolQueryError",
    "PoolQueryService",
    "UnsupportedPlatformError",
    "ZpoolQueryService",
    "detect_platform",
    "find_zpool",
]
