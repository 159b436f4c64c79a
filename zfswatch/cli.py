"""Command-line entry point. Runs one check pass; meant to be run from cron.

Usage::

    # Run with /etc/zfswatch.yaml (or defaults when it does not exist)
    zfswatch

    # Custom config file
    zfswatch --config /usr/local/etc/zfswatch.yaml

    # Every 10 minutes, discarding progress output
    */10 * * * * /usr/local/bin/zfswatch > /dev/null 2>&1

Alerts are still mailed when progress output is discarded.
"""

from __future__ import annotations

import argparse
import sys

import structlog

from zfswatch.core.config import ConfigError, load_settings
from zfswatch.core.logging import setup_logging
from zfswatch.monitor.factory import create_dispatcher
from zfswatch.pools.exceptions import EnvironmentCheckError
from zfswatch.pools.platform import detect_platform
from zfswatch.pools.zpool import ZpoolQueryService
from zfswatch.state.store import FileStateStore
from zfswatch.watcher.orchestrator import PoolWatcher

logger = structlog.get_logger(__name__)


def _fatal(message: str) -> int:
    print(f"\n{message}\n", file=sys.stderr)
    return 1


def run(args: argparse.Namespace) -> int:
    """Check every pool once. Returns the process exit code."""
    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        setup_logging(level=args.log_level, fmt=args.log_format)
        logger.error("config_invalid", error=str(exc))
        return _fatal(str(exc))

    setup_logging(settings.logging, level=args.log_level, fmt=args.log_format)

    try:
        profile = detect_platform(
            zpool_path=settings.pools.zpool_path,
            require_root=settings.require_root,
        )
    except EnvironmentCheckError as exc:
        logger.error("environment_check_failed", error=str(exc))
        return _fatal(str(exc))

    logger.info("zfs_check", host=settings.hostname, platform=profile.name)

    query = ZpoolQueryService(profile.zpool_path, settings.pools.command_timeout_secs)
    store = FileStateStore(settings.debounce.state_dir)
    dispatcher = create_dispatcher(settings.alerts, profile)
    watcher = PoolWatcher(settings, query, store, dispatcher)

    try:
        watcher.run()
    except EnvironmentCheckError as exc:
        logger.error("pool_listing_failed", error=str(exc))
        return _fatal(str(exc))
    finally:
        dispatcher.close()

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zfswatch",
        description="Check ZFS pool health and mail an alert for unhealthy pools.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: /etc/zfswatch.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--log-format",
        choices=("console", "json"),
        default=None,
        help="Progress output format override",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
