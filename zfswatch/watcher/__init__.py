"""Evaluation pass orchestration."""

from zfswatch.watcher.orchestrator import PoolWatcher

__all__ = ["PoolWatcher"]
