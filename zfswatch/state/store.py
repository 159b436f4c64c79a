"""Debounce state: when each pool was last alerted on.

One record per pool holding the epoch-seconds timestamp of the last alert.
Records are overwritten on every alert and never removed, so a pool that
recovers and degrades again inside the window stays quiet.
"""

from __future__ import annotations

import abc
import fcntl
import os
import stat
import tempfile
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from pathlib import Path

import structlog

from zfswatch.core.types import AlertDecision, DecisionReason
from zfswatch.state.exceptions import (
    StateLockedError,
    StateRecordMissingError,
    StateStoreError,
)

logger = structlog.stdlib.get_logger()

# Same naming as the zfs-watch.sh log files so existing state carries over.
RECORD_PREFIX = "zfs-status-pool-"
RECORD_SUFFIX = ".log"


class DebounceStateStore(abc.ABC):
    """Durable per-pool record of the last notification time."""

    @abc.abstractmethod
    def exists(self, pool: str) -> bool:
        """Whether a record exists for the pool.

        Raises:
            StateStoreError: the record's presence cannot be determined.
        """

    @abc.abstractmethod
    def last_notified_at(self, pool: str) -> int:
        """Timestamp of the last notification.

        Raises:
            StateRecordMissingError: no record for the pool.
            StateStoreError: the record exists but cannot be read.
        """

    @abc.abstractmethod
    def record_notified(self, pool: str, timestamp: int) -> None:
        """Create or overwrite the pool's record."""

    @abc.abstractmethod
    def lock(self, pool: str) -> AbstractContextManager[None]:
        """Hold the pool's single-writer lock for the duration of the block.

        Raises:
            StateLockedError: another holder has it.
        """

    def is_due(self, pool: str, now: int, window_secs: int) -> AlertDecision:
        """Decide whether an unhealthy pool should be alerted on now.

        A record exactly ``window_secs`` old is due. An unreadable record is
        treated as due.
        """
        try:
            if not self.exists(pool):
                return AlertDecision(should_notify=True, reason=DecisionReason.NO_RECORD)
            last = self.last_notified_at(pool)
        except StateRecordMissingError:
            return AlertDecision(should_notify=True, reason=DecisionReason.NO_RECORD)
        except StateStoreError as exc:
            logger.warning("state_record_unreadable", pool=pool, error=str(exc))
            return AlertDecision(should_notify=True, reason=DecisionReason.STATE_UNREADABLE)

        age = now - last
        if age >= window_secs:
            return AlertDecision(
                should_notify=True, reason=DecisionReason.WINDOW_ELAPSED, age_secs=age
            )
        return AlertDecision(
            should_notify=False, reason=DecisionReason.WITHIN_WINDOW, age_secs=age
        )


class FileStateStore(DebounceStateStore):
    """One small file per pool under ``state_dir``.

    The file body is the timestamp. An empty file (as left by ``touch``) is
    read through its modification time.
    """

    def __init__(self, state_dir: str | Path) -> None:
        self._dir = Path(state_dir)

    @property
    def state_dir(self) -> Path:
        return self._dir

    def record_path(self, pool: str) -> Path:
        if not pool or pool in (".", "..") or "/" in pool or "\0" in pool:
            raise StateStoreError(f"pool name {pool!r} cannot be used as a record key")
        return self._dir / f"{RECORD_PREFIX}{pool}{RECORD_SUFFIX}"

    def exists(self, pool: str) -> bool:
        path = self.record_path(pool)
        try:
            return stat.S_ISREG(path.stat().st_mode)
        except (FileNotFoundError, NotADirectoryError):
            return False
        except OSError as exc:
            raise StateStoreError(f"cannot stat {path}: {exc}") from exc

    def last_notified_at(self, pool: str) -> int:
        path = self.record_path(pool)
        try:
            content = path.read_text().strip()
            if not content:
                return int(path.stat().st_mtime)
        except FileNotFoundError as exc:
            raise StateRecordMissingError(f"no record for pool {pool}") from exc
        except OSError as exc:
            raise StateStoreError(f"cannot read {path}: {exc}") from exc

        try:
            return int(float(content))
        except ValueError as exc:
            raise StateStoreError(f"{path} holds no timestamp: {content[:40]!r}") from exc

    def record_notified(self, pool: str, timestamp: int) -> None:
        path = self.record_path(pool)
        try:
            self._dir.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=f".{path.name}.")
            try:
                with os.fdopen(fd, "w") as f:
                    f.write(f"{int(timestamp)}\n")
                os.chmod(tmp, 0o644)
                os.replace(tmp, path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
            os.utime(path, (timestamp, timestamp))
        except OSError as exc:
            raise StateStoreError(f"cannot write {path}: {exc}") from exc

    @contextmanager
    def lock(self, pool: str) -> Iterator[None]:
        fd: int | None = None
        try:
            lock_path = self.record_path(pool).with_suffix(".lock")
            self._dir.mkdir(parents=True, exist_ok=True)
            fd = os.open(lock_path, os.O_CREAT | os.O_RDWR, 0o644)
        except (OSError, StateStoreError) as exc:
            # No lock file means no exclusion, not no alert.
            logger.warning("state_lock_unavailable", pool=pool, error=str(exc))

        if fd is None:
            yield
            return

        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError as exc:
                raise StateLockedError(f"pool {pool} is being handled by another run") from exc
            yield
        finally:
            os.close(fd)
