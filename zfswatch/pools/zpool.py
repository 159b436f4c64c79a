"""Pool query service backed by the ``zpool`` command."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Sequence

import structlog

from zfswatch.pools.base import PoolQueryService
from zfswatch.pools.exceptions import PoolFacilityUnavailableError, PoolQueryError

logger = structlog.stdlib.get_logger()

# Signature of subprocess.run as used here; swapped out in tests.
Runner = Callable[..., subprocess.CompletedProcess[str]]


class ZpoolQueryService(PoolQueryService):
    """Runs ``zpool list``/``zpool status`` with a bounded timeout per call."""

    def __init__(
        self,
        zpool_path: str,
        timeout_secs: float = 30.0,
        runner: Runner = subprocess.run,
    ) -> None:
        self._zpool = zpool_path
        self._timeout = timeout_secs
        self._run = runner

    def _exec(self, args: Sequence[str]) -> str:
        cmd = [self._zpool, *args]
        try:
            proc = self._run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise PoolQueryError(
                f"{' '.join(cmd)} timed out after {self._timeout}s"
            ) from exc
        except OSError as exc:
            raise PoolQueryError(f"{' '.join(cmd)} failed: {exc}") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or "").strip()
            raise PoolQueryError(
                f"{' '.join(cmd)} exited with {proc.returncode}: {stderr[:200]}"
            )
        return proc.stdout

    def list_pools(self) -> list[str]:
        try:
            out = self._exec(["list", "-H", "-o", "name"])
        except PoolQueryError as exc:
            raise PoolFacilityUnavailableError(str(exc)) from exc
        return [line.strip() for line in out.splitlines() if line.strip()]

    def get_health(self, pool: str) -> str:
        out = self._exec(["list", "-H", "-o", "health", pool]).strip()
        if not out:
            raise PoolQueryError(f"no health reported for pool {pool}")
        return out.splitlines()[0].strip()

    def get_diagnostics(self, pool: str) -> str:
        # -T d prefixes the report with the current date
        return self._exec(["status", "-T", "d", pool]).rstrip("\n")
