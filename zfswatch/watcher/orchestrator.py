"""PoolWatcher: one evaluation pass over every pool on the host."""

from __future__ import annotations

import time

import structlog

from zfswatch.core.config import Settings
from zfswatch.core.types import Clock, PoolAction, PoolOutcome, PoolStatus, RunReport
from zfswatch.monitor.dispatcher import NotificationDispatcher
from zfswatch.monitor.formatters import format_pool_alert
from zfswatch.pools.base import PoolQueryService
from zfswatch.pools.exceptions import PoolQueryError
from zfswatch.pools.health import HealthEvaluator
from zfswatch.state.exceptions import StateLockedError, StateStoreError
from zfswatch.state.store import DebounceStateStore

logger = structlog.stdlib.get_logger()


class PoolWatcher:
    """Checks each pool and alerts on unhealthy ones at most once per window.

    Pools are handled one at a time to completion. A healthy pool never
    touches the state store. For an unhealthy pool the due check, the send
    and the record update all happen under the pool's state lock, so two
    overlapping runs cannot both alert.

    ``PoolFacilityUnavailableError`` from enumeration propagates to the
    caller; every per-pool failure is isolated to that pool.
    """

    def __init__(
        self,
        settings: Settings,
        query: PoolQueryService,
        store: DebounceStateStore,
        dispatcher: NotificationDispatcher,
        clock: Clock = time.time,
    ) -> None:
        self._settings = settings
        self._query = query
        self._store = store
        self._dispatcher = dispatcher
        self._clock = clock
        self._evaluator = HealthEvaluator(settings.pools.expected_health)

    def _now(self) -> int:
        return int(self._clock())

    def run(self) -> RunReport:
        host = self._settings.hostname
        report = RunReport(host=host, started_at=self._now())

        pools = self._query.list_pools()
        if not pools:
            logger.info("no_pools_found", host=host)
            return report

        logger.info("check_started", host=host, pools=len(pools))
        for pool in pools:
            outcome = self._check_pool(pool)
            report.outcomes.append(outcome)

        logger.info(
            "check_completed",
            host=host,
            pools=len(report.outcomes),
            notified=report.count(PoolAction.NOTIFIED),
            suppressed=report.count(PoolAction.SUPPRESSED),
            failed=report.count(PoolAction.SEND_FAILED) + report.count(PoolAction.QUERY_FAILED),
        )
        return report

    def _check_pool(self, pool: str) -> PoolOutcome:
        try:
            health = self._query.get_health(pool)
        except PoolQueryError as exc:
            logger.error("pool_query_failed", pool=pool, error=str(exc))
            return PoolOutcome(pool=pool, action=PoolAction.QUERY_FAILED, reason=str(exc))

        if self._evaluator.is_healthy(health):
            logger.info("pool_healthy", pool=pool, health=health)
            return PoolOutcome(pool=pool, action=PoolAction.HEALTHY, health=health)

        logger.warning(
            "pool_unhealthy",
            pool=pool,
            health=health,
            expected=self._evaluator.expected,
            state=self._evaluator.classify(health).value,
        )
        try:
            with self._store.lock(pool):
                return self._alert_if_due(pool, health)
        except StateLockedError as exc:
            logger.warning("pool_locked", pool=pool, error=str(exc))
            return PoolOutcome(
                pool=pool, action=PoolAction.LOCKED, health=health, reason=str(exc)
            )

    def _alert_if_due(self, pool: str, health: str) -> PoolOutcome:
        window = self._settings.debounce.window_secs
        now = self._now()
        decision = self._store.is_due(pool, now, window)

        if not decision.should_notify:
            logger.info(
                "alert_suppressed",
                pool=pool,
                reason=decision.reason.value,
                age_secs=decision.age_secs,
                window_secs=window,
            )
            return PoolOutcome(
                pool=pool,
                action=PoolAction.SUPPRESSED,
                health=health,
                reason=decision.reason.value,
            )

        logger.info(
            "alert_due", pool=pool, reason=decision.reason.value, age_secs=decision.age_secs
        )
        try:
            diagnostics = self._query.get_diagnostics(pool)
        except PoolQueryError as exc:
            logger.error("pool_diagnostics_failed", pool=pool, error=str(exc))
            diagnostics = f"Pool {pool} reports {health}; detailed status unavailable: {exc}"

        msg = format_pool_alert(
            PoolStatus(name=pool, health=health, diagnostics=diagnostics),
            host=self._settings.hostname,
            config=self._settings.alerts,
            timestamp=now,
        )
        delivered = self._dispatcher.send(msg)

        if delivered or self._settings.debounce.record_failed_sends:
            try:
                self._store.record_notified(pool, now)
            except StateStoreError as exc:
                logger.error("state_record_write_failed", pool=pool, error=str(exc))

        return PoolOutcome(
            pool=pool,
            action=PoolAction.NOTIFIED if delivered else PoolAction.SEND_FAILED,
            health=health,
            reason=decision.reason.value,
        )
