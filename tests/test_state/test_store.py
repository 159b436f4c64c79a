"""Tests for FileStateStore — record round-trips, legacy files, due checks, locking."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from zfswatch.core.types import DecisionReason
from zfswatch.state.exceptions import (
    StateLockedError,
    StateRecordMissingError,
    StateStoreError,
)
from zfswatch.state.store import FileStateStore

T0 = 1_700_000_000
WINDOW = 21600


# ── Records ─────────────────────────────────────────────────────


class TestRecords:
    def test_missing_record(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        assert store.exists("tank") is False
        with pytest.raises(StateRecordMissingError):
            store.last_notified_at("tank")

    def test_record_then_read(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        assert store.exists("tank") is True
        assert store.last_notified_at("tank") == T0

    def test_overwrite_not_append(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        store.record_notified("tank", T0 + 100)
        assert store.last_notified_at("tank") == T0 + 100
        assert store.record_path("tank").read_text() == f"{T0 + 100}\n"

    def test_record_file_naming(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        assert store.record_path("tank") == tmp_path / "zfs-status-pool-tank.log"

    def test_creates_missing_state_dir(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path / "nested" / "state")
        store.record_notified("tank", T0)
        assert store.last_notified_at("tank") == T0

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        store.record_notified("tank", T0 + 1)
        assert [p.name for p in tmp_path.iterdir()] == ["zfs-status-pool-tank.log"]

    def test_records_are_per_pool(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        store.record_notified("backup", T0 + 5)
        assert store.last_notified_at("tank") == T0
        assert store.last_notified_at("backup") == T0 + 5

    def test_empty_legacy_file_uses_mtime(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        path = store.record_path("tank")
        path.touch()
        os.utime(path, (T0 - 50, T0 - 50))
        assert store.last_notified_at("tank") == T0 - 50

    def test_garbage_record_is_unreadable(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_path("tank").write_text("not a time")
        with pytest.raises(StateStoreError):
            store.last_notified_at("tank")

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b"])
    def test_unsafe_pool_names_rejected(self, tmp_path: Path, name: str) -> None:
        store = FileStateStore(tmp_path)
        with pytest.raises(StateStoreError):
            store.record_notified(name, T0)

    def test_unwritable_dir_raises_store_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = FileStateStore(blocker / "state")
        with pytest.raises(StateStoreError):
            store.record_notified("tank", T0)


# ── Due check ───────────────────────────────────────────────────


class TestIsDue:
    def test_no_record_is_due(self, tmp_path: Path) -> None:
        decision = FileStateStore(tmp_path).is_due("tank", T0, WINDOW)
        assert decision.should_notify is True
        assert decision.reason == DecisionReason.NO_RECORD
        assert decision.age_secs is None

    def test_recent_record_not_due(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        decision = store.is_due("tank", T0 + 60, WINDOW)
        assert decision.should_notify is False
        assert decision.reason == DecisionReason.WITHIN_WINDOW
        assert decision.age_secs == 60

    def test_boundary_is_inclusive(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_notified("tank", T0)
        assert store.is_due("tank", T0 + WINDOW - 1, WINDOW).should_notify is False
        decision = store.is_due("tank", T0 + WINDOW, WINDOW)
        assert decision.should_notify is True
        assert decision.reason == DecisionReason.WINDOW_ELAPSED

    def test_unreadable_record_is_due(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.record_path("tank").write_text("???")
        decision = store.is_due("tank", T0, WINDOW)
        assert decision.should_notify is True
        assert decision.reason == DecisionReason.STATE_UNREADABLE

    def test_unsafe_name_is_due(self, tmp_path: Path) -> None:
        decision = FileStateStore(tmp_path).is_due("a/b", T0, WINDOW)
        assert decision.should_notify is True
        assert decision.reason == DecisionReason.STATE_UNREADABLE

    def test_overlong_pool_name_is_due(self, tmp_path: Path) -> None:
        # Record file name exceeds NAME_MAX, so stat fails with ENAMETOOLONG.
        store = FileStateStore(tmp_path)
        with pytest.raises(StateStoreError):
            store.exists("p" * 240)
        decision = store.is_due("p" * 240, T0, WINDOW)
        assert decision.should_notify is True
        assert decision.reason == DecisionReason.STATE_UNREADABLE

    def test_check_does_not_write(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        store.is_due("tank", T0, WINDOW)
        assert store.exists("tank") is False


# ── Locking ─────────────────────────────────────────────────────


class TestLocking:
    def test_lock_is_exclusive(self, tmp_path: Path) -> None:
        first = FileStateStore(tmp_path)
        second = FileStateStore(tmp_path)
        with first.lock("tank"):
            with pytest.raises(StateLockedError):
                with second.lock("tank"):
                    pass

    def test_lock_released_after_block(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        with store.lock("tank"):
            pass
        with store.lock("tank"):
            store.record_notified("tank", T0)
        assert store.last_notified_at("tank") == T0

    def test_locks_are_per_pool(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        with store.lock("tank"):
            with store.lock("backup"):
                pass

    def test_lock_released_on_error(self, tmp_path: Path) -> None:
        store = FileStateStore(tmp_path)
        with pytest.raises(RuntimeError):
            with store.lock("tank"):
                raise RuntimeError("boom")
        with store.lock("tank"):
            pass

    def test_unusable_dir_does_not_block(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")
        store = FileStateStore(blocker / "state")
        entered = False
        with store.lock("tank"):
            entered = True
        assert entered
