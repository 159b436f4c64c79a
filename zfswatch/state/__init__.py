"""Persistent per-pool debounce state."""

from zfswatch.state.exceptions import (
    StateLockedError,
    StateRecordMissingError,
    StateStoreError,
)
from zfswatch.state.store import DebounceStateStore, FileStateStore

__all__ = [
    "DebounceStateStore",
    "FileStateStore",
    "StateLockedError",
    "StateRecordMissingError",
    "StateStoreError",
]
