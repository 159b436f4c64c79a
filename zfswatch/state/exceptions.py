"""Debounce state store exceptions."""

from __future__ import annotations


class StateStoreError(Exception):
    """Base exception for debounce state errors (unreadable or unwritable record)."""


class StateRecordMissingError(StateStoreError):
    """No record exists for the pool."""


class StateLockedError(StateStoreError):
    """Another invocation holds the pool's lock."""
