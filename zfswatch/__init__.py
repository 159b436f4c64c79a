"""Cron-driven ZFS pool health watcher with per-pool alert debouncing."""

__version__ = "1.0.0"
