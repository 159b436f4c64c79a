#!/usr/bin/env python3
"""Run one pool check pass from a source checkout.

Usage::

    python scripts/check_pools.py --config config/zfswatch.yaml
"""

from __future__ import annotations

from zfswatch.cli import main

if __name__ == "__main__":
    main()
