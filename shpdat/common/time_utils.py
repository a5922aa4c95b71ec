"""UTC helpers for run metadata."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def generate_run_id(prefix: str = "run") -> str:
    """Sortable id for one conversion, e.g. ``run-20261019T101500123456Z``."""
    return f"{prefix}-{datetime.now(tz=timezone.utc):%Y%m%dT%H%M%S%fZ}"


def elapsed_ms(started_at: float) -> int:
    return int((time.monotonic() - started_at) * 1000)
