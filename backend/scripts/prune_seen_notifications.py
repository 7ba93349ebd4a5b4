"""Maintenance script to prune old, already-seen notification events.

Usage:
    python scripts/prune_seen_notifications.py

Environment overrides:
    NOTIFICATION_RETENTION_DAYS=30
    NOTIFICATION_PRUNE_BATCH_SIZE=500
    NOTIFICATION_MAX_ROWS_PER_RUN=5000
"""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import timedelta
from pathlib import Path
from time import perf_counter

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from core.time import utcnow  # noqa: E402
from db.session import AsyncSessionMaker  # noqa: E402
from services.notifications.retention import (  # noqa: E402
    PRUNE_BATCH_SIZE,
    prune_seen_notifications,
)

RETENTION_DAYS_ENV = "NOTIFICATION_RETENTION_DAYS"
PRUNE_BATCH_SIZE_ENV = "NOTIFICATION_PRUNE_BATCH_SIZE"
MAX_ROWS_PER_RUN_ENV = "NOTIFICATION_MAX_ROWS_PER_RUN"
DEFAULT_RETENTION_DAYS = 30
DEFAULT_MAX_ROWS_PER_RUN = 5000


def _parse_positive_int(raw_value: str | None, *, default: int, label: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        parsed = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{label} must be an integer") from exc
    if parsed <= 0:
        raise ValueError(f"{label} must be positive")
    return parsed


def _parse_non_negative_int(raw_value: str | None, *, default: int, label: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default
    try:
        parsed = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{label} must be an integer") from exc
    if parsed < 0:
        raise ValueError(f"{label} must be non-negative")
    return parsed


async def run() -> None:
    retention_days = _parse_non_negative_int(
        os.getenv(RETENTION_DAYS_ENV),
        default=DEFAULT_RETENTION_DAYS,
        label=RETENTION_DAYS_ENV,
    )
    batch_size = _parse_positive_int(
        os.getenv(PRUNE_BATCH_SIZE_ENV),
        default=PRUNE_BATCH_SIZE,
        label=PRUNE_BATCH_SIZE_ENV,
    )
    max_rows_per_run = _parse_positive_int(
        os.getenv(MAX_ROWS_PER_RUN_ENV),
        default=DEFAULT_MAX_ROWS_PER_RUN,
        label=MAX_ROWS_PER_RUN_ENV,
    )

    started_at = perf_counter()
    older_than = utcnow() - timedelta(days=retention_days)
    async with AsyncSessionMaker() as session:
        rows_deleted = await prune_seen_notifications(
            session,
            older_than=older_than,
            batch_size=batch_size,
            max_deleted=max_rows_per_run,
        )

    elapsed_ms = int((perf_counter() - started_at) * 1000)
    print(
        "Seen notification prune complete: "
        f"rows_deleted={rows_deleted}, retention_days={retention_days}, "
        f"elapsed_ms={elapsed_ms}"
    )


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
