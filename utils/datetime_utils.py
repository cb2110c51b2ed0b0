"""Timestamps for record bookkeeping."""

from __future__ import annotations

from datetime import datetime, timezone

UTC = timezone.utc


def utc_now() -> datetime:
    return datetime.now(UTC)


__all__ = [
    "UTC",
    "utc_now",
]
