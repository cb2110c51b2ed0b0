"""Parsing of due dates and durations coming from forms and the task store."""
from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional


def parse_due_input(value: str | None) -> Optional[datetime]:
    """Parse ISO ``YYYY-MM-DD`` or an ISO date-time into a naive local datetime.

    A bare date becomes midnight, which the week grid treats as "no time".
    Offsets are converted to local time. Returns ``None`` for anything else.
    """

    if not value:
        return None
    text = value.strip()
    if not text:
        return None

    if len(text) == 10:
        try:
            return datetime.combine(date.fromisoformat(text), time.min)
        except ValueError:
            return None

    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def duration_from_parts(hours: int | str | None, minutes: int | str | None) -> Optional[int]:
    """Fold an hours/minutes pair into minutes; ``None`` when nothing positive is set."""

    total = _as_int(hours) * 60 + _as_int(minutes)
    return total if total > 0 else None


def _as_int(value: int | str | None) -> int:
    try:
        return max(int(value or 0), 0)
    except (TypeError, ValueError):
        return 0


__all__ = [
    "duration_from_parts",
    "parse_due_input",
]
