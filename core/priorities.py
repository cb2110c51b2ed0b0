"""Priority scoring for tasks.

The score is ``urgency * importance ** 2`` on the 1..4 scale, so importance
dominates: a Critical/Low item (16) outranks a Low/Critical one (4). Finished
work always scores 0 and sinks to the bottom of any ranking.
"""
from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union


class Scale(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class Status(str, Enum):
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    DONE = "Done"
    WAITING = "Waiting"


class SchedulableItem(Protocol):
    importance: str
    urgency: str
    status: str
    due: Optional[Union[date, datetime]]
    duration_minutes: Optional[int]


SCALE_VALUES: Dict[str, int] = {
    Scale.LOW.value: 1,
    Scale.MEDIUM.value: 2,
    Scale.HIGH.value: 3,
    Scale.CRITICAL.value: 4,
}

DEFAULT_SCALE = Scale.LOW
DEFAULT_STATUS = Status.TODO

MAX_PRIORITY = 64


def _raw(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def scale_value(level: Union[Scale, str, None]) -> int:
    """Map a scale label to 1..4; anything unrecognised counts as Low."""
    try:
        return SCALE_VALUES.get(_raw(level), 1)
    except TypeError:
        return 1


def normalize_scale(value: Union[Scale, str, None]) -> Scale:
    try:
        return Scale(_raw(value))
    except (TypeError, ValueError):
        return DEFAULT_SCALE


def normalize_status(value: Union[Status, str, None]) -> Status:
    try:
        return Status(_raw(value))
    except (TypeError, ValueError):
        return DEFAULT_STATUS


def is_done(status: Union[Status, str, None]) -> bool:
    return _raw(status) == Status.DONE.value


def priority(
    importance: Union[Scale, str, None],
    urgency: Union[Scale, str, None],
    status: Union[Status, str, None],
) -> int:
    if is_done(status):
        return 0
    return scale_value(urgency) * scale_value(importance) ** 2


def item_priority(item: SchedulableItem) -> int:
    return priority(
        getattr(item, "importance", None),
        getattr(item, "urgency", None),
        getattr(item, "status", None),
    )


def compare_by_priority(a: SchedulableItem, b: SchedulableItem) -> int:
    """``cmp``-style ordering: highest priority first.

    Ties fall back to urgency, then importance, both descending. Items equal
    on all three compare as 0 so a stable sort keeps their input order.
    """
    pa, pb = item_priority(a), item_priority(b)
    if pa != pb:
        return pb - pa
    ua, ub = scale_value(getattr(a, "urgency", None)), scale_value(getattr(b, "urgency", None))
    if ua != ub:
        return ub - ua
    ia, ib = scale_value(getattr(a, "importance", None)), scale_value(getattr(b, "importance", None))
    return ib - ia


def sort_by_priority(items: Iterable[SchedulableItem]) -> List[SchedulableItem]:
    return sorted(items, key=cmp_to_key(compare_by_priority))


def date_suggests_critical_urgency(
    candidate: Union[date, datetime],
    reference: Union[date, datetime],
) -> bool:
    """True when ``candidate`` falls on or before the day of ``reference``.

    Only calendar days are compared; 23:59 today is still "today".
    """
    return _as_date(candidate) <= _as_date(reference)


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


# Badge buckets for the score shown next to each task.
PRIORITY_META: Dict[int, Dict[str, str]] = {
    0: {
        "label": "Done",
        "color": "#64748B",    # slate-500
        "bgcolor": "#E2E8F0",  # slate-200
    },
    1: {
        "label": "Low",
        "color": "#0EA5E9",    # sky-500
        "bgcolor": "#E0F2FE",  # sky-100
    },
    8: {
        "label": "Medium",
        "color": "#F59E0B",    # amber-500
        "bgcolor": "#FEF3C7",  # amber-100
    },
    24: {
        "label": "High",
        "color": "#F97316",    # orange-500
        "bgcolor": "#FFEDD5",  # orange-100
    },
    48: {
        "label": "Critical",
        "color": "#EF4444",    # red-500
        "bgcolor": "#FEE2E2",  # red-100
    },
}


def _meta(score: int) -> Dict[str, str]:
    floor = max((k for k in PRIORITY_META if k <= max(score, 0)), default=0)
    return PRIORITY_META[floor]


def priority_label(score: int) -> str:
    return _meta(score)["label"]


def priority_color(score: int) -> str:
    return _meta(score)["color"]


def priority_bgcolor(score: int) -> str:
    return _meta(score)["bgcolor"]


def scale_options() -> Dict[str, str]:
    """Return mapping of dropdown values -> labels."""
    return {level.value: f"{SCALE_VALUES[level.value]} - {level.value}" for level in Scale}


__all__ = [
    "DEFAULT_SCALE",
    "DEFAULT_STATUS",
    "MAX_PRIORITY",
    "PRIORITY_META",
    "Scale",
    "SchedulableItem",
    "Status",
    "compare_by_priority",
    "date_suggests_critical_urgency",
    "is_done",
    "item_priority",
    "normalize_scale",
    "normalize_status",
    "priority",
    "priority_bgcolor",
    "priority_color",
    "priority_label",
    "scale_options",
    "scale_value",
    "sort_by_priority",
]
