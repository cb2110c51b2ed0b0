"""Week grid geometry: day windows, timed/untimed split, pixel placement, zoom."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from core.priorities import is_done, sort_by_priority
from core.settings import GRID, UNASSIGNED_CALENDAR_ID

T = TypeVar("T")
DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def sunday_weekday(value: DateLike) -> int:
    """Day of week with 0 = Sunday ... 6 = Saturday."""
    return (_as_date(value).weekday() + 1) % 7


def start_of_day(value: DateLike) -> datetime:
    tzinfo = value.tzinfo if isinstance(value, datetime) else None
    return datetime.combine(_as_date(value), time.min, tzinfo=tzinfo)


# ===== config =====
@dataclass(frozen=True)
class TimeGridConfig:
    start_hour: int = GRID.start_hour
    end_hour: int = GRID.end_hour
    pixels_per_hour: float = GRID.pixels_per_hour
    min_pixels_per_hour: float = GRID.min_pixels_per_hour
    max_pixels_per_hour: float = GRID.max_pixels_per_hour

    def __post_init__(self) -> None:
        if not (0 <= self.start_hour < self.end_hour <= 24):
            raise ValueError(
                f"Invalid grid hours: start_hour={self.start_hour}, end_hour={self.end_hour}"
            )
        if self.min_pixels_per_hour <= 0 or self.min_pixels_per_hour > self.max_pixels_per_hour:
            raise ValueError("Invalid zoom bounds")
        clamped = _clamp(self.pixels_per_hour, self.min_pixels_per_hour, self.max_pixels_per_hour)
        object.__setattr__(self, "pixels_per_hour", clamped)

    @property
    def total_hours(self) -> int:
        return self.end_hour - self.start_hour

    def with_zoom(self, pixels_per_hour: float) -> "TimeGridConfig":
        return replace(self, pixels_per_hour=pixels_per_hour)


def _clamp(value: float, lo: float, hi: float) -> float:
    return min(max(value, lo), hi)


# ===== week window =====
def compute_week_window(anchor: DateLike, week_start_day: int = GRID.week_start_day) -> List[datetime]:
    """Seven midnight-aligned days starting on the latest ``week_start_day`` <= anchor."""
    start = start_of_day(anchor)
    diff = (sunday_weekday(anchor) - week_start_day % 7 + 7) % 7
    start = start - timedelta(days=diff)
    return [start + timedelta(days=i) for i in range(7)]


def shift_week(anchor: DateLike, weeks: int) -> DateLike:
    return anchor + timedelta(days=7 * weeks)


# ===== bucketing =====
def bucket_by_day(items: Iterable[T], day: DateLike) -> List[T]:
    target = _as_date(day)
    return [it for it in items if getattr(it, "due", None) is not None and _as_date(it.due) == target]


def is_untimed(due: Optional[DateLike]) -> bool:
    # 00:00:00 means "date only" in the task store, not a midnight appointment.
    if due is None or not isinstance(due, datetime):
        return True
    return due.time() == time.min


def partition_timed_vs_untimed(items: Iterable[T]) -> Tuple[List[T], List[T]]:
    untimed: List[T] = []
    timed: List[T] = []
    for it in items:
        (untimed if is_untimed(getattr(it, "due", None)) else timed).append(it)
    # only datetimes reach ``timed``; plain dates are untimed
    return sort_by_priority(untimed), sorted(timed, key=lambda it: it.due.replace(tzinfo=None))


# ===== geometry =====
def vertical_offset(due: datetime, config: TimeGridConfig) -> float:
    """Pixels from the top of the grid; negative or past the bottom is left to the caller."""
    minutes_from_start = (due.hour - config.start_hour) * 60 + due.minute
    return minutes_from_start / 60 * config.pixels_per_hour


def block_height(
    duration_minutes: Optional[int],
    config: TimeGridConfig,
    *,
    default_minutes: int = GRID.default_task_duration_minutes,
) -> float:
    minutes = duration_minutes if duration_minutes and duration_minutes > 0 else default_minutes
    return minutes / 60 * config.pixels_per_hour


def event_block_height(config: TimeGridConfig) -> float:
    return block_height(None, config, default_minutes=GRID.default_event_duration_minutes)


def grid_height(config: TimeGridConfig) -> float:
    return config.total_hours * config.pixels_per_hour


def hour_labels(config: TimeGridConfig) -> List[str]:
    return [f"{h:02d}" for h in range(config.start_hour, config.end_hour)]


def is_within_grid(due: datetime, config: TimeGridConfig) -> bool:
    offset = vertical_offset(due, config)
    return 0 <= offset < grid_height(config)


# ===== zoom =====
def apply_zoom(
    current_pixels_per_hour: float,
    scale_factor: float,
    *,
    lo: float = GRID.min_pixels_per_hour,
    hi: float = GRID.max_pixels_per_hour,
) -> float:
    return _clamp(current_pixels_per_hour * scale_factor, lo, hi)


def contact_distance(p1: Sequence[float], p2: Sequence[float]) -> float:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


class ZoomState(str, Enum):
    IDLE = "idle"
    ZOOMING = "zooming"


@dataclass
class ZoomGesture:
    """Pinch zoom over the hour height.

    Every update is computed from the value captured at gesture start, never
    from the previous update, so a long drag does not accumulate drift.
    """

    pixels_per_hour: float = GRID.pixels_per_hour
    state: ZoomState = ZoomState.IDLE
    baseline: Optional[float] = None
    start_distance: Optional[float] = field(default=None, repr=False)

    def start(self, distance: Optional[float] = None) -> None:
        self.state = ZoomState.ZOOMING
        self.baseline = self.pixels_per_hour
        self.start_distance = distance if distance and distance > 0 else None

    def update(self, scale: Optional[float] = None, *, distance: Optional[float] = None) -> float:
        if self.state is not ZoomState.ZOOMING or self.baseline is None:
            return self.pixels_per_hour
        if scale is None:
            if distance is None or not self.start_distance:
                return self.pixels_per_hour
            scale = distance / self.start_distance
        self.pixels_per_hour = apply_zoom(self.baseline, scale)
        return self.pixels_per_hour

    def end(self) -> None:
        self.state = ZoomState.IDLE
        self.baseline = None
        self.start_distance = None

    cancel = end

    def reset(self) -> float:
        self.end()
        self.pixels_per_hour = GRID.pixels_per_hour
        return self.pixels_per_hour

    @property
    def is_default(self) -> bool:
        return self.pixels_per_hour == GRID.pixels_per_hour


# ===== task queue & filters =====
@dataclass(frozen=True)
class TaskQueue:
    overdue: List
    undated: List


def task_queue(tasks: Iterable[T], today: DateLike) -> TaskQueue:
    """Open tasks with no date, and open tasks due before today."""
    # before today's midnight is the same as an earlier calendar date
    cutoff = _as_date(today)
    overdue: List[T] = []
    undated: List[T] = []
    for t in tasks:
        if is_done(getattr(t, "status", None)):
            continue
        due = getattr(t, "due", None)
        if due is None:
            undated.append(t)
        elif _as_date(due) < cutoff:
            overdue.append(t)
    return TaskQueue(overdue=sort_by_priority(overdue), undated=sort_by_priority(undated))


def calendar_key(item) -> str:
    return getattr(item, "calendar_id", None) or UNASSIGNED_CALENDAR_ID


def filter_visible_calendars(items: Iterable[T], visible_ids: Optional[Iterable[str]]) -> List[T]:
    if visible_ids is None:
        return list(items)
    visible = set(visible_ids)
    return [it for it in items if calendar_key(it) in visible]


def exclude_hidden_calendars(items: Iterable[T], hidden_ids: Optional[Iterable[str]]) -> List[T]:
    """Drop items whose calendar was hidden; calendars never mentioned stay visible."""
    hidden = set(hidden_ids or ())
    if not hidden:
        return list(items)
    return [it for it in items if calendar_key(it) not in hidden]


def assign_to_day(
    due: Optional[datetime],
    day: DateLike,
    *,
    default_hour: int = GRID.default_assign_hour,
) -> datetime:
    """Move ``due`` onto ``day``, keeping its time; untimed items land at ``default_hour``."""
    if due is not None and not is_untimed(due):
        return datetime.combine(_as_date(day), due.timetz())
    base = start_of_day(day)
    return base.replace(hour=default_hour)


__all__ = [
    "TaskQueue",
    "TimeGridConfig",
    "ZoomGesture",
    "ZoomState",
    "apply_zoom",
    "assign_to_day",
    "block_height",
    "bucket_by_day",
    "calendar_key",
    "compute_week_window",
    "contact_distance",
    "event_block_height",
    "exclude_hidden_calendars",
    "filter_visible_calendars",
    "grid_height",
    "hour_labels",
    "is_untimed",
    "is_within_grid",
    "partition_timed_vs_untimed",
    "shift_week",
    "start_of_day",
    "sunday_weekday",
    "task_queue",
    "vertical_offset",
]
