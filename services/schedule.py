"""Assembles a renderable week: day columns, positioned blocks, task queue."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Sequence

from core.log import get_logger
from core.priorities import item_priority
from core.settings import GRID, UNASSIGNED_CALENDAR_ID
from core.week_grid import (
    TaskQueue,
    TimeGridConfig,
    block_height,
    bucket_by_day,
    compute_week_window,
    event_block_height,
    exclude_hidden_calendars,
    filter_visible_calendars,
    grid_height,
    hour_labels,
    is_within_grid,
    partition_timed_vs_untimed,
    task_queue,
    vertical_offset,
)
from models.event import Event
from models.task import Task
from services.events import EventService
from services.tasks import TaskService


@dataclass(frozen=True)
class GridBlock:
    item: object
    kind: str  # "task" | "event"
    top: float
    height: float
    visible: bool
    priority: int = 0


@dataclass
class DayColumn:
    day: datetime
    is_today: bool = False
    untimed: List[Task] = field(default_factory=list)
    blocks: List[GridBlock] = field(default_factory=list)

    @property
    def agenda(self) -> list:
        """List-view order: events, then untimed tasks, then timed tasks."""
        events = [b.item for b in self.blocks if b.kind == "event"]
        timed = [b.item for b in self.blocks if b.kind == "task"]
        return events + list(self.untimed) + timed


@dataclass
class WeekLayout:
    days: List[DayColumn]
    config: TimeGridConfig
    queue: TaskQueue
    hour_labels: List[str]
    grid_height: float

    @property
    def start(self) -> datetime:
        return self.days[0].day

    @property
    def end(self) -> datetime:
        return self.days[-1].day + timedelta(days=1)


def _event_block(ev: Event, config: TimeGridConfig) -> GridBlock:
    return GridBlock(
        item=ev,
        kind="event",
        top=vertical_offset(ev.when, config),
        height=event_block_height(config),
        visible=is_within_grid(ev.when, config),
    )


def _task_block(t: Task, config: TimeGridConfig) -> GridBlock:
    return GridBlock(
        item=t,
        kind="task",
        top=vertical_offset(t.due, config),
        height=block_height(t.duration_minutes, config),
        visible=is_within_grid(t.due, config),
        priority=item_priority(t),
    )


def layout_week(
    tasks: Sequence[Task],
    events: Sequence[Event],
    anchor: date,
    *,
    config: TimeGridConfig,
    week_start_day: int = GRID.week_start_day,
    visible_calendar_ids: Optional[Iterable[str]] = None,
    hidden_calendar_ids: Optional[Iterable[str]] = None,
    today: Optional[date] = None,
) -> WeekLayout:
    if visible_calendar_ids is not None:
        visible_calendar_ids = set(visible_calendar_ids)
    tasks = exclude_hidden_calendars(filter_visible_calendars(tasks, visible_calendar_ids), hidden_calendar_ids)
    events = exclude_hidden_calendars(
        filter_visible_calendars([e for e in events if not e.is_hidden], visible_calendar_ids),
        hidden_calendar_ids,
    )
    today = today or date.today()

    columns: List[DayColumn] = []
    for day in compute_week_window(anchor, week_start_day):
        untimed, timed = partition_timed_vs_untimed(bucket_by_day(tasks, day))
        blocks = [_event_block(ev, config) for ev in sorted(bucket_by_day(events, day), key=lambda e: e.when)]
        blocks += [_task_block(t, config) for t in timed]
        columns.append(DayColumn(day=day, is_today=day.date() == today, untimed=untimed, blocks=blocks))

    return WeekLayout(
        days=columns,
        config=config,
        queue=task_queue(tasks, today),
        hour_labels=hour_labels(config),
        grid_height=grid_height(config),
    )


def rescale_layout(layout: WeekLayout, pixels_per_hour: float) -> WeekLayout:
    """Re-place every block for a new hour height without reloading data."""
    config = layout.config.with_zoom(pixels_per_hour)
    days = [
        DayColumn(
            day=col.day,
            is_today=col.is_today,
            untimed=col.untimed,
            blocks=[
                _event_block(b.item, config) if b.kind == "event" else _task_block(b.item, config)
                for b in col.blocks
            ],
        )
        for col in layout.days
    ]
    return replace(layout, days=days, config=config, grid_height=grid_height(config))


class WeekScheduleService:
    def __init__(self, tasks: Optional[TaskService] = None, events: Optional[EventService] = None):
        self.tasks = tasks or TaskService()
        self.events = events or EventService()
        self.logger = get_logger("schedule")

    def build(
        self,
        anchor: date,
        *,
        config: Optional[TimeGridConfig] = None,
        week_start_day: int = GRID.week_start_day,
        visible_calendar_ids: Optional[Iterable[str]] = None,
        hidden_calendar_ids: Optional[Iterable[str]] = None,
        today: Optional[date] = None,
    ) -> WeekLayout:
        config = config or TimeGridConfig()
        if visible_calendar_ids is not None:
            visible_calendar_ids = set(visible_calendar_ids)
        hidden = set(hidden_calendar_ids or ())
        window = compute_week_window(anchor, week_start_day)
        start, end = window[0], window[-1] + timedelta(days=1)
        week_tasks = self.tasks.list_between(start, end)
        # the queue also needs undated and overdue tasks outside the window
        open_tasks = self.tasks.queue(
            today or date.today(),
            visible_calendar_ids,
            hidden_calendar_ids=hidden,
        )
        week_events = self.events.list_between(start, end)
        layout = layout_week(
            week_tasks,
            week_events,
            anchor,
            config=config,
            week_start_day=week_start_day,
            visible_calendar_ids=visible_calendar_ids,
            hidden_calendar_ids=hidden,
            today=today,
        )
        layout.queue = open_tasks
        self.logger.debug(
            "Week %s..%s: %d tasks, %d events, queue %d/%d",
            start.date(),
            end.date(),
            len(week_tasks),
            len(week_events),
            len(open_tasks.overdue),
            len(open_tasks.undated),
        )
        return layout

    def calendar_ids(self) -> List[str]:
        """Every calendar seen on a task or event, with the unassigned bucket first."""
        known = set(self.tasks.calendar_ids()) | set(self.events.calendar_ids())
        known.discard(UNASSIGNED_CALENDAR_ID)
        return [UNASSIGNED_CALENDAR_ID] + sorted(known)


__all__ = ["DayColumn", "GridBlock", "WeekLayout", "WeekScheduleService", "layout_week", "rescale_layout"]
