# homebase/services/tasks.py
from __future__ import annotations

from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

from sqlalchemy import and_, or_
from sqlmodel import Session, select

from core.log import get_logger
from core.priorities import (
    Scale,
    Status,
    normalize_scale,
    normalize_status,
    sort_by_priority,
)
from core.settings import GRID
from core.week_grid import (
    TaskQueue,
    assign_to_day,
    exclude_hidden_calendars,
    filter_visible_calendars,
    start_of_day,
    task_queue,
)
from models.event import Event
from models.task import Task
from storage.db import get_session
from utils.datetime_utils import utc_now

_EDITABLE_FIELDS = {
    "title",
    "notes",
    "for_who",
    "location",
    "due",
    "duration_minutes",
    "importance",
    "urgency",
    "calendar_id",
}

FILTERS = ("all", "todo", "urgent")

QUICK_ADD_TITLE = "New Task"


class TaskService:
    _listeners = {
        "after_create": set(),
        "after_update": set(),
        "after_delete": set(),
    }

    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory
        self.logger = get_logger("tasks")

    @classmethod
    def subscribe(cls, event: str, callback):
        if event not in cls._listeners:
            raise ValueError(f"Unsupported event: {event}")
        cls._listeners[event].add(callback)

    @classmethod
    def unsubscribe(cls, event: str, callback):
        if event not in cls._listeners:
            return
        cls._listeners[event].discard(callback)

    @classmethod
    def watch(cls, callback) -> Callable[[], None]:
        """Subscribe ``callback`` to every mutation; returns the matching unwatch."""
        for event in cls._listeners:
            cls.subscribe(event, callback)

        def unwatch():
            for event in cls._listeners:
                cls.unsubscribe(event, callback)

        return unwatch

    def _emit(self, event: str, task_id: int):
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(task_id)
            except Exception:
                self.logger.exception("Listener %r failed on %s for task %s", listener, event, task_id)

    @staticmethod
    def _clean(fields: dict) -> dict:
        out = {k: v for k, v in fields.items() if k in _EDITABLE_FIELDS}
        if "title" in out and out["title"] is not None:
            out["title"] = out["title"].strip()
        if "notes" in out:
            out["notes"] = out["notes"] or None
        if "duration_minutes" in out:
            out["duration_minutes"] = out["duration_minutes"] or None
        for key in ("importance", "urgency"):
            if key in out:
                out[key] = normalize_scale(out[key]).value
        return out

    # ----- CRUD -----
    def add(
        self,
        title: str,
        *,
        importance: str = Scale.MEDIUM.value,
        urgency: str = Scale.MEDIUM.value,
        status: str = Status.TODO.value,
        emit: bool = True,
        **fields,
    ) -> Task:
        values = self._clean({"title": title, "importance": importance, "urgency": urgency, **fields})
        status_value = normalize_status(status)
        with self._session_factory() as s:
            t = Task(**values, status=status_value.value)
            if status_value is Status.DONE:
                self._mark_done(t)
            s.add(t)
            s.commit()
            s.refresh(t)
        self.logger.debug("Task created: %s", t.id)
        if emit:
            self._emit("after_create", t.id)
        return t

    def get(self, task_id: int) -> Optional[Task]:
        with self._session_factory() as s:
            return s.get(Task, task_id)

    def update(self, task_id: int, *, emit: bool = True, **fields) -> Optional[Task]:
        values = self._clean(fields)
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            for key, value in values.items():
                setattr(t, key, value)
            t.updated_at = utc_now()
            s.add(t)
            s.commit()
            s.refresh(t)
        self.logger.debug("Task updated: %s (%s)", task_id, ", ".join(sorted(values)))
        if emit:
            self._emit("after_update", task_id)
        return t

    @staticmethod
    def _mark_done(t: Task) -> None:
        # done tasks are stored as Low/Low
        t.importance = Scale.LOW.value
        t.urgency = Scale.LOW.value
        t.completed_at = utc_now()

    def set_status(self, task_id: int, status: str, *, emit: bool = True) -> Optional[Task]:
        value = normalize_status(status)
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return None
            t.status = value.value
            if value is Status.DONE:
                self._mark_done(t)
            else:
                t.completed_at = None
            t.updated_at = utc_now()
            s.add(t)
            s.commit()
            s.refresh(t)
        self.logger.debug("Task %s status -> %s", task_id, value.value)
        if emit:
            self._emit("after_update", task_id)
        return t

    def delete(self, task_id: int, *, emit: bool = True) -> bool:
        with self._session_factory() as s:
            t = s.get(Task, task_id)
            if not t:
                return False
            s.delete(t)
            s.commit()
        self.logger.debug("Task deleted: %s", task_id)
        if emit:
            self._emit("after_delete", task_id)
        return True

    # ----- scheduling -----
    def assign_to_day(self, task_id: int, day: date) -> Optional[Task]:
        t = self.get(task_id)
        if not t:
            return None
        return self.update(task_id, due=assign_to_day(t.due, day))

    def unassign(self, task_id: int) -> Optional[Task]:
        return self.update(task_id, due=None)

    def quick_add(self, day: Optional[date] = None, title: str = QUICK_ADD_TITLE) -> Task:
        """Placeholder Medium/Medium task, at the default hour on ``day`` or undated."""
        due = None
        if day is not None:
            due = start_of_day(day).replace(hour=GRID.default_assign_hour)
        return self.add(title, due=due)

    def create_from_event(self, event: Event) -> Task:
        """Preparation task sharing the event's time, place and calendar."""
        return self.add(
            f"Prep: {event.title}",
            notes=f"Task created from event: {event.title}",
            due=event.when,
            location=event.location,
            calendar_id=event.calendar_id,
        )

    # ----- queries -----
    def list_all(self) -> List[Task]:
        with self._session_factory() as s:
            return list(s.exec(select(Task).order_by(Task.created_at.asc())))

    def list_prioritized(self, filter_name: str = "all") -> List[Task]:
        """Tasks for the flat list, highest priority first.

        ``todo`` hides finished tasks, ``urgent`` keeps High/Critical urgency.
        """
        if filter_name not in FILTERS:
            raise ValueError(f"Unsupported filter: {filter_name}")
        with self._session_factory() as s:
            stmt = select(Task)
            if filter_name == "todo":
                stmt = stmt.where(Task.status != Status.DONE.value)
            elif filter_name == "urgent":
                stmt = stmt.where(
                    or_(Task.urgency == Scale.CRITICAL.value, Task.urgency == Scale.HIGH.value)
                )
            rows = list(s.exec(stmt.order_by(Task.created_at.asc(), Task.id.asc())))
        return sort_by_priority(rows)

    def list_between(self, start: datetime, end: datetime) -> List[Task]:
        with self._session_factory() as s:
            stmt = (
                select(Task)
                .where(and_(Task.due != None, Task.due >= start, Task.due < end))  # noqa: E711
                .order_by(Task.due.asc())
            )
            return list(s.exec(stmt))

    def queue(
        self,
        today: date,
        visible_calendar_ids: Optional[Iterable[str]] = None,
        *,
        hidden_calendar_ids: Optional[Iterable[str]] = None,
    ) -> TaskQueue:
        with self._session_factory() as s:
            stmt = (
                select(Task)
                .where(Task.status != Status.DONE.value)
                .order_by(Task.created_at.asc(), Task.id.asc())
            )
            rows = list(s.exec(stmt))
        rows = exclude_hidden_calendars(filter_visible_calendars(rows, visible_calendar_ids), hidden_calendar_ids)
        return task_queue(rows, today)

    def calendar_ids(self) -> List[str]:
        with self._session_factory() as s:
            stmt = select(Task.calendar_id).where(Task.calendar_id != None).distinct()  # noqa: E711
            return sorted(s.exec(stmt))


__all__ = ["FILTERS", "QUICK_ADD_TITLE", "TaskService"]
