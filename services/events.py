# homebase/services/events.py
from __future__ import annotations

from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy import and_
from sqlmodel import Session, select

from core.log import get_logger
from models.event import Event
from storage.db import get_session
from utils.datetime_utils import utc_now


class EventService:
    def __init__(self, session_factory: Callable[[], Session] = get_session):
        self._session_factory = session_factory
        self.logger = get_logger("events")

    def add(
        self,
        title: str,
        when: datetime,
        *,
        description: Optional[str] = None,
        location: Optional[str] = None,
        calendar_id: Optional[str] = None,
    ) -> Event:
        with self._session_factory() as s:
            ev = Event(
                title=title.strip(),
                when=when,
                description=description or None,
                location=location or None,
                calendar_id=calendar_id or None,
            )
            s.add(ev)
            s.commit()
            s.refresh(ev)
        self.logger.debug("Event created: %s", ev.id)
        return ev

    def get(self, event_id: int) -> Optional[Event]:
        with self._session_factory() as s:
            return s.get(Event, event_id)

    def set_hidden(self, event_id: int, hidden: bool = True) -> Optional[Event]:
        with self._session_factory() as s:
            ev = s.get(Event, event_id)
            if not ev:
                return None
            ev.is_hidden = hidden
            ev.updated_at = utc_now()
            s.add(ev)
            s.commit()
            s.refresh(ev)
        self.logger.debug("Event %s hidden=%s", event_id, hidden)
        return ev

    def delete(self, event_id: int) -> bool:
        with self._session_factory() as s:
            ev = s.get(Event, event_id)
            if not ev:
                return False
            s.delete(ev)
            s.commit()
        self.logger.debug("Event deleted: %s", event_id)
        return True

    def list_between(self, start: datetime, end: datetime, *, include_hidden: bool = False) -> List[Event]:
        with self._session_factory() as s:
            stmt = select(Event).where(and_(Event.when >= start, Event.when < end))
            if not include_hidden:
                stmt = stmt.where(Event.is_hidden == False)  # noqa: E712
            return list(s.exec(stmt.order_by(Event.when.asc())))

    def calendar_ids(self) -> List[str]:
        with self._session_factory() as s:
            stmt = select(Event.calendar_id).where(Event.calendar_id != None).distinct()  # noqa: E711
            return sorted(s.exec(stmt))


__all__ = ["EventService"]
