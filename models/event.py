# homebase/models/event.py
from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field

from utils.datetime_utils import utc_now


class Event(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    description: Optional[str] = None
    when: datetime = Field(index=True)
    location: Optional[str] = None
    calendar_id: Optional[str] = Field(default=None, index=True)
    is_hidden: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    # Events share the grid with tasks, which look them up by ``due``.
    @property
    def due(self) -> datetime:
        return self.when
