# homebase/models/task.py
from typing import Optional
from datetime import datetime

from sqlmodel import SQLModel, Field

from core.priorities import Scale, Status
from utils.datetime_utils import utc_now


class Task(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    notes: Optional[str] = None
    for_who: Optional[str] = None       # context: "Work", "Family", ...
    location: Optional[str] = None
    due: Optional[datetime] = None      # 00:00 means "date only"
    duration_minutes: Optional[int] = None
    importance: str = Scale.MEDIUM.value
    urgency: str = Scale.MEDIUM.value
    status: str = Status.TODO.value
    calendar_id: Optional[str] = Field(default=None, index=True)
    completed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
