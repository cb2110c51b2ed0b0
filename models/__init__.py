"""ORM models exposed by the Homebase application."""
from .task import Task
from .event import Event

__all__ = ["Task", "Event"]
