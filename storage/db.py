# homebase/storage/db.py
from sqlmodel import SQLModel, create_engine, Session

from core.settings import DB_PATH

# Ensure SQLModel metadata is populated
import models.task  # noqa: F401
import models.event  # noqa: F401


_engine = None


def get_engine():
    """Return (and lazily create) the SQLAlchemy engine for ``app.db``."""

    global _engine
    if _engine is None:
        DB_PATH.parent.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(f"sqlite:///{DB_PATH.as_posix()}", echo=False)
    return _engine


def init_db(engine=None):
    SQLModel.metadata.create_all(engine or get_engine())


def get_session() -> Session:
    return Session(get_engine())
