import os
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# keep logs and config of the test run out of the real data directory
os.environ.setdefault("HOMEBASE_DATA_DIR", tempfile.mkdtemp(prefix="homebase-tests-"))

import models  # noqa: E402,F401


@pytest.fixture()
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)

    def factory():
        return Session(engine)

    return factory
