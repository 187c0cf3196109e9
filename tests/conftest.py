import pytest

from charity_events.db import DatabaseConfig, db
from charity_events.utils.logging_config import setup_logging

from .helpers import FakeAPI, RecordingRenderer

setup_logging()


@pytest.fixture
def fake_api():
    return FakeAPI()


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def database(tmp_path):
    """Point the global database at a fresh SQLite file."""
    previous = db.config
    db.configure(DatabaseConfig(sqlite_path=tmp_path / 'test.db'))
    db.init_db()
    yield db
    db.configure(previous)
