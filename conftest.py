"""
Shared pytest fixtures

Points the services at a throwaway SQLite database before any module reads
DATABASE_URL, and resets the schema for every test.
"""
import os
import tempfile
from datetime import datetime

_tmpdir = tempfile.mkdtemp(prefix="advent-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'test.db')}"
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
os.environ.setdefault("ADVENT_TIMEZONE", "Asia/Taipei")

import pytest
import pytz
from fastapi.testclient import TestClient

from advent.shared.database import Base, SessionLocal, engine
from advent.calendar.gate import get_now
from advent.calendar.main import app

TAIPEI = pytz.timezone("Asia/Taipei")


def taipei_time(year, month, day, hour=12, minute=0):
    return TAIPEI.localize(datetime(year, month, day, hour, minute))


@pytest.fixture(autouse=True)
def clean_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock():
    """Mutable "now" for the API; set clock.now to move time."""
    class Clock:
        now = taipei_time(2025, 12, 5)

    fixed = Clock()
    app.dependency_overrides[get_now] = lambda: fixed.now
    yield fixed
    app.dependency_overrides.pop(get_now, None)


@pytest.fixture
def client(clock):
    with TestClient(app) as test_client:
        yield test_client
