from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from tasktracker.client import TaskApiClient
from tasktracker.database import create_tables, get_db, make_engine
from tasktracker.main import app


@pytest.fixture()
def engine(tmp_path: Path):
    """Fresh SQLite database per test."""
    engine = make_engine(f"sqlite:///{tmp_path / 'tasks.db'}")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def override_db(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture()
def client(override_db) -> TestClient:
    # Not used as a context manager: startup would create the default database
    return TestClient(app)


@pytest_asyncio.fixture()
async def api(override_db):
    async with TaskApiClient("http://testserver", transport=httpx.ASGITransport(app=app)) as api:
        yield api
