# tests/conftest.py
from contextlib import asynccontextmanager

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from tasktracker.main import app
from tasktracker.database import Base, get_db
from tasktracker.client.api import TaskApiClient

# In-memory SQLite shared across threads
engine = create_engine(
    "sqlite+pysqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

# Disable lifespan so tasktracker.main doesn't run create_all on your Postgres engine
@asynccontextmanager
async def _noop_lifespan(_app):
    yield
app.router.lifespan_context = _noop_lifespan

# Override get_db to use the test session
def _override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = _override_get_db

# ---------- Fixtures ----------

@pytest.fixture(autouse=True)
def fresh_tables():
    # Every test starts from an empty tasks table
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture()
def client():
    return TestClient(app)

@pytest.fixture()
def create_task(client):
    def _make(description="Buy milk", status=None):
        r = client.post("/tasks", json={"description": description})
        assert r.status_code == 201, r.text
        task = r.json()[0]
        if status and status != "pending":
            r = client.patch(f"/tasks/{task['id']}", json={"status": status})
            assert r.status_code == 200, r.text
            task = r.json()[0]
        return task
    return _make

@pytest.fixture()
async def api_client():
    # Real client, real routes, no network: requests go straight into the ASGI app
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield TaskApiClient(client=http)

@pytest.fixture()
def broken_store():
    """Route requests to a session whose reads and commits blow up with `error`."""
    def _install(error):
        def _fail(*args, **kwargs):
            raise error

        def _broken_get_db():
            db = TestingSessionLocal()
            db.execute = db.scalar = db.get = db.commit = _fail
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = _broken_get_db
    yield _install
    app.dependency_overrides[get_db] = _override_get_db
