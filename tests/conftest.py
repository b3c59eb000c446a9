"""Pytest fixtures and configuration for dayblocks tests."""

import pytest
from datetime import date, time
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from dayblocks.database.database import Base
from dayblocks.database import models  # noqa: F401  (registers tables)
from dayblocks.database.block_repository import BlockRepository
from dayblocks.engine.block_store import BlockStore
from dayblocks.integrations.lookups import (
    CategoryInfo,
    InMemoryCategoryLookup,
    InMemoryTaskLookup,
    TaskInfo,
)
from dayblocks.models.block import BlockCreate, BlockKind, BlockStatus


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

DAY = date(2024, 6, 5)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragmas(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def block_repository(db_session: Session):
    """Create a BlockRepository instance for testing."""
    return BlockRepository(db_session)


@pytest.fixture
def task_lookup():
    """Tasks with a two-level parent chain."""
    return InMemoryTaskLookup([
        TaskInfo(id="task-1", title="Write report", parent_chain=["Quarterly review", "Work goals"]),
        TaskInfo(id="task-2", title="Run 5k", parent_chain=["Fitness"]),
        TaskInfo(id="task-3", title="Inbox zero"),
    ])


@pytest.fixture
def category_lookup():
    return InMemoryCategoryLookup([
        CategoryInfo(id="cat-work", name="Work", color="#3B82F6"),
        CategoryInfo(id="cat-health", name="Health", color="#10B981"),
        CategoryInfo(id="cat-other-work", name="Work", color="#F97316"),
    ])


@pytest.fixture
def block_store(block_repository, task_lookup, category_lookup):
    """Create a BlockStore wired to the in-memory database and lookups."""
    return BlockStore(block_repository, task_lookup, category_lookup)


@pytest.fixture
def sample_event_base():
    """Base event data for creating test blocks.

    Returns a dict with default attributes that can be overridden.
    """
    return {
        "kind": BlockKind.EVENT,
        "title": "Standup",
        "date": DAY,
        "start_time": time(9, 0),
        "end_time": time(10, 0),
        "status": BlockStatus.SCHEDULED,
    }


@pytest.fixture
def make_event(block_store, sample_event_base):
    """Factory fixture: create an event block through the store."""
    def _make(**overrides):
        return block_store.create(BlockCreate(**{**sample_event_base, **overrides}))
    return _make


@pytest.fixture
def test_client(db_session: Session, task_lookup, category_lookup):
    """Create a FastAPI test client with overridden database dependency."""
    from dayblocks.api.app import create_app
    from dayblocks.database.database import get_db

    app = create_app(task_lookup=task_lookup, category_lookup=category_lookup)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass  # Don't close the session here, let the fixture handle it

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
