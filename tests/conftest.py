"""
Shared pytest fixtures for all tests.

Provides database isolation, config isolation and an event store that
creates events through either repository backend.
"""

import pytest
from typing import Generator, Optional

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from calendar_repair.core.database import Base
from calendar_repair.persistence.models import EventReference, StoredEvent
from calendar_repair.persistence.orm import EventModel
from calendar_repair.persistence.repositories import InMemoryEventRepository
from calendar_repair.persistence.sql_repositories import SqlEventRepository, _row_to_stored_event
from calendar_repair.settings import clear_settings_cache


INSTANCE_SUFFIX = "calendar.example.com"


# =============================================================================
# DATABASE FIXTURES
# =============================================================================

@pytest.fixture(scope="function")
def test_engine():
    """
    Create a test database engine using SQLite in-memory.

    Function scoped because the repair job commits; every test starts
    with an empty event table.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a new database session for each test."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=test_engine,
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture(autouse=True)
def isolate_config(monkeypatch):
    """
    Automatically isolate config for all tests.

    Clears job-related environment variables and the settings cache.
    """
    for key in (
        "DATABASE_URL", "WWWROOT", "INSTANCE_SUFFIX", "FETCH_SIZE",
        "DELETE_BATCH_SIZE", "PROGRESS_EVERY", "PROGRESS_WIDTH",
        "LOG_LEVEL", "LOG_FORMAT",
    ):
        monkeypatch.delenv(key, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def instance_suffix() -> str:
    return INSTANCE_SUFFIX


# =============================================================================
# EVENT STORES
# =============================================================================

class InMemoryEventStore:
    """Creates and inspects events in an InMemoryEventRepository."""

    def __init__(self):
        self.repository = InMemoryEventRepository()

    def create(self, **fields) -> StoredEvent:
        return self.repository.add(StoredEvent(id=0, **fields))

    def get(self, event_id: int) -> Optional[StoredEvent]:
        return self.repository.get(event_id)

    def count(self) -> int:
        return self.repository.count()


class SqlEventStore:
    """Creates and inspects events in the SQLite test database."""

    def __init__(self, session: Session):
        self.session = session
        # Small fetch size so streaming spans several round trips
        self.repository = SqlEventRepository(session, fetch_size=2)

    def create(self, **fields) -> StoredEvent:
        row = EventModel(**fields)
        self.session.add(row)
        self.session.commit()
        return self.get(row.id)

    def get(self, event_id: int) -> Optional[StoredEvent]:
        row = self.session.execute(
            select(EventModel.__table__).where(EventModel.id == event_id)
        ).first()
        return _row_to_stored_event(row) if row is not None else None

    def count(self) -> int:
        return len(self.session.execute(select(EventModel.id)).all())


@pytest.fixture(params=["memory", "sql"])
def event_store(request):
    """Event store backed by each repository implementation in turn."""
    if request.param == "memory":
        return InMemoryEventStore()
    return SqlEventStore(request.getfixturevalue("db_session"))


@pytest.fixture
def memory_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def sql_store(db_session) -> SqlEventStore:
    return SqlEventStore(db_session)


@pytest.fixture
def clone_event(instance_suffix):
    """
    Simulate an import of parent into another calendar.

    The clone copies the parent's content and references the parent's ID
    the way older releases exported it.
    """
    def _clone(store, parent: StoredEvent, **data) -> StoredEvent:
        fields = {
            "name": parent.name,
            "description": parent.description,
            "description_format": parent.description_format,
            "start_time": parent.start_time,
            "duration": parent.duration,
            "priority": parent.priority,
            "location": parent.location,
            "reference": str(EventReference.for_event(parent.id, instance_suffix)),
        }
        fields.update(data)
        return store.create(**fields)

    return _clone


@pytest.fixture
def root_event():
    """Create an organically created (not imported) event."""
    def _root(store, label: str, **data) -> StoredEvent:
        fields = {
            "name": f"Event {label}",
            "description": f"<p>Description of {label}</p>",
            "description_format": 1,
            "start_time": 1700000000,
            "duration": 3600,
            "priority": None,
            "location": "Room 1",
            "reference": label,
        }
        fields.update(data)
        return store.create(**fields)

    return _root
