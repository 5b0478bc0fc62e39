"""
Database engine and session management.

The repair job runs synchronously, so it uses plain SQLAlchemy sessions
rather than the async driver. DATABASE_URL comes from calendar_repair.settings.
"""
import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

# Create declarative base for ORM models
Base = declarative_base()

_ASYNC_DRIVERS = {
    "postgresql+asyncpg://": "postgresql+psycopg2://",
    "sqlite+aiosqlite://": "sqlite://",
}


def to_sync_url(database_url: str) -> str:
    """Convert an async driver URL to its synchronous counterpart."""
    for async_prefix, sync_prefix in _ASYNC_DRIVERS.items():
        if database_url.startswith(async_prefix):
            return sync_prefix + database_url[len(async_prefix):]
    return database_url


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """Create a synchronous engine for the given URL."""
    sync_url = to_sync_url(database_url)
    logger.debug("Creating database engine for %s", sync_url.split("://", 1)[0])
    return create_engine(sync_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create the session factory bound to engine."""
    return sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
