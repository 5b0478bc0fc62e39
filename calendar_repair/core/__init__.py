"""
Core infrastructure for the repair job.

- Database engine and session factory
- Declarative base for ORM models
"""

from calendar_repair.core.database import (
    Base,
    create_db_engine,
    create_session_factory,
    to_sync_url,
)

__all__ = [
    "Base",
    "create_db_engine",
    "create_session_factory",
    "to_sync_url",
]
