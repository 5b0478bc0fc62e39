"""Persistence module for the repair job."""

from calendar_repair.persistence.models import (
    EventReference,
    StoredEvent,
)
from calendar_repair.persistence.orm import EventModel
from calendar_repair.persistence.repositories import (
    EventRepository,
    InMemoryEventRepository,
)
from calendar_repair.persistence.sql_repositories import SqlEventRepository

__all__ = [
    # Models
    "EventReference",
    "StoredEvent",
    "EventModel",
    # Protocols
    "EventRepository",
    # Implementations
    "InMemoryEventRepository",
    "SqlEventRepository",
]
