"""SQLAlchemy repository implementation."""

import logging
from typing import Collection, Iterator, Optional

from sqlalchemy import String, and_, cast, delete, func, select, update
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from calendar_repair.persistence.models import StoredEvent
from calendar_repair.persistence.orm import EventModel

logger = logging.getLogger(__name__)


# Selected as plain columns so streamed rows never enter the session's
# identity map.
_EVENT_COLUMNS = (
    EventModel.id,
    EventModel.reference,
    EventModel.import_source_id,
    EventModel.name,
    EventModel.description,
    EventModel.description_format,
    EventModel.start_time,
    EventModel.duration,
    EventModel.priority,
    EventModel.location,
    EventModel.category_id,
    EventModel.course_id,
    EventModel.group_id,
    EventModel.user_id,
)


def _row_to_stored_event(row: Row) -> StoredEvent:
    """Convert a selected event row to the StoredEvent domain model."""
    return StoredEvent(
        id=row.id,
        reference=row.reference,
        import_source_id=row.import_source_id,
        name=row.name,
        description=row.description,
        description_format=row.description_format,
        start_time=row.start_time,
        duration=row.duration,
        priority=row.priority,
        location=row.location,
        category_id=row.category_id,
        course_id=row.course_id,
        group_id=row.group_id,
        user_id=row.user_id,
    )


def _candidate_filter(instance_suffix: str):
    """Imported events whose reference ends with '@<instance_suffix>'."""
    return and_(
        EventModel.import_source_id.is_not(None),
        EventModel.reference.endswith("@" + instance_suffix, autoescape=True),
    )


class SqlEventRepository:
    """
    SQLAlchemy implementation of EventRepository.

    All calls share one session, so the candidate stream and the parent
    lookups run on the same connection. Deletes and the backfill commit
    immediately.
    """

    def __init__(self, session: Session, fetch_size: int = 500):
        """
        Initialize repository.

        Args:
            session: Open SQLAlchemy session
            fetch_size: Rows fetched per round trip while streaming candidates
        """
        if fetch_size < 1:
            raise ValueError("fetch_size must be greater than or equal to 1")
        self._session = session
        self._fetch_size = fetch_size

    def count_candidates(self, instance_suffix: str) -> int:
        """Count imported events whose reference points into this instance."""
        query = (
            select(func.count())
            .select_from(EventModel)
            .where(_candidate_filter(instance_suffix))
        )
        return self._session.execute(query).scalar_one()

    def iter_candidates(self, instance_suffix: str) -> Iterator[StoredEvent]:
        """Stream candidates, fetch_size rows at a time."""
        query = (
            select(*_EVENT_COLUMNS)
            .where(_candidate_filter(instance_suffix))
            .execution_options(yield_per=self._fetch_size)
        )
        result = self._session.execute(query)
        try:
            for row in result:
                yield _row_to_stored_event(row)
        finally:
            result.close()

    def get_candidate(self, event_id: int, instance_suffix: str) -> Optional[StoredEvent]:
        """Point lookup of an event that is itself a candidate."""
        query = select(*_EVENT_COLUMNS).where(
            and_(
                EventModel.id == event_id,
                _candidate_filter(instance_suffix),
            )
        )
        row = self._session.execute(query).first()
        if row is None:
            return None
        return _row_to_stored_event(row)

    def delete_events(self, event_ids: Collection[int]) -> int:
        """Delete events with one IN clause and commit."""
        if not event_ids:
            return 0
        self._session.execute(
            delete(EventModel)
            .where(EventModel.id.in_(list(event_ids)))
            .execution_options(synchronize_session=False)
        )
        self._session.commit()
        logger.debug("Deleted batch of %d events", len(event_ids))
        return len(event_ids)

    def backfill_references(self, instance_suffix: str) -> int:
        """Set reference = '<id>@<instance_suffix>' where it is empty, and commit."""
        result = self._session.execute(
            update(EventModel)
            .where(EventModel.reference == "")
            .values(reference=cast(EventModel.id, String).concat("@" + instance_suffix))
            .execution_options(synchronize_session=False)
        )
        self._session.commit()
        return result.rowcount
