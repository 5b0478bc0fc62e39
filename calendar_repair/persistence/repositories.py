"""Repository protocol and in-memory implementation."""

from dataclasses import replace
from typing import Collection, Dict, Iterator, List, Optional, Protocol, runtime_checkable

from calendar_repair.persistence.models import EventReference, StoredEvent


@runtime_checkable
class EventRepository(Protocol):
    """Protocol for calendar event storage."""

    def count_candidates(self, instance_suffix: str) -> int:
        """Count imported events whose reference points into this instance."""
        ...

    def iter_candidates(self, instance_suffix: str) -> Iterator[StoredEvent]:
        """Stream imported events whose reference points into this instance."""
        ...

    def get_candidate(self, event_id: int, instance_suffix: str) -> Optional[StoredEvent]:
        """Get event by ID, but only if it is itself a candidate."""
        ...

    def delete_events(self, event_ids: Collection[int]) -> int:
        """Delete events by ID in one statement. Returns the number of IDs submitted."""
        ...

    def backfill_references(self, instance_suffix: str) -> int:
        """Give every event with an empty reference one of its own. Returns rows updated."""
        ...


class InMemoryEventRepository:
    """In-memory event repository for testing."""

    def __init__(self):
        self._events: Dict[int, StoredEvent] = {}
        self._next_id = 1
        self.lookups = 0
        self.delete_calls: List[List[int]] = []

    @staticmethod
    def _is_candidate(event: StoredEvent, instance_suffix: str) -> bool:
        return event.is_imported and event.references_instance(instance_suffix)

    def add(self, event: StoredEvent) -> StoredEvent:
        """Store an event, assigning the next ID if it has none."""
        if not event.id:
            event = replace(event, id=self._next_id)
        self._events[event.id] = event
        self._next_id = max(self._next_id, event.id + 1)
        return event

    def get(self, event_id: int) -> Optional[StoredEvent]:
        """Get event by ID regardless of candidacy."""
        return self._events.get(event_id)

    def count(self) -> int:
        return len(self._events)

    def count_candidates(self, instance_suffix: str) -> int:
        return sum(1 for e in self._events.values() if self._is_candidate(e, instance_suffix))

    def iter_candidates(self, instance_suffix: str) -> Iterator[StoredEvent]:
        # Snapshot IDs so deletions during iteration do not break the loop
        for event_id in sorted(self._events):
            event = self._events.get(event_id)
            if event is not None and self._is_candidate(event, instance_suffix):
                yield event

    def get_candidate(self, event_id: int, instance_suffix: str) -> Optional[StoredEvent]:
        self.lookups += 1
        event = self._events.get(event_id)
        if event is None or not self._is_candidate(event, instance_suffix):
            return None
        return event

    def delete_events(self, event_ids: Collection[int]) -> int:
        self.delete_calls.append(list(event_ids))
        for event_id in event_ids:
            self._events.pop(event_id, None)
        return len(event_ids)

    def backfill_references(self, instance_suffix: str) -> int:
        updated = 0
        for event_id, event in list(self._events.items()):
            if event.reference == "":
                reference = str(EventReference.for_event(event_id, instance_suffix))
                self._events[event_id] = replace(event, reference=reference)
                updated += 1
        return updated

    def clear(self) -> None:
        """Clear all events (for testing)."""
        self._events.clear()
        self._next_id = 1
        self.lookups = 0
        self.delete_calls.clear()
