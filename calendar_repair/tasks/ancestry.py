"""
Walking reference chains to find recursively imported events.

Terminology: if event ``E`` has the reference ``"123@<instance>"`` and event
123 is itself a candidate, event 123 is the *parent* of ``E``. Any event
further up that chain is an *ancestor* of ``E``.

An event is deleted when it has an ancestor that looks the same and belongs
to the same calendar. This catches the self-subscription case (a calendar
importing its own feed) as well as cycles of several subscriptions importing
from one another, where the walk has to continue through ancestors in other
calendars before it comes back around.
"""

from typing import Iterable, Optional, Set

from calendar_repair.observability.logging import get_logger
from calendar_repair.output.progress import ProgressBar
from calendar_repair.persistence.models import StoredEvent
from calendar_repair.persistence.repositories import EventRepository
from calendar_repair.tasks.equality import looks_same, same_calendar

logger = get_logger(__name__)


class ParentResolver:
    """Looks up the parent of an event, if it has one that is also a candidate."""

    def __init__(self, repository: EventRepository, instance_suffix: str):
        self._repository = repository
        self._instance_suffix = instance_suffix

    @property
    def instance_suffix(self) -> str:
        return self._instance_suffix

    def resolve(self, event: StoredEvent) -> Optional[StoredEvent]:
        """Return the parent event, or None if the reference is ill-formed or dangling."""
        reference = event.parent_reference
        if reference is None:
            return None
        return self._repository.get_candidate(reference.parent_id, self._instance_suffix)


class AncestorWalker:
    """
    Decides which candidates are redundant clones.

    ``to_delete`` is shared by every walk of one run. Once an ancestor is
    known to be a clone, every descendant that reaches it is one too, so
    later walks stop there instead of climbing the rest of the chain.
    """

    def __init__(self, resolver: ParentResolver):
        self._resolver = resolver
        self.to_delete: Set[int] = set()
        self._logger = logger.with_context(instance_suffix=resolver.instance_suffix)

    def walk(self, event: StoredEvent) -> bool:
        """Walk up from event. Returns True if it was marked for deletion."""
        visited = {event.id}
        ancestor = self._resolver.resolve(event)
        while ancestor is not None:
            if ancestor.id in self.to_delete:
                self.to_delete.add(event.id)
                return True
            if ancestor.id in visited:
                # Reference loop that never passed through a clone; keep the event.
                self._logger.warning(
                    f"Reference cycle at event {ancestor.id} while walking event {event.id}",
                    event_id=event.id,
                    ancestor_id=ancestor.id,
                )
                return False
            if not looks_same(event, ancestor):
                return False
            if same_calendar(event, ancestor):
                self.to_delete.add(event.id)
                return True
            # Same content, different calendar: possibly an import cycle.
            visited.add(ancestor.id)
            ancestor = self._resolver.resolve(ancestor)
        return False

    def find_clones(
        self,
        events: Iterable[StoredEvent],
        progress: Optional[ProgressBar] = None,
    ) -> Set[int]:
        """Walk every event and return the IDs of all clones found."""
        for done, event in enumerate(events, start=1):
            self.walk(event)
            if progress is not None:
                progress.update(done)
        return self.to_delete
