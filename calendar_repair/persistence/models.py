"""Persistence domain models."""

import re
from dataclasses import dataclass
from typing import Optional


_PARENT_ID_PATTERN = re.compile(r"[0-9]+")

# Largest value a 64-bit integer id column can hold
MAX_EVENT_ID = 2**63 - 1


@dataclass(frozen=True)
class EventReference:
    """
    Typed pointer from an imported event back to the event it was cloned from.

    Events exported by older releases carried a reference string of the form
    ``"<id>@<instance suffix>"``. That string is only parsed here; everything
    downstream works with the typed value.
    """
    parent_id: int
    instance_suffix: str

    @classmethod
    def parse(cls, reference: Optional[str]) -> Optional["EventReference"]:
        """Parse a legacy reference string. Returns None if it is ill-formed."""
        if not reference:
            return None
        parts = reference.split("@", 1)
        if len(parts) != 2:
            return None
        parent_part, instance_suffix = parts
        if not _PARENT_ID_PATTERN.fullmatch(parent_part):
            return None
        parent_id = int(parent_part)
        if parent_id > MAX_EVENT_ID:
            # No stored event can carry this id
            return None
        return cls(parent_id=parent_id, instance_suffix=instance_suffix)

    @classmethod
    def for_event(cls, event_id: int, instance_suffix: str) -> "EventReference":
        """Reference an event of this instance by its id."""
        return cls(parent_id=event_id, instance_suffix=instance_suffix)

    def __str__(self) -> str:
        return f"{self.parent_id}@{self.instance_suffix}"


@dataclass
class StoredEvent:
    """
    Domain model for a stored calendar event.

    This is the persistence layer's view of an event,
    separate from the SQLAlchemy ORM model.
    """
    id: int
    reference: str = ""
    import_source_id: Optional[int] = None

    # Content
    name: str = ""
    description: Optional[str] = None
    description_format: int = 0
    start_time: int = 0
    duration: int = 0
    priority: Optional[int] = None
    location: Optional[str] = None

    # Calendar membership
    category_id: int = 0
    course_id: int = 0
    group_id: int = 0
    user_id: int = 0

    @property
    def parent_reference(self) -> Optional[EventReference]:
        """The parsed reference, or None when it does not point at an event."""
        return EventReference.parse(self.reference)

    @property
    def is_imported(self) -> bool:
        """True if the event came in through an import source."""
        return self.import_source_id is not None

    def references_instance(self, instance_suffix: str) -> bool:
        """True if the raw reference ends with ``@<instance_suffix>``."""
        return self.reference.endswith("@" + instance_suffix)
