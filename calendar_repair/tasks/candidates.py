"""Selection of the events the clean-up considers at all."""

from dataclasses import dataclass
from typing import Iterator

from calendar_repair.persistence.models import StoredEvent
from calendar_repair.persistence.repositories import EventRepository


@dataclass
class CandidatePool:
    """Number of candidates plus a forward-only stream over them."""
    total: int
    events: Iterator[StoredEvent]


def select_candidates(repository: EventRepository, instance_suffix: str) -> CandidatePool:
    """
    Imported events whose reference ends with ``@<instance_suffix>``.

    Such events were almost certainly imported from this same instance.
    The stream is lazy; nothing is fetched until it is iterated.
    """
    return CandidatePool(
        total=repository.count_candidates(instance_suffix),
        events=repository.iter_candidates(instance_suffix),
    )
