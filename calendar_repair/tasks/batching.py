"""Batched deletion of events."""

from typing import Iterable, Iterator, List

from calendar_repair.observability.logging import get_logger
from calendar_repair.persistence.repositories import EventRepository

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000


def chunked(ids: Iterable[int], size: int) -> Iterator[List[int]]:
    """Split ids into consecutive lists of at most size elements."""
    if size < 1:
        raise ValueError("batch size must be greater than or equal to 1")
    batch: List[int] = []
    for event_id in ids:
        batch.append(event_id)
        if len(batch) == size:
            yield batch
            batch = []
    if batch:
        yield batch


def batch_delete(
    repository: EventRepository,
    event_ids: Iterable[int],
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """
    Delete events issuing one statement per batch.

    Keeps IN clauses bounded. Each batch is committed on its own, so an
    interrupted run leaves whole batches deleted and nothing half-done.

    IDs go newest first. A clone always has a higher ID than the event it was
    imported from, so if the run stops midway every clone still left keeps
    its parent chain and the next run finds it again.

    Returns:
        Number of IDs submitted for deletion
    """
    if batch_size < 1:
        raise ValueError("batch_size must be greater than or equal to 1")
    deleted = 0
    for number, batch in enumerate(chunked(sorted(event_ids, reverse=True), batch_size), start=1):
        deleted += repository.delete_events(batch)
        logger.debug(f"Deleted batch {number} ({len(batch)} events)", batch=number)
    return deleted
