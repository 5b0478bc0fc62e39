"""Backfill of missing event references."""

from calendar_repair.persistence.repositories import EventRepository


def backfill_references(repository: EventRepository, instance_suffix: str) -> int:
    """
    Assign ``"<id>@<instance_suffix>"`` to every event with an empty reference.

    This is the format older releases generated on export, so existing
    subscribers keep matching the same events. Non-empty references are
    left alone, which makes the operation idempotent.

    Returns:
        Number of events updated
    """
    if not instance_suffix:
        raise ValueError("instance_suffix must not be empty")
    return repository.backfill_references(instance_suffix)
