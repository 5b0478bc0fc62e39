"""
One-off repair of calendar event references.

Older releases exported events with a reference of the form
``"<id>@<instance>"``. A calendar subscribed to a feed of the same instance
(directly, or through a ring of other subscriptions) re-imported its own
events over and over, each time producing a clone whose reference points at
the previous copy. This task deletes those clones and then gives every event
without a reference one in the old format.

The task is safe to re-run: deleted clones drop out of the candidate pool
and the backfill only touches empty references.
"""

import sys
from dataclasses import dataclass
from typing import Optional, TextIO

from sqlalchemy.exc import SQLAlchemyError

from calendar_repair.observability.logging import get_logger
from calendar_repair.output.progress import ProgressBar
from calendar_repair.persistence.repositories import EventRepository
from calendar_repair.settings import Settings, get_settings
from calendar_repair.tasks.ancestry import AncestorWalker, ParentResolver
from calendar_repair.tasks.backfill import backfill_references
from calendar_repair.tasks.batching import DEFAULT_BATCH_SIZE, batch_delete
from calendar_repair.tasks.candidates import select_candidates

logger = get_logger(__name__)


@dataclass(frozen=True)
class RepairOptions:
    """Immutable parameters of one repair run."""
    instance_suffix: str
    delete_batch_size: int = DEFAULT_BATCH_SIZE
    progress_every: int = 100
    progress_width: int = 50

    def __post_init__(self):
        if not self.instance_suffix:
            raise ValueError("instance_suffix must not be empty")
        if self.delete_batch_size < 1:
            raise ValueError("delete_batch_size must be greater than or equal to 1")
        if self.progress_every < 1:
            raise ValueError("progress_every must be greater than or equal to 1")
        if self.progress_width < 1:
            raise ValueError("progress_width must be greater than or equal to 1")

    @classmethod
    def from_settings(cls, settings: Settings, instance_suffix: Optional[str] = None) -> "RepairOptions":
        """Build options from settings; an explicit suffix wins over configuration."""
        return cls(
            instance_suffix=instance_suffix or settings.instance_suffix_or_default,
            delete_batch_size=settings.delete_batch_size,
            progress_every=settings.progress_every,
            progress_width=settings.progress_width,
        )


@dataclass
class RepairResult:
    """Counts reported by a repair run."""
    candidates: int = 0
    deleted: int = 0
    backfilled: int = 0


class UpgradeEventReferencesTask:
    """Deletes recursively imported events and backfills missing references."""

    name = "Upgrade calendar event references & clean up recursive imports"

    def __init__(
        self,
        repository: EventRepository,
        options: RepairOptions,
        progress_stream: Optional[TextIO] = None,
    ):
        self._repository = repository
        self.options = options
        self._progress_stream = progress_stream or sys.stdout
        self._logger = logger.with_context(instance_suffix=options.instance_suffix)

    @classmethod
    def instance(
        cls,
        repository: EventRepository,
        instance_suffix: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> "UpgradeEventReferencesTask":
        """
        Convenience constructor.

        If instance_suffix is None, the suffix configured in settings (or the
        scheme-stripped WWWROOT) is used.
        """
        settings = settings or get_settings()
        return cls(repository, RepairOptions.from_settings(settings, instance_suffix))

    def execute(self) -> RepairResult:
        """Run the clean-up, then the backfill."""
        suffix = self.options.instance_suffix
        self._logger.info(f"Running cleanup code for the instance suffix '{suffix}'.")
        result = RepairResult()
        try:
            result.candidates, result.deleted = self._clean_up()
            self._logger.info(
                f"Deleted {result.deleted} recursively imported calendar events.",
                deleted=result.deleted,
            )
            result.backfilled = self.ensure_reference_for_all_events()
            self._logger.info(
                f"Assigned references to {result.backfilled} calendar events without one.",
                backfilled=result.backfilled,
            )
        except SQLAlchemyError:
            self._logger.exception("Storage access failed; the task can be re-run safely.")
            raise
        return result

    def clean_up_recursive_events(self) -> int:
        """
        Delete all recursively imported events.

        Candidates are streamed one at a time and parents are looked up one
        at a time, since descriptions can be large. In the worst case the
        number of lookups is linear in the number of candidates.

        Returns:
            Number of events deleted
        """
        return self._clean_up()[1]

    def _clean_up(self):
        pool = select_candidates(self._repository, self.options.instance_suffix)
        self._logger.info(
            f"Found {pool.total} events that were likely imported from the same instance.",
            candidates=pool.total,
        )
        progress = ProgressBar(
            pool.total,
            steps_between_outputs=self.options.progress_every,
            width=self.options.progress_width,
            stream=self._progress_stream,
        )
        walker = AncestorWalker(ParentResolver(self._repository, self.options.instance_suffix))
        to_delete = walker.find_clones(pool.events, progress)
        deleted = batch_delete(self._repository, to_delete, self.options.delete_batch_size)
        return pool.total, deleted

    def ensure_reference_for_all_events(self) -> int:
        """
        Assign a reference to every event that has an empty one.

        Returns:
            Number of events updated
        """
        return backfill_references(self._repository, self.options.instance_suffix)
