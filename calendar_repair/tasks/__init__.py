"""Repair tasks for calendar events."""
from calendar_repair.tasks.ancestry import AncestorWalker, ParentResolver
from calendar_repair.tasks.backfill import backfill_references
from calendar_repair.tasks.batching import DEFAULT_BATCH_SIZE, batch_delete, chunked
from calendar_repair.tasks.candidates import CandidatePool, select_candidates
from calendar_repair.tasks.equality import looks_same, same_calendar, same_properties
from calendar_repair.tasks.reference_repair import (
    RepairOptions,
    RepairResult,
    UpgradeEventReferencesTask,
)

__all__ = [
    "AncestorWalker",
    "ParentResolver",
    "backfill_references",
    "DEFAULT_BATCH_SIZE",
    "batch_delete",
    "chunked",
    "CandidatePool",
    "select_candidates",
    "looks_same",
    "same_calendar",
    "same_properties",
    "RepairOptions",
    "RepairResult",
    "UpgradeEventReferencesTask",
]
