#!/usr/bin/env python3
"""
Delete recursively imported calendar events and backfill missing references.

Reads DATABASE_URL and WWWROOT (or INSTANCE_SUFFIX) from the environment.
An instance suffix given on the command line overrides both.

Usage:
    python -m calendar_repair [INSTANCE_SUFFIX]
"""
import sys
from typing import List, Optional

from calendar_repair.core.database import create_db_engine, create_session_factory
from calendar_repair.observability.logging import configure_logging
from calendar_repair.persistence.sql_repositories import SqlEventRepository
from calendar_repair.settings import get_settings
from calendar_repair.tasks.reference_repair import RepairOptions, UpgradeEventReferencesTask


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) > 1 or any(arg.startswith("-") for arg in args):
        print("Usage: python -m calendar_repair [INSTANCE_SUFFIX]", file=sys.stderr)
        print("Example: python -m calendar_repair moodle.example.com", file=sys.stderr)
        return 1

    try:
        settings = get_settings()
        options = RepairOptions.from_settings(settings, args[0] if args else None)
    except ValueError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_format, settings.log_level)

    engine = create_db_engine(settings.database_url)
    session_factory = create_session_factory(engine)
    try:
        with session_factory() as session:
            repository = SqlEventRepository(session, fetch_size=settings.fetch_size)
            UpgradeEventReferencesTask(repository, options).execute()
    finally:
        engine.dispose()
    return 0


if __name__ == "__main__":
    sys.exit(main())
