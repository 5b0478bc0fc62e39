"""Equality checks used to decide whether an imported event is a redundant clone."""

from typing import Any, Iterable

CONTENT_FIELDS = (
    "name",
    "description",
    "description_format",
    "start_time",
    "duration",
    "priority",
    "location",
)

CALENDAR_FIELDS = (
    "category_id",
    "course_id",
    "group_id",
    "user_id",
)


def _identical(value1: Any, value2: Any) -> bool:
    # 1, 1.0 and True compare equal in Python; they are different values here
    return type(value1) is type(value2) and value1 == value2


def same_properties(properties: Iterable[str], obj1: Any, obj2: Any) -> bool:
    """True if obj1 and obj2 are identical in every listed attribute (missing = None)."""
    for prop in properties:
        if not _identical(getattr(obj1, prop, None), getattr(obj2, prop, None)):
            return False
    return True


def looks_same(event1: Any, event2: Any) -> bool:
    """True if both events are identical in all content fields."""
    return same_properties(CONTENT_FIELDS, event1, event2)


def same_calendar(event1: Any, event2: Any) -> bool:
    """
    True if both events belong to the same calendar.

    That is the case when they share the import source, or otherwise when
    category, course, group and user all match.
    """
    if same_properties(("import_source_id",), event1, event2):
        return True
    return same_properties(CALENDAR_FIELDS, event1, event2)
