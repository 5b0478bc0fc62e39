"""Console output helpers."""

from calendar_repair.output.progress import (
    InPlaceRenderer,
    LineRenderer,
    ProgressBar,
    ProgressRenderer,
    select_renderer,
)

__all__ = [
    "InPlaceRenderer",
    "LineRenderer",
    "ProgressBar",
    "ProgressRenderer",
    "select_renderer",
]
