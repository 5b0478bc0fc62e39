"""
Terminal progress bar for long-running console jobs.

The bar is redrawn on a single line when writing to a terminal. Anywhere
else (log files, CI, pipes) each emitted update becomes its own line.
"""

import sys
from typing import Optional, Protocol, TextIO


class ProgressRenderer(Protocol):
    """Writes a rendered progress string to an output stream."""

    def render(self, progress: str, finished: bool) -> None:
        ...


class InPlaceRenderer:
    """Overwrites the current terminal line; ends the line once finished."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def render(self, progress: str, finished: bool) -> None:
        self._stream.write("\r" + progress)
        if finished:
            self._stream.write("\n")
        self._stream.flush()


class LineRenderer:
    """One line per update, for non-interactive destinations."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def render(self, progress: str, finished: bool) -> None:
        self._stream.write(progress + "\n")
        self._stream.flush()


def select_renderer(stream: TextIO) -> ProgressRenderer:
    """Pick the renderer matching the stream's capabilities."""
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return InPlaceRenderer(stream)
    return LineRenderer(stream)


class ProgressBar:
    """
    Textual progress bar.

    Only steps that are a multiple of ``steps_between_outputs``, or equal to
    ``steps_total``, produce output. All other updates are no-ops.
    """

    def __init__(
        self,
        steps_total: int,
        steps_between_outputs: int = 1,
        width: int = 100,
        show_steps: bool = True,
        show_percentage: bool = True,
        update_steps_now: Optional[int] = None,
        stream: Optional[TextIO] = None,
        renderer: Optional[ProgressRenderer] = None,
    ):
        """
        Args:
            steps_total: Number of steps corresponding to 100%. Must be >= 0.
            steps_between_outputs: Output cadence. Must be >= 1.
            width: Bar width in characters. Must be >= 1.
            show_steps: Append "<done>/<total>".
            show_percentage: Append the percentage.
            update_steps_now: If given, render this many steps immediately.
            stream: Output stream (defaults to stdout).
            renderer: Explicit rendering strategy; chosen from the stream if omitted.
        """
        if steps_total < 0:
            raise ValueError("steps_total must be greater than or equal to 0")
        if steps_between_outputs < 1:
            raise ValueError("steps_between_outputs must be greater than or equal to 1")
        if width < 1:
            raise ValueError("width must be greater than or equal to 1")
        self.steps_total = steps_total
        self.steps_between_outputs = steps_between_outputs
        self.width = width
        self.show_steps = show_steps
        self.show_percentage = show_percentage
        self._renderer = renderer or select_renderer(stream or sys.stdout)
        if update_steps_now is not None:
            self.update(update_steps_now)

    def _fraction(self, steps_done: int, scale: int) -> int:
        """steps_done/steps_total scaled to 0..scale, rounded down."""
        if self.steps_total == 0:
            return scale
        done = min(max(0, steps_done), self.steps_total)
        return done * scale // self.steps_total

    def get_string(self, steps_done: int) -> str:
        """Return the bar for the given number of steps done."""
        filled = self._fraction(steps_done, self.width)
        empty = self.width - filled
        output = "[" + "=" * filled + ">" + " " * empty + "]"
        if self.show_steps:
            output += f" - {steps_done}/{self.steps_total}"
        if self.show_percentage:
            output += " (%3d%%)" % self._fraction(steps_done, 100)
        return output

    def update(self, steps_done: int) -> None:
        """Render the bar if steps_done hits the cadence or the total."""
        if steps_done != self.steps_total and steps_done % self.steps_between_outputs != 0:
            return
        finished = steps_done >= self.steps_total
        self._renderer.render(self.get_string(steps_done), finished)
