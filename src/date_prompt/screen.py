"""In-place redraw of a prompt block.

``ScreenManager`` is the render sink of a prompt: every ``render`` call
erases the rows written by the previous call and paints the new content
followed by an optional bottom line (used for validation errors).
``done`` leaves the last frame on screen and moves below it.
"""

from __future__ import annotations

import logging

from date_prompt.terminal import Terminal
from date_prompt.utils import count_rows

logger = logging.getLogger(__name__)


class ScreenManager:
    """Redraws a block of lines in place on a :class:`Terminal`."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal
        self.content: str = ""
        self.bottom_content: str = ""
        self.render_count: int = 0
        # Row of the cursor inside the block written by the previous frame
        self._cursor_row: int = 0
        self._active: bool = False

    def render(self, content: str, bottom_content: str = "") -> None:
        """Replace the previous frame with *content* and *bottom_content*."""
        self.content = content
        self.bottom_content = bottom_content
        self.render_count += 1
        self._paint()

    def refresh(self) -> None:
        """Repaint the last frame, e.g. after a terminal resize."""
        if self.render_count:
            self._paint()

    def done(self) -> None:
        """Leave the current frame on screen and move the cursor below it."""
        if self._active:
            self.terminal.write("\r\n")
        self._active = False
        self._cursor_row = 0

    def _erase_previous(self) -> None:
        if not self._active:
            return
        self.terminal.move_by(-self._cursor_row)
        self.terminal.write("\r")
        self.terminal.clear_from_cursor()

    def _paint(self) -> None:
        self._erase_previous()

        lines = self.content.split("\n")
        if self.bottom_content:
            lines.extend(self.bottom_content.split("\n"))

        columns = self.terminal.columns
        out: list[str] = []
        rows = 0
        for i, line in enumerate(lines):
            if i > 0:
                out.append("\r\n")
            out.append(line)
            rows += count_rows(line, columns)

        self.terminal.write("".join(out))
        self._cursor_row = rows - 1
        self._active = True
        logger.debug("Rendered prompt frame (%d rows)", rows)
