"""Temporary multi-line overlays drawn below the input line.

An overlay is drawn, a key is read, and the overlay is erased again. Drawing
may scroll the terminal buffer (the block is taller than the space left, or a
line wraps past the bottom); every scroll moves the block's anchor and the
saved cursor up by the same number of rows, so clearing and cursor
restoration refer to the buffer's current contents.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from .console import Console
from .errors import OverlayStateError
from .logging import log_event
from .models import DisplayBlock
from .text_width import extra_physical_lines, length_in_buffer_cells


class OverlayState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    DRAWN = "drawn"
    CLEARING = "clearing"


class OverlayRenderer:
    """Draws and clears one overlay block at a time."""

    def __init__(self, console: Console) -> None:
        self._console = console
        self._state = OverlayState.IDLE
        self._block: DisplayBlock | None = None

    @property
    def state(self) -> OverlayState:
        return self._state

    def draw(self, lines: Sequence[str], below_row: int) -> DisplayBlock:
        """Draw *lines* starting on the row after *below_row*.

        The cursor is put back where it was before drawing, moved up by any
        rows the buffer scrolled meanwhile.
        """
        if self._state is not OverlayState.IDLE:
            raise OverlayStateError(f"Cannot draw an overlay while {self._state.value}")

        self._state = OverlayState.DRAWING
        try:
            block = self._draw(tuple(lines), below_row)
        except BaseException:
            self._state = OverlayState.IDLE
            raise

        self._block = block
        self._state = OverlayState.DRAWN
        log_event(
            "overlay_draw",
            level=logging.DEBUG,
            line_count=len(block.lines),
            extra_physical_lines=block.extra_physical_lines,
            anchor_row=block.anchor_row,
            scrolled_rows=block.scrolled_rows,
            buffer_width=self._console.buffer_width,
        )
        return block

    def clear(self, block: DisplayBlock) -> None:
        """Erase exactly the rows *block* occupies."""
        if self._state is not OverlayState.DRAWN or block is not self._block:
            raise OverlayStateError("Only the currently drawn overlay can be cleared")

        self._state = OverlayState.CLEARING
        try:
            self._console.write_blank_lines(block.anchor_row, block.row_count)
        finally:
            self._block = None
            self._state = OverlayState.IDLE
        log_event(
            "overlay_clear",
            level=logging.DEBUG,
            anchor_row=block.anchor_row,
            row_count=block.row_count,
        )

    def _draw(self, lines: tuple[str, ...], below_row: int) -> DisplayBlock:
        console = self._console
        block = DisplayBlock(
            lines=lines,
            anchor_row=below_row + 1,
            restore_row=console.cursor_top,
            restore_column=console.cursor_left,
        )

        if block.anchor_row >= console.buffer_height:
            # Input ends on the last row: open a row for the block first.
            console.set_cursor_position(0, below_row)
            self._adjust_for_possible_scroll(block, 1)
            console.write("\n")
        console.set_cursor_position(0, block.anchor_row)

        buffer_width = console.buffer_width
        last_index = len(lines) - 1
        for index, line in enumerate(lines):
            extra = extra_physical_lines(length_in_buffer_cells(line), buffer_width)
            if extra > 0:
                self._adjust_for_possible_scroll(block, extra)
                block.extra_physical_lines += extra

            console.write(line)

            # Line feeds go between lines only, never after the last one.
            if index != last_index:
                self._adjust_for_possible_scroll(block, 1)
                console.write("\n")

        console.set_cursor_position(block.restore_column, max(block.restore_row, 0))
        return block

    def _adjust_for_possible_scroll(self, block: DisplayBlock, rows: int) -> None:
        """Record the scroll caused by moving the cursor down *rows* rows."""
        scrolled = self._console.cursor_top + rows + 1 - self._console.buffer_height
        if scrolled > 0:
            block.scroll(scrolled)


def show_overlay(
    renderer: OverlayRenderer,
    console: Console,
    lines: Sequence[str],
    below_row: int,
) -> tuple[DisplayBlock, str]:
    """Draw *lines*, wait for one key, and clear the overlay again.

    Returns the drawn block (for its scroll bookkeeping) and the key pressed.
    """
    block = renderer.draw(lines, below_row)
    try:
        key = console.read_key()
    finally:
        renderer.clear(block)
    return block, key
