"""On-screen width of display text."""

from __future__ import annotations

import re

from prompt_toolkit.utils import get_cwidth

# CSI sequences (colors, cursor movement) and OSC sequences (titles, links).
_ESCAPE_SEQUENCE = re.compile(r"\x1b\[[0-?]*[ -/]*[@-~]|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)")


def strip_escape_sequences(text: str) -> str:
    return _ESCAPE_SEQUENCE.sub("", text)


def length_in_buffer_cells(text: str) -> int:
    """Return the number of terminal cells *text* occupies.

    Escape sequences take no cells, wide (East Asian, emoji) characters take
    two, combining characters take none.
    """
    return sum(max(get_cwidth(char), 0) for char in strip_escape_sequences(text))


def extra_physical_lines(cell_width: int, buffer_width: int) -> int:
    """Rows a line of *cell_width* cells uses beyond its first one.

    A line that exactly fills ``k`` rows leaves the cursor on the last of them
    (deferred wrap), so it needs ``k - 1`` extra rows, not ``k``.
    """
    if buffer_width <= 0 or cell_width <= buffer_width:
        return 0
    extra = cell_width // buffer_width
    if cell_width % buffer_width == 0:
        extra -= 1
    return extra
