"""Console abstraction used by the overlay renderer and pagers.

Rows and columns are zero-based buffer coordinates. ``TerminalConsole``
implements the protocol on top of prompt_toolkit's VT100 input/output and
asks the terminal for the cursor position (CPR) instead of tracking it.
"""

from __future__ import annotations

import select
import time
from typing import Protocol

from prompt_toolkit.input import Input, create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from prompt_toolkit.output import Output, create_output

# Seconds to wait before a lone ESC is taken as the escape key.
_ESCAPE_TIMEOUT = 0.1
# Seconds to wait for the terminal to answer a cursor position request.
_CPR_TIMEOUT = 1.0


class Console(Protocol):
    @property
    def cursor_top(self) -> int: ...

    @property
    def cursor_left(self) -> int: ...

    @property
    def buffer_width(self) -> int: ...

    @property
    def buffer_height(self) -> int: ...

    def set_cursor_position(self, left: int, top: int) -> None: ...

    def write(self, text: str) -> None:
        """Write text at the cursor; ``"\\n"`` moves to column 0 of the next row."""
        ...

    def write_blank_lines(self, top: int, count: int) -> None:
        """Blank *count* rows starting at *top*, leaving the cursor where it was."""
        ...

    def read_key(self) -> str:
        """Block until one key is pressed and return its name."""
        ...


def key_name(key_press: KeyPress) -> str:
    """Return ``"a"`` for printable keys and the binding name (``"pageup"``) otherwise."""
    key = key_press.key
    if isinstance(key, Keys):
        return key.value
    return key


class TerminalConsole:
    """Console over a VT100 terminal (POSIX)."""

    def __init__(self, output: Output | None = None, input: Input | None = None) -> None:
        self._output = output if output is not None else create_output()
        self._input = input if input is not None else create_input()
        self._pending: list[KeyPress] = []
        self._last_position = (0, 0)

    # -- geometry ----------------------------------------------------------

    @property
    def buffer_width(self) -> int:
        return self._output.get_size().columns

    @property
    def buffer_height(self) -> int:
        return self._output.get_size().rows

    @property
    def cursor_top(self) -> int:
        return self._query_cursor_position()[1]

    @property
    def cursor_left(self) -> int:
        return self._query_cursor_position()[0]

    def set_cursor_position(self, left: int, top: int) -> None:
        # VT100 coordinates are one-based.
        self._output.cursor_goto(top + 1, left + 1)
        self._output.flush()
        self._last_position = (left, top)

    # -- output ------------------------------------------------------------

    def write(self, text: str) -> None:
        self._output.write_raw(text.replace("\r\n", "\n").replace("\n", "\r\n"))
        self._output.flush()

    def write_blank_lines(self, top: int, count: int) -> None:
        left, saved_top = self._query_cursor_position()
        for row in range(top, top + count):
            self._output.cursor_goto(row + 1, 1)
            self._output.erase_end_of_line()
        self.set_cursor_position(left, saved_top)

    # -- input -------------------------------------------------------------

    def read_key(self) -> str:
        if not self._pending:
            with self._input.raw_mode():
                self._pending.extend(self._poll_key_presses(timeout=None))
        return key_name(self._pending.pop(0))

    def _poll_key_presses(self, timeout: float | None) -> list[KeyPress]:
        """Return the next parsed key presses, or ``[]`` once *timeout* expires."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            key_presses = self._input.read_keys()
            if key_presses:
                return key_presses

            wait = _ESCAPE_TIMEOUT
            if deadline is not None:
                wait = min(wait, max(0.0, deadline - time.monotonic()))
            ready, _, _ = select.select([self._input.fileno()], [], [], wait)
            if ready:
                continue

            # A lone ESC stays buffered in the parser until flushed.
            key_presses = self._input.flush_keys()
            if key_presses:
                return key_presses
            if deadline is not None and time.monotonic() >= deadline:
                return []

    def _query_cursor_position(self) -> tuple[int, int]:
        """Ask the terminal where the cursor is; returns ``(left, top)``."""
        self._output.ask_for_cpr()
        self._output.flush()
        deadline = time.monotonic() + _CPR_TIMEOUT
        with self._input.raw_mode():
            while time.monotonic() < deadline:
                for key_press in self._poll_key_presses(deadline - time.monotonic()):
                    if key_press.key != Keys.CPRResponse:
                        self._pending.append(key_press)
                        continue
                    # Response format: ESC [ row ; column R
                    row, column = key_press.data[2:-1].split(";")
                    self._last_position = (int(column) - 1, int(row) - 1)
                    return self._last_position
        return self._last_position
