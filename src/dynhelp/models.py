"""Value objects passed between the help lookup, pager, and overlay layers."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Sequence, Union

from .tokens import Token


@dataclass(frozen=True, slots=True)
class HelpContext:
    """Command and parameter found under the edit cursor."""

    command_name: str | None = None
    parameter_name: str | None = None


@dataclass(frozen=True, slots=True)
class HelpQuery:
    command_name: str | None
    parameter_name: str | None
    full: bool


@dataclass(frozen=True, slots=True)
class FullHelpText:
    text: str


@dataclass(frozen=True, slots=True)
class ParameterHelp:
    """Short help record for one parameter of a command."""

    name: str
    type_name: str
    description_lines: tuple[str, ...] = ()
    required: bool = False
    position: str = ""
    default_value: str = ""
    accepts_pipeline_input: bool = False
    supports_wildcards: bool = False


@dataclass(frozen=True, slots=True)
class EmptyHelp:
    """Nothing to show: no command, nothing found, or the lookup failed."""


EMPTY_HELP = EmptyHelp()

HelpResult = Union[FullHelpText, ParameterHelp, EmptyHelp]


@dataclass(frozen=True, slots=True)
class EditorSnapshot:
    """Editor state a help request is evaluated against.

    ``initial_row`` is the buffer row where the prompt starts and
    ``input_end_row`` the last row occupied by the prompt and input. Help
    entry points return a corrected copy when the screen scrolled.
    """

    tokens: Sequence[Token]
    cursor: int
    initial_row: int
    input_end_row: int

    def shifted(self, delta: int) -> EditorSnapshot:
        """Return a copy with both rows moved by *delta* (negative is up)."""
        if delta == 0:
            return self
        return replace(
            self,
            initial_row=self.initial_row + delta,
            input_end_row=self.input_end_row + delta,
        )


@dataclass(slots=True)
class DisplayBlock:
    """Bookkeeping for one drawn overlay.

    ``extra_physical_lines`` counts rows used by wrapping beyond one row per
    line; ``clear`` erases exactly ``row_count`` rows from ``anchor_row``.
    """

    lines: tuple[str, ...]
    anchor_row: int
    restore_row: int
    restore_column: int
    extra_physical_lines: int = 0
    scrolled_rows: int = 0

    @property
    def row_count(self) -> int:
        return len(self.lines) + self.extra_physical_lines

    def scroll(self, rows: int) -> None:
        """Account for the buffer scrolling up by *rows*."""
        self.anchor_row -= rows
        self.restore_row -= rows
        self.scrolled_rows += rows
