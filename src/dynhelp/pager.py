"""Full-help pagers: the built-in overlay pager and an external program.

The variant is chosen once from the options (``create_pager``). Both render
``(text, pattern, below_row)`` and return how many rows the screen scrolled.
"""

from __future__ import annotations

import logging
import os
import re
import shlex
import subprocess
import tempfile
import time
from contextlib import contextmanager
from typing import Iterator, Protocol, Sequence

from .colors import colorize
from .console import Console
from .constants import HELP_TEMP_FILE_PREFIX, HELP_TEMP_FILE_SUFFIX, PAGER_REGEX_PLACEHOLDER
from .errors import ExternalPagerError
from .formatting import text_to_lines
from .logging import log_event
from .options import HelpOptions, PagerKind
from .overlay import OverlayRenderer, show_overlay
from .text_width import extra_physical_lines, length_in_buffer_cells
from .time_utils import elapsed_ms

NEXT_PAGE_KEYS = frozenset({" ", "f", "pagedown"})
PREVIOUS_PAGE_KEYS = frozenset({"b", "pageup"})


class Pager(Protocol):
    kind: PagerKind

    def render(self, text: str, pattern: str | None, below_row: int) -> int: ...


# ---------------------------------------------------------------------------
# Built-in pager
# ---------------------------------------------------------------------------


def find_first_match(
    lines: Sequence[str], pattern: str | None
) -> tuple[re.Pattern[str] | None, int | None]:
    """Compile *pattern* and find the first line it matches.

    An invalid pattern is ignored: the text is still shown, from the top.
    """
    if not pattern:
        return None, None
    try:
        compiled = re.compile(pattern)
    except re.error:
        return None, None
    for index, line in enumerate(lines):
        if compiled.search(line):
            return compiled, index
    return compiled, None


class InternalPager:
    """Shows help text as overlay pages below the input line.

    Text that fits on one screen is a single overlay dismissed by any key.
    Longer text gets a status line: space, ``f`` or PageDown move forward
    (and close on the last page), ``b`` or PageUp move back, anything else
    closes.
    """

    kind = PagerKind.INTERNAL

    def __init__(
        self,
        renderer: OverlayRenderer,
        console: Console,
        emphasis_color: str = "",
    ) -> None:
        self._renderer = renderer
        self._console = console
        self._emphasis_color = emphasis_color

    def render(self, text: str, pattern: str | None = None, below_row: int = 0) -> int:
        lines = text_to_lines(text)
        if not lines:
            return 0

        compiled, match_index = find_first_match(lines, pattern)
        buffer_width = self._console.buffer_width
        row_costs = [_row_count(line, buffer_width) for line in lines]
        # Rows below the input line; the input line itself stays on screen.
        available = max(1, self._console.buffer_height - 1)
        paged = sum(row_costs) > available
        # The status line is cut to one row.
        budget = max(1, available - 1)
        start = match_index if paged and match_index is not None else 0

        scrolled = 0
        while True:
            end = _page_end(row_costs, start, budget) if paged else len(lines)
            page = [self._emphasize(line, compiled) for line in lines[start:end]]
            if paged:
                page.append(_status_line(start, end - start, len(lines))[:buffer_width])

            block, key = show_overlay(self._renderer, self._console, page, below_row)
            scrolled += block.scrolled_rows
            below_row -= block.scrolled_rows

            if not paged:
                return scrolled
            if key in NEXT_PAGE_KEYS:
                if end >= len(lines):
                    return scrolled
                start = end
            elif key in PREVIOUS_PAGE_KEYS:
                start = _page_start_before(row_costs, start, budget)
            else:
                return scrolled

    def _emphasize(self, line: str, compiled: re.Pattern[str] | None) -> str:
        if compiled is not None and compiled.search(line):
            return colorize(line, self._emphasis_color)
        return line


def _row_count(line: str, buffer_width: int) -> int:
    return 1 + extra_physical_lines(length_in_buffer_cells(line), buffer_width)


def _page_end(row_costs: Sequence[int], start: int, budget: int) -> int:
    """End index of the page starting at *start* that fits *budget* rows.

    A page holds at least one line, even one taller than the budget.
    """
    used = row_costs[start]
    end = start + 1
    while end < len(row_costs) and used + row_costs[end] <= budget:
        used += row_costs[end]
        end += 1
    return end


def _page_start_before(row_costs: Sequence[int], start: int, budget: int) -> int:
    """Start index of the page that fits *budget* rows and ends before *start*."""
    if start <= 0:
        return 0
    used = row_costs[start - 1]
    begin = start - 1
    while begin > 0 and used + row_costs[begin - 1] <= budget:
        used += row_costs[begin - 1]
        begin -= 1
    return begin


def _status_line(start: int, shown: int, total: int) -> str:
    return (
        f"-- lines {start + 1}-{start + shown} of {total} "
        f"(space: next, b: back, other keys: close) --"
    )


# ---------------------------------------------------------------------------
# External pager
# ---------------------------------------------------------------------------


def build_pager_arguments(template: str, pattern: str | None) -> list[str]:
    """Build pager arguments from the configured template.

    The pattern replaces the ``<regex>`` placeholder exactly once. Without
    both a template and a pattern there are no arguments at all: a template
    with nothing to substitute would pass a literal placeholder.
    """
    if not template or not pattern:
        return []

    arguments = shlex.split(template)
    for index, argument in enumerate(arguments):
        if PAGER_REGEX_PLACEHOLDER in argument:
            arguments[index] = argument.replace(PAGER_REGEX_PLACEHOLDER, pattern, 1)
            break
    return arguments


def build_pager_command(command: str, arguments: Sequence[str], temp_path: str) -> list[str]:
    """Full argv for the pager: command, arguments, then the help file."""
    return [command, *arguments, temp_path]


def format_command_line(argv: Sequence[str]) -> str:
    """Render argv as a shell-quoted command line (for logs and messages)."""
    return shlex.join(argv)


@contextmanager
def help_temp_file(text: str) -> Iterator[str]:
    """Write *text* to a fresh temp file and delete it on every exit path."""
    fd, temp_path = tempfile.mkstemp(prefix=HELP_TEMP_FILE_PREFIX, suffix=HELP_TEMP_FILE_SUFFIX)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        yield temp_path
    finally:
        try:
            os.unlink(temp_path)
        except FileNotFoundError:
            pass


class ExternalPager:
    """Hands help text to an external pager such as ``less``.

    The pager gets a temp file path (no shell, no stdin). If the file cannot
    be written or the pager cannot be started, the temp file is removed, the
    fallback pager shows the text, and ``ExternalPagerError`` is raised.
    """

    kind = PagerKind.EXTERNAL

    def __init__(self, command: str, arguments_template: str, fallback: Pager) -> None:
        self._command = command
        self._arguments_template = arguments_template
        self._fallback = fallback

    def render(self, text: str, pattern: str | None = None, below_row: int = 0) -> int:
        try:
            # An unbalanced quote in the template raises ValueError.
            arguments = build_pager_arguments(self._arguments_template, pattern)
            self._run(text, arguments)
        except (ValueError, OSError, subprocess.SubprocessError) as exc:
            log_event(
                "pager_error",
                level=logging.ERROR,
                command=self._command,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            scrolled = self._fallback.render(text, pattern, below_row)
            raise ExternalPagerError(self._command, scrolled_rows=scrolled) from exc
        return 0

    def _run(self, text: str, arguments: list[str]) -> None:
        with help_temp_file(text) as temp_path:
            argv = build_pager_command(self._command, arguments, temp_path)
            log_event(
                "pager_launch",
                command_line=format_command_line(argv),
                temp_file=temp_path,
                content_chars=len(text),
            )
            started = time.perf_counter()
            with subprocess.Popen(argv) as process:
                returncode = process.wait()
            log_event(
                "pager_exit",
                level=logging.INFO if returncode == 0 else logging.WARNING,
                command=self._command,
                returncode=returncode,
                elapsed_ms=elapsed_ms(started, time.perf_counter()),
            )


def create_pager(options: HelpOptions, renderer: OverlayRenderer, console: Console) -> Pager:
    """Build the pager variant selected by the options."""
    internal = InternalPager(renderer, console, emphasis_color=options.emphasis_color)
    if options.pager_kind is PagerKind.EXTERNAL:
        return ExternalPager(
            options.external_pager_command,
            options.external_pager_arguments,
            fallback=internal,
        )
    return internal
