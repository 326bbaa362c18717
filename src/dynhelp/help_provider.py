"""Help content lookup with every failure folded into ``EMPTY_HELP``."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol

from .constants import DEFAULT_HELP_TIMEOUT
from .logging import log_event
from .models import (
    EMPTY_HELP,
    EditorSnapshot,
    FullHelpText,
    HelpQuery,
    HelpResult,
    ParameterHelp,
)
from .time_utils import elapsed_ms


class HelpBackend(Protocol):
    """Source of help content. Both lookups may raise; callers catch."""

    def lookup_full_help(self, command_name: str) -> str | None: ...

    def lookup_parameter_help(
        self, command_name: str, parameter_name: str
    ) -> ParameterHelp | None: ...


class HelpProvider:
    """Runs help queries against a backend.

    Each query runs on its own short-lived worker thread so a slow backend is
    bounded by ``timeout`` (seconds, ``None`` to wait indefinitely). A timed
    out worker is abandoned, not cancelled.
    """

    def __init__(
        self, backend: HelpBackend, timeout: float | None = DEFAULT_HELP_TIMEOUT
    ) -> None:
        self._backend = backend
        self._timeout = timeout

    def lookup(self, query: HelpQuery) -> HelpResult:
        """Return help for *query*; never raises."""
        if not query.command_name:
            return EMPTY_HELP
        if not query.full and not query.parameter_name:
            return EMPTY_HELP

        started = time.perf_counter()
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dynhelp-lookup")
        try:
            future = executor.submit(self._query_backend, query)
            result = future.result(timeout=self._timeout)
        except Exception as exc:  # noqa: BLE001 - any failure means "no help"
            log_event(
                "help_lookup_error",
                level=logging.WARNING,
                command=query.command_name,
                parameter=query.parameter_name,
                full=query.full,
                elapsed_ms=elapsed_ms(started, time.perf_counter()),
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return EMPTY_HELP
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        log_event(
            "help_lookup",
            command=query.command_name,
            parameter=query.parameter_name,
            full=query.full,
            result=_result_label(result),
            elapsed_ms=elapsed_ms(started, time.perf_counter()),
        )
        return result

    def _query_backend(self, query: HelpQuery) -> HelpResult:
        command_name = query.command_name or ""
        if query.full:
            text = self._backend.lookup_full_help(command_name)
            if isinstance(text, str) and text.strip():
                return FullHelpText(text)
            return EMPTY_HELP

        record = self._backend.lookup_parameter_help(command_name, query.parameter_name or "")
        if isinstance(record, ParameterHelp):
            return record
        return EMPTY_HELP


def _result_label(result: HelpResult) -> str:
    if isinstance(result, FullHelpText):
        return "full_help"
    if isinstance(result, ParameterHelp):
        return "parameter_help"
    return "empty"


def correct_for_cursor_drift(snapshot: EditorSnapshot, cursor_row: int) -> EditorSnapshot:
    """Follow the prompt when a lookup scrolled the screen.

    A lookup can print (progress output, warnings) and scroll the buffer. If
    the cursor now sits above the row the prompt started on, the prompt moved
    up with the buffer; shift the snapshot by the same amount.
    """
    if snapshot.initial_row > cursor_row:
        return snapshot.shifted(cursor_row - snapshot.initial_row)
    return snapshot
