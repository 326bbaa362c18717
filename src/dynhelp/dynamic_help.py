"""Entry points bound to the "show command help" and "show parameter help" keys."""

from __future__ import annotations

from .backends import CatalogHelpBackend, CommandHelpBackend, HelpBackendKind
from .console import Console
from .context import resolve_help_context
from .errors import ExternalPagerError
from .formatting import format_parameter_help, parameter_scroll_pattern
from .help_provider import HelpBackend, HelpProvider, correct_for_cursor_drift
from .models import EditorSnapshot, FullHelpText, HelpQuery, ParameterHelp
from .options import HelpOptions
from .overlay import OverlayRenderer, show_overlay
from .pager import Pager, create_pager


class DynamicHelp:
    """Resolves the cursor context, fetches help, and shows it.

    Both entry points block until the help has been dismissed and return the
    snapshot corrected for any screen scroll, so the editor can redraw its
    input where it now is. ``ExternalPagerError`` from the pager is the only
    exception that escapes; the fallback has already been shown by then and
    the corrected snapshot rides along on ``error.snapshot``.
    """

    def __init__(
        self,
        provider: HelpProvider,
        pager: Pager,
        renderer: OverlayRenderer,
        console: Console,
    ) -> None:
        self._provider = provider
        self._pager = pager
        self._renderer = renderer
        self._console = console

    def show_full_help(self, snapshot: EditorSnapshot) -> EditorSnapshot:
        return self._show(snapshot, full=True)

    def show_parameter_help(self, snapshot: EditorSnapshot) -> EditorSnapshot:
        return self._show(snapshot, full=False)

    def _show(self, snapshot: EditorSnapshot, full: bool) -> EditorSnapshot:
        context = resolve_help_context(snapshot.tokens, snapshot.cursor)
        if context.command_name is None:
            return snapshot

        query = HelpQuery(context.command_name, context.parameter_name, full)
        result = self._provider.lookup(query)
        snapshot = correct_for_cursor_drift(snapshot, self._console.cursor_top)

        if isinstance(result, FullHelpText):
            return self._page(result.text, query, snapshot)

        if isinstance(result, ParameterHelp):
            lines = format_parameter_help(result)
            block, _ = show_overlay(self._renderer, self._console, lines, snapshot.input_end_row)
            return snapshot.shifted(-block.scrolled_rows)

        return snapshot

    def _page(self, text: str, query: HelpQuery, snapshot: EditorSnapshot) -> EditorSnapshot:
        pattern = None
        if query.parameter_name:
            pattern = parameter_scroll_pattern(query.parameter_name)

        try:
            scrolled = self._pager.render(text, pattern, snapshot.input_end_row)
        except ExternalPagerError as exc:
            exc.snapshot = snapshot.shifted(-exc.scrolled_rows)
            raise
        return snapshot.shifted(-scrolled)


def create_help_backend(options: HelpOptions) -> HelpBackend:
    """Build the help backend selected by the options."""
    if options.help_backend is HelpBackendKind.COMMAND:
        return CommandHelpBackend(timeout=options.help_timeout)
    return CatalogHelpBackend.from_file(options.help_catalog)


def build_dynamic_help(
    options: HelpOptions, backend: HelpBackend, console: Console
) -> DynamicHelp:
    """Wire provider, pager, and renderer for one console."""
    renderer = OverlayRenderer(console)
    return DynamicHelp(
        HelpProvider(backend, timeout=options.help_timeout),
        create_pager(options, renderer, console),
        renderer,
        console,
    )
