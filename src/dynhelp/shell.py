"""Prompt session and key-binding setup for the help shell."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from prompt_toolkit import PromptSession
from prompt_toolkit.application import run_in_terminal
from prompt_toolkit.history import FileHistory
from prompt_toolkit.key_binding import KeyBindings

from .colors import colorize
from .console import Console, TerminalConsole
from .constants import REPL_HISTORY_FILE, SHELL_EXIT_COMMANDS, SHELL_PROMPT
from .dynamic_help import DynamicHelp
from .errors import ExternalPagerError
from .models import EditorSnapshot
from .options import HelpOptions
from .path_utils import map_path
from .tokens import tokenize

DynamicHelpFactory = Callable[[Console], DynamicHelp]


def show_help_for_line(
    dynamic_help: DynamicHelp,
    console: Console,
    prompt: str,
    text: str,
    cursor: int,
    full: bool,
) -> str | None:
    """Show help for the line being edited.

    The prompt session has erased its own rendering, so the prompt and input
    are echoed first and the overlay appears below them. Afterwards the echo
    is erased and the cursor left at the prompt's row for the session to
    redraw. Returns an error message when the external pager failed.
    """
    initial_row = console.cursor_top
    console.write(prompt + text)
    snapshot = EditorSnapshot(
        tokens=tokenize(text),
        cursor=cursor,
        initial_row=initial_row,
        input_end_row=console.cursor_top,
    )

    message = None
    try:
        if full:
            snapshot = dynamic_help.show_full_help(snapshot)
        else:
            snapshot = dynamic_help.show_parameter_help(snapshot)
    except ExternalPagerError as exc:
        if isinstance(exc.snapshot, EditorSnapshot):
            snapshot = exc.snapshot
        message = str(exc)

    top = max(snapshot.initial_row, 0)
    console.write_blank_lines(top, snapshot.input_end_row - top + 1)
    console.set_cursor_position(0, top)
    return message


def build_key_bindings(options: HelpOptions, help_factory: DynamicHelpFactory) -> KeyBindings:
    """Bind the full-help and parameter-help keys from the options."""
    key_bindings = KeyBindings()

    def _run_help(event, full: bool) -> None:
        buffer = event.current_buffer
        text = buffer.text
        cursor = buffer.cursor_position
        app = event.app

        def _show() -> None:
            console = TerminalConsole(output=app.output, input=app.input)
            message = show_help_for_line(
                help_factory(console), console, SHELL_PROMPT, text, cursor, full
            )
            if message:
                console.write(colorize(message, options.error_color) + "\n")

        run_in_terminal(_show)

    @key_bindings.add(*options.key_sequence(full=True))
    def _handle_full_help(event) -> None:
        _run_help(event, full=True)

    @key_bindings.add(*options.key_sequence(full=False))
    def _handle_parameter_help(event) -> None:
        _run_help(event, full=False)

    return key_bindings


def ensure_history_file() -> Path:
    """Ensure the shell history file path exists and return it."""
    history_file = Path(map_path(REPL_HISTORY_FILE))
    history_file.parent.mkdir(parents=True, exist_ok=True)
    return history_file


def create_prompt_session(
    options: HelpOptions, help_factory: DynamicHelpFactory
) -> PromptSession:
    """Create prompt-toolkit session for shell input."""
    history_file = ensure_history_file()
    return PromptSession(
        history=FileHistory(str(history_file)),
        key_bindings=build_key_bindings(options, help_factory),
    )


def run_shell(options: HelpOptions, help_factory: DynamicHelpFactory) -> int:
    """Read command lines until exit/quit; help keys work while typing."""
    session = create_prompt_session(options, help_factory)
    full_key = " ".join(options.key_sequence(full=True))
    parameter_key = " ".join(options.key_sequence(full=False))
    print(f"Help keys: {full_key} = command help, {parameter_key} = parameter help.")
    print("Type 'exit' or 'quit' to leave.")

    while True:
        try:
            line = session.prompt(SHELL_PROMPT)
        except KeyboardInterrupt:
            continue
        except EOFError:
            return 0

        if line.strip().lower() in SHELL_EXIT_COMMANDS:
            return 0
