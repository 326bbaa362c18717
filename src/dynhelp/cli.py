"""CLI entry and startup wiring."""

from __future__ import annotations

import argparse
import logging
import time

from .colors import format_color
from .console import Console
from .constants import DEFAULT_LOGS_DIR, DEFAULT_PROFILE_FILE
from .dynamic_help import build_dynamic_help, create_help_backend
from .errors import DynHelpError
from .logging import build_run_log_path, log_event, setup_logging
from .options import HelpOptions, load_options
from .path_utils import map_path
from .shell import run_shell
from .time_utils import elapsed_ms

_COLOR_OPTIONS = ("emphasis_color", "error_color")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        options = load_options(args.profile)
        if args.catalog:
            options.help_catalog = args.catalog

        if args.command == "show-options":
            print(render_options(options))
            return 0

        log_file = _setup_run_log(args.log)
        return _run(options, args.profile, log_file)
    except DynHelpError as exc:
        print(f"ERROR: {exc}")
        return 1


def render_options(options: HelpOptions) -> str:
    """Render the effective options, one ``name: value`` per line."""
    lines = []
    for name, value in options.model_dump(mode="json").items():
        if name in _COLOR_OPTIONS:
            value = format_color(value)
        elif value is None:
            value = "none"
        lines.append(f"{name}: {value}")
    return "\n".join(lines)


def _setup_run_log(logs_dir: str | None) -> str | None:
    if not logs_dir:
        setup_logging(None)
        return None
    try:
        log_file = build_run_log_path(map_path(logs_dir))
    except (ValueError, OSError) as exc:
        raise DynHelpError(f"Cannot create log file in {logs_dir}: {exc}") from exc
    setup_logging(log_file)
    return log_file


def _run(options: HelpOptions, profile_file: str, log_file: str | None) -> int:
    backend = create_help_backend(options)
    started = time.perf_counter()
    log_event(
        "app_start",
        profile_file=profile_file,
        help_catalog=options.help_catalog,
        help_backend=options.help_backend,
        pager=options.pager_kind,
        log_file=log_file,
    )

    def _help_factory(console: Console):
        return build_dynamic_help(options, backend, console)

    try:
        exit_code = run_shell(options, _help_factory)
    except Exception as exc:
        log_event(
            "app_stop",
            level=logging.ERROR,
            reason="error",
            uptime_ms=elapsed_ms(started, time.perf_counter()),
            error_type=type(exc).__name__,
            error=str(exc),
        )
        raise

    log_event(
        "app_stop",
        reason="exit",
        uptime_ms=elapsed_ms(started, time.perf_counter()),
    )
    return exit_code


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dynhelp",
        description="Command shell with on-demand command and parameter help.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        choices=["show-options"],
        help="Print the effective help options and exit.",
    )
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE_FILE,
        help="Profile JSON with help options (absolute or mapped with ~ / @).",
    )
    parser.add_argument(
        "--catalog",
        required=False,
        help="Help catalog JSON overriding the profile (absolute or mapped with ~ / @).",
    )
    parser.add_argument(
        "--log",
        nargs="?",
        const=DEFAULT_LOGS_DIR,
        help=(
            "Write a per-run structured log into this directory "
            f"(default {DEFAULT_LOGS_DIR}; absolute or mapped with ~ / @)."
        ),
    )
    return parser
