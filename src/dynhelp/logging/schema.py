"""Event key ordering for structured log output."""

from __future__ import annotations

DEFAULT_EVENT_KEY_ORDER: list[str] = ["ts", "level", "logger", "message"]

EVENT_KEY_ORDER: dict[str, list[str]] = {
    # Application lifecycle events
    "app_start": [
        "ts",
        "level",
        "profile_file",
        "help_catalog",
        "help_backend",
        "pager",
        "log_file",
    ],
    "app_stop": [
        "ts",
        "level",
        "reason",
        "uptime_ms",
        "error_type",
        "error",
    ],
    # Help lookup events
    "help_lookup": [
        "ts",
        "level",
        "target",
        "full",
        "result",
        "elapsed_ms",
    ],
    "help_lookup_error": [
        "ts",
        "level",
        "target",
        "full",
        "elapsed_ms",
        "error_type",
        "error",
    ],
    # Pager events
    "pager_launch": [
        "ts",
        "level",
        "command_line",
        "temp_file",
        "content_chars",
    ],
    "pager_exit": [
        "ts",
        "level",
        "command",
        "returncode",
        "elapsed_ms",
    ],
    "pager_error": [
        "ts",
        "level",
        "command",
        "error_type",
        "error",
    ],
    # Overlay events
    "overlay_draw": [
        "ts",
        "level",
        "line_count",
        "extra_physical_lines",
        "anchor_row",
        "scrolled_rows",
        "buffer_width",
    ],
    "overlay_clear": [
        "ts",
        "level",
        "anchor_row",
        "row_count",
    ],
}

# Lookups whose command and parameter are shown as one "target" field.
HELP_TARGET_EVENTS = frozenset({"help_lookup", "help_lookup_error"})

LOG_PATH_FIELDS = {
    "profile_file",
    "help_catalog",
    "log_file",
    "logs_dir",
}
