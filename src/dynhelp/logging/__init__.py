"""Structured logging primitives for dynhelp."""

from .events import (
    build_run_log_path,
    log_event,
    setup_logging,
)
from .formatter import StructuredTextFormatter, describe_returncode, describe_target
from .schema import (
    DEFAULT_EVENT_KEY_ORDER,
    EVENT_KEY_ORDER,
    HELP_TARGET_EVENTS,
    LOG_PATH_FIELDS,
)

__all__ = [
    "DEFAULT_EVENT_KEY_ORDER",
    "EVENT_KEY_ORDER",
    "HELP_TARGET_EVENTS",
    "LOG_PATH_FIELDS",
    "StructuredTextFormatter",
    "build_run_log_path",
    "describe_returncode",
    "describe_target",
    "log_event",
    "setup_logging",
]
