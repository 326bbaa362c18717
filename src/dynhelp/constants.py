"""Application-level constants for dynhelp.

This module keeps only cross-cutting app/file/path constants and the fixed
user-facing help texts.
"""

# ============================================================================
# Application identity
# ============================================================================

APP_NAME = "dynhelp"

# ============================================================================
# File extensions
# ============================================================================

LOG_FILE_EXTENSION = ".log"
HELP_TEMP_FILE_PREFIX = f"{APP_NAME}-"
HELP_TEMP_FILE_SUFFIX = ".txt"

# ============================================================================
# Default directories and paths
# ============================================================================

# User data directory (created in home directory)
USER_DATA_DIR = f"~/.{APP_NAME}"

# REPL command history file
REPL_HISTORY_FILE = f"{USER_DATA_DIR}/history"

DEFAULT_PROFILE_FILE = f"{USER_DATA_DIR}/profile.json"
DEFAULT_LOGS_DIR = f"{USER_DATA_DIR}/logs"

# Bundled help catalog (relative to app root)
BUILTIN_HELP_CATALOG = "@/catalog/builtin.json"

DATETIME_FORMAT_FILENAME = "%Y-%m-%d_%H-%M-%S"

# ============================================================================
# Help lookup and paging
# ============================================================================

# Literal placeholder in the external pager argument template.
PAGER_REGEX_PLACEHOLDER = "<regex>"

# Seconds; None waits for the backend indefinitely.
DEFAULT_HELP_TIMEOUT = 10.0

DEFAULT_FULL_HELP_KEY = "f1"
DEFAULT_PARAMETER_HELP_KEY = "escape h"

# ============================================================================
# Parameter help layout
# ============================================================================

PARAMETER_DESCRIPTION_PREFIX = "DESC: "
PARAMETER_DESCRIPTION_INDENT = " " * len(PARAMETER_DESCRIPTION_PREFIX)

NEEDS_UPDATE_HELP = (
    "Help is not available for this parameter. "
    "The help content may need to be updated."
)

# ============================================================================
# Shell
# ============================================================================

SHELL_PROMPT = "> "
SHELL_EXIT_COMMANDS = ("exit", "quit")
