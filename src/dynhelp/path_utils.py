"""Path mapping utilities for special prefixes (~, @).

This module provides path mapping functionality to support:
- ~ or ~/... → User home directory
- @ or @/... → App package directory (contains the bundled help catalog)
- Native absolute paths → Used as-is
- Windows absolute paths (C:\\..., C:/..., UNC) → Supported on Windows,
  rejected on non-Windows hosts
- Relative paths without prefix → Error (to avoid ambiguity)
"""

from pathlib import Path, PureWindowsPath
import unicodedata


def get_app_root() -> Path:
    """Return the installed `dynhelp` package directory."""
    # This file is at: dynhelp/path_utils.py
    return Path(__file__).resolve().parent


def has_home_path_prefix(path: str) -> bool:
    """Return True when path uses the supported home prefix forms."""
    return path == "~" or path.startswith("~/") or path.startswith("~\\")


def has_app_path_prefix(path: str) -> bool:
    """Return True when path uses the supported app-root prefix forms."""
    return path == "@" or path.startswith("@/") or path.startswith("@\\")


def is_windows_absolute_path(path: str) -> bool:
    """Return True when path is an absolute Windows path (drive or UNC)."""
    return PureWindowsPath(path).is_absolute()


def _normalize_path_input(path: str) -> str:
    """Normalize input text to NFC and reject NUL characters."""
    if "\x00" in path:
        raise ValueError("Path contains NUL character")
    return unicodedata.normalize("NFC", path)


def _map_under(root: Path, path: str, label: str) -> str:
    if len(path) == 1:
        return str(root)
    suffix = path[2:]  # Everything after ~/ or @/ (or the backslash forms)
    resolved = (root / suffix).resolve()
    try:
        resolved.relative_to(root)
    except ValueError:
        raise ValueError(f"Path escapes {label} directory: {path}")
    return str(resolved)


def map_path(path: str) -> str:
    """Map path with special prefixes to absolute path.

    Args:
        path: Path to map (can have ~, @, or be absolute)

    Returns:
        Absolute path string

    Raises:
        ValueError: If path is relative without special prefix, escapes its
            boundary, or uses a Windows absolute path on non-Windows

    Examples:
        >>> map_path("~/.dynhelp/profile.json")  # Unix
        '/Users/username/.dynhelp/profile.json'

        >>> map_path("@/catalog/builtin.json")
        '/path/to/dynhelp/catalog/builtin.json'

        >>> map_path("relative/path.json")
        ValueError: Relative paths without prefix are not supported
    """
    path = _normalize_path_input(path)

    if has_home_path_prefix(path):
        return _map_under(Path.home().resolve(), path, "home")

    if has_app_path_prefix(path):
        return _map_under(get_app_root(), path, "app")

    # On non-Windows hosts, reject Windows absolute paths explicitly.
    if is_windows_absolute_path(path) and not Path(path).is_absolute():
        raise ValueError(
            f"Windows absolute paths are not supported on this platform: {path}"
        )

    if Path(path).is_absolute():
        return str(Path(path).resolve())

    raise ValueError(
        f"Relative paths without prefix are not supported: {path}\n"
        f"Use '~/' for home directory, '@/' for app directory, "
        f"or provide an absolute path"
    )
