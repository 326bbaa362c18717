"""VT100 color values used by the help overlays.

A color option may be given as a console color name (``"DarkCyan"``), an
``#rrggbb`` value (values below ``#000100`` select a 256-color index), or a
raw escape sequence. Everything is normalized to an escape sequence once, when
options are loaded.
"""

from __future__ import annotations

ANSI_RESET = "\x1b[0m"
ESCAPE = "\x1b"

# Console color names in their classic ordering.
CONSOLE_COLOR_NAMES = (
    "Black",
    "DarkBlue",
    "DarkGreen",
    "DarkCyan",
    "DarkRed",
    "DarkMagenta",
    "DarkYellow",
    "Gray",
    "DarkGray",
    "Blue",
    "Green",
    "Cyan",
    "Red",
    "Magenta",
    "Yellow",
    "White",
)

_FOREGROUND_CODES = (30, 34, 32, 36, 31, 35, 33, 37, 90, 94, 92, 96, 91, 95, 93, 97)
_BACKGROUND_CODES = (40, 44, 42, 46, 41, 45, 43, 47, 100, 104, 102, 106, 101, 105, 103, 107)

_COLOR_INDEX = {name.lower(): index for index, name in enumerate(CONSOLE_COLOR_NAMES)}


def _parse_rgb(value: str) -> int | None:
    digits = value[1:] if value.startswith("#") else value
    if len(digits) != 6:
        return None
    try:
        rgb = int(digits, 16)
    except ValueError:
        return None
    if 0 <= rgb <= 0xFFFFFF:
        return rgb
    return None


def map_console_color(name: str, is_background: bool = False) -> str:
    """Map a console color name (case-insensitive) to its escape sequence."""
    index = _COLOR_INDEX[name.lower()]
    codes = _BACKGROUND_CODES if is_background else _FOREGROUND_CODES
    return f"{ESCAPE}[{codes[index]}m"


def as_escape_sequence(value: object, is_background: bool = False) -> str:
    """Convert a color option value to a VT escape sequence.

    Raises:
        ValueError: If the value is not a recognized color form.
    """
    if isinstance(value, str) and value:
        if value.lower() in _COLOR_INDEX:
            return map_console_color(value, is_background)

        if value.startswith(ESCAPE):
            return value

        rgb = _parse_rgb(value)
        if rgb is not None:
            layer = "4" if is_background else "3"
            if rgb < 256:
                return f"{ESCAPE}[{layer}8;5;{rgb}m"
            red = (rgb >> 16) & 0xFF
            green = (rgb >> 8) & 0xFF
            blue = rgb & 0xFF
            return f"{ESCAPE}[{layer}8;2;{red};{green};{blue}m"

    raise ValueError(f"Invalid color value: {value!r}")


def format_escape(sequence: str) -> str:
    """Make an escape sequence printable by spelling out the ESC character."""
    return sequence.replace(ESCAPE, "`e")


def format_color(sequence: str) -> str:
    """Render a color sample followed by its printable spelling."""
    return f'{sequence}"{format_escape(sequence)}"{ANSI_RESET}'


def colorize(text: str, sequence: str) -> str:
    """Wrap *text* in *sequence*, resetting attributes afterwards."""
    if not sequence:
        return text
    return f"{sequence}{text}{ANSI_RESET}"
