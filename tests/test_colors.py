from __future__ import annotations

import pytest

from dynhelp.colors import (
    ANSI_RESET,
    as_escape_sequence,
    colorize,
    format_color,
    format_escape,
    map_console_color,
)


def test_console_color_names_map_case_insensitively() -> None:
    assert map_console_color("Cyan") == "\x1b[96m"
    assert map_console_color("darkred") == "\x1b[31m"
    assert map_console_color("White", is_background=True) == "\x1b[107m"


def test_rgb_values_map_to_truecolor() -> None:
    assert as_escape_sequence("#1e90ff") == "\x1b[38;2;30;144;255m"
    assert as_escape_sequence("1e90ff", is_background=True) == "\x1b[48;2;30;144;255m"


def test_small_rgb_values_select_256_color_index() -> None:
    assert as_escape_sequence("#0000c4") == "\x1b[38;5;196m"


def test_escape_sequences_pass_through() -> None:
    assert as_escape_sequence("\x1b[1;35m") == "\x1b[1;35m"


@pytest.mark.parametrize("value", ["", "#12345", "#1234567", "#gggggg", "NotAColor", 12, None])
def test_invalid_colors_are_rejected(value: object) -> None:
    with pytest.raises(ValueError):
        as_escape_sequence(value)


def test_format_color_shows_printable_sequence() -> None:
    assert format_escape("\x1b[96m") == "`e[96m"
    assert format_color("\x1b[96m") == '\x1b[96m"`e[96m"' + ANSI_RESET


def test_colorize_wraps_and_resets() -> None:
    assert colorize("text", "\x1b[91m") == "\x1b[91mtext\x1b[0m"
    assert colorize("text", "") == "text"
