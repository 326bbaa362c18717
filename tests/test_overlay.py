from __future__ import annotations

import pytest

from dynhelp.errors import OverlayStateError
from dynhelp.overlay import OverlayRenderer, OverlayState, show_overlay
from test_helpers import FakeConsole


def test_draw_writes_lines_below_input_and_restores_cursor() -> None:
    console = FakeConsole(width=20, height=10, cursor=(0, 2))
    console.write("> Get-Item")
    console.set_cursor_position(7, 2)
    renderer = OverlayRenderer(console)

    block = renderer.draw(["one", "two"], below_row=2)

    assert console.line(3) == "one"
    assert console.line(4) == "two"
    assert (console.cursor_left, console.cursor_top) == (7, 2)
    assert block.anchor_row == 3
    assert block.row_count == 2
    assert block.scrolled_rows == 0
    assert renderer.state is OverlayState.DRAWN


def test_clear_blanks_exactly_the_drawn_rows() -> None:
    console = FakeConsole(width=20, height=10, cursor=(0, 2))
    console.write("> prompt")
    console.set_cursor_position(8, 2)
    console.rows[7] = list("keep me".ljust(20))
    renderer = OverlayRenderer(console)

    block = renderer.draw(["a", "b", "c"], below_row=2)
    renderer.clear(block)

    assert console.blanked == [(3, 3)]
    assert console.line(2) == "> prompt"
    assert console.screen()[3:6] == ["", "", ""]
    assert console.line(6) == ""
    assert console.line(7) == "keep me"
    assert renderer.state is OverlayState.IDLE


def test_wrapped_lines_are_counted_and_cleared() -> None:
    console = FakeConsole(width=10, height=12, cursor=(0, 0))
    renderer = OverlayRenderer(console)
    lines = ["x" * 10, "y" * 20, "z" * 21, "end"]

    block = renderer.draw(lines, below_row=0)

    # 1 + 2 + 3 + 1 rows
    assert block.extra_physical_lines == 3
    assert block.row_count == 7
    assert console.line(7) == "end"
    renderer.clear(block)
    assert console.blanked == [(1, 7)]
    assert all(line == "" for line in console.screen())


def test_draw_at_bottom_scrolls_and_moves_anchor() -> None:
    console = FakeConsole(width=20, height=6, cursor=(0, 5))
    console.write("> cmd")
    renderer = OverlayRenderer(console)

    block = renderer.draw(["l1", "l2", "l3"], below_row=5)

    assert console.scroll_count == 3
    assert block.scrolled_rows == 3
    assert block.anchor_row == 3
    assert console.line(2) == "> cmd"
    assert console.screen()[3:6] == ["l1", "l2", "l3"]
    assert (console.cursor_left, console.cursor_top) == (5, 2)

    renderer.clear(block)
    assert console.blanked == [(3, 3)]
    assert console.line(2) == "> cmd"


def test_wrap_on_last_row_is_accounted_as_scroll() -> None:
    console = FakeConsole(width=10, height=5, cursor=(0, 3))
    console.write("> cmd")
    renderer = OverlayRenderer(console)

    block = renderer.draw(["w" * 25], below_row=3)

    assert block.scrolled_rows == console.scroll_count == 2
    assert block.anchor_row == 2
    assert console.line(1) == "> cmd"
    renderer.clear(block)
    assert console.blanked == [(2, 3)]


def test_draw_while_drawn_is_rejected() -> None:
    renderer = OverlayRenderer(FakeConsole())
    renderer.draw(["a"], below_row=0)

    with pytest.raises(OverlayStateError):
        renderer.draw(["b"], below_row=0)


def test_clear_requires_the_drawn_block() -> None:
    console = FakeConsole()
    renderer = OverlayRenderer(console)
    block = renderer.draw(["a"], below_row=0)
    renderer.clear(block)

    with pytest.raises(OverlayStateError):
        renderer.clear(block)


def test_show_overlay_reads_one_key_and_clears() -> None:
    console = FakeConsole(height=8, keys=["x"])
    renderer = OverlayRenderer(console)

    block, key = show_overlay(renderer, console, ["help"], below_row=1)

    assert key == "x"
    assert console.blanked == [(block.anchor_row, 1)]
    assert renderer.state is OverlayState.IDLE


def test_show_overlay_clears_when_key_read_fails() -> None:
    console = FakeConsole(height=8)

    def _interrupted() -> str:
        raise KeyboardInterrupt

    console.read_key = _interrupted
    renderer = OverlayRenderer(console)

    with pytest.raises(KeyboardInterrupt):
        show_overlay(renderer, console, ["help"], below_row=1)

    assert console.blanked == [(2, 1)]
    assert renderer.state is OverlayState.IDLE
