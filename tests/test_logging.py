"""Tests for structured logging utilities."""

from __future__ import annotations

import json
import logging
import signal
from datetime import datetime
from pathlib import Path

import pytest

import dynhelp.logging.events as events
from dynhelp.backends import HelpBackendKind
from dynhelp.logging import (
    StructuredTextFormatter,
    build_run_log_path,
    describe_target,
    log_event,
    setup_logging,
)
from dynhelp.options import PagerKind


def _record(message: str, name: str = "root", level: int = logging.INFO) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


def test_structured_formatter_orders_known_event_keys() -> None:
    payload = {
        "ts": "2026-01-15T12:00:00+00:00",
        "event": "help_lookup",
        "elapsed_ms": 4,
        "result": "parameter_help",
        "command": "Get-Item",
        "parameter": "Path",
        "full": False,
        "zeta": "extra",
    }

    result = StructuredTextFormatter().format(_record(json.dumps(payload)))
    lines = result.splitlines()

    assert lines[0] == "=== help_lookup ==="
    keys = [line.split(":", 1)[0] for line in lines[1:]]
    assert keys == [
        "ts",
        "level",
        "target",
        "full",
        "result",
        "elapsed_ms",
        "logger",
        "ts_utc",
        "zeta",
    ]


def test_structured_formatter_skips_none_fields() -> None:
    payload = {"event": "help_lookup", "command": "Get-Item", "parameter": None}

    result = StructuredTextFormatter().format(_record(json.dumps(payload)))

    assert "target: Get-Item" in result
    assert "parameter" not in result


def test_structured_formatter_uses_logger_name_for_plain_messages() -> None:
    result = StructuredTextFormatter().format(_record("Arbitrary message", name="dynhelp"))

    assert "=== dynhelp ===" in result
    assert "message: Arbitrary message" in result


def test_structured_formatter_escapes_newlines_and_separates_entries() -> None:
    formatter = StructuredTextFormatter()

    first = formatter.format(_record("one\ntwo"))
    second = formatter.format(_record("three"))

    assert "message: one\\ntwo" in first
    assert not first.startswith("\n")
    assert second.startswith("\n=== root ===")


def test_log_event_emits_json_payload(caplog) -> None:
    with caplog.at_level(logging.INFO):
        log_event(
            "app_start",
            help_backend=HelpBackendKind.CATALOG,
            pager=PagerKind.EXTERNAL,
            temp_file=Path("/tmp/dynhelp-help.txt"),
            log_file=None,
        )

    [record] = caplog.records
    payload = json.loads(record.getMessage())
    assert payload["event"] == "app_start"
    assert payload["help_backend"] == "catalog"
    assert payload["pager"] == "external"
    assert payload["temp_file"] == "/tmp/dynhelp-help.txt"
    assert payload["log_file"] is None
    assert "ts" in payload


def test_structured_formatter_renders_lookup_target() -> None:
    payload = {"event": "help_lookup_error", "command": "Get-Item", "parameter": "Path"}

    result = StructuredTextFormatter().format(_record(json.dumps(payload)))

    assert "target: Get-Item -Path" in result
    assert "command:" not in result


def test_structured_formatter_keeps_pager_command() -> None:
    payload = {"event": "pager_error", "command": "less", "error": "not found"}

    result = StructuredTextFormatter().format(_record(json.dumps(payload)))

    assert "command: less" in result
    assert "target:" not in result


@pytest.mark.parametrize(
    ("returncode", "expected"),
    [
        (0, "0 (ok)"),
        (2, "2 (failed)"),
        (-signal.SIGTERM, f"{-signal.SIGTERM} (killed by SIGTERM)"),
    ],
)
def test_structured_formatter_describes_pager_exit(returncode: int, expected: str) -> None:
    payload = {"event": "pager_exit", "command": "less", "returncode": returncode, "elapsed_ms": 120}

    lines = StructuredTextFormatter().format(_record(json.dumps(payload))).splitlines()

    assert f"returncode: {expected}" in lines
    assert "elapsed_ms: 120 ms" in lines


def test_describe_target_without_parameter() -> None:
    assert describe_target("Get-ChildItem", None) == "Get-ChildItem"


def test_log_event_resolves_path_fields(caplog) -> None:
    with caplog.at_level(logging.INFO):
        log_event("app_start", profile_file="~/.dynhelp/profile.json", help_catalog="bad")

    payload = json.loads(caplog.records[0].getMessage())
    assert payload["profile_file"] == str(Path.home().resolve() / ".dynhelp" / "profile.json")
    assert payload["help_catalog"] == "bad"


def test_build_run_log_path_is_unique(tmp_path: Path, monkeypatch) -> None:
    class _FrozenDatetime(datetime):
        @classmethod
        def now(cls, tz=None):
            return cls(2026, 1, 15, 12, 34, 56)

    monkeypatch.setattr(events, "datetime", _FrozenDatetime)

    first = build_run_log_path(str(tmp_path / "logs"))
    Path(first).write_text("", encoding="utf-8")
    second = build_run_log_path(str(tmp_path / "logs"))

    assert first != second
    assert Path(first).name == "dynhelp_2026-01-15_12-34-56.log"
    assert Path(second).name == "dynhelp_2026-01-15_12-34-56_1.log"


def test_setup_logging_writes_structured_file(tmp_path: Path) -> None:
    log_file = tmp_path / "run.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging(str(log_file))
        log_event("overlay_clear", anchor_row=3, row_count=6)
        for handler in root.handlers:
            handler.flush()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

    content = log_file.read_text(encoding="utf-8")
    assert "=== overlay_clear ===" in content
    assert "row_count: 6" in content


def test_setup_logging_without_file_disables_logging(caplog) -> None:
    setup_logging(None)

    with caplog.at_level(logging.INFO):
        log_event("help_lookup", command="Get-Item")

    assert caplog.records == []
