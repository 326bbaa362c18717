"""Plaintext rendering of help events for run logs."""

from __future__ import annotations

import json
import logging
import signal
from typing import Any

from ..time_utils import utc_now_iso
from .schema import DEFAULT_EVENT_KEY_ORDER, EVENT_KEY_ORDER, HELP_TARGET_EVENTS


def describe_target(command: Any, parameter: Any) -> str:
    """``Get-Item -Path`` style label for a help lookup."""
    if parameter:
        return f"{command} -{parameter}"
    return str(command)


def describe_returncode(returncode: int) -> str:
    """Pager exit status; negative codes are the signal that ended it."""
    if returncode == 0:
        return "0 (ok)"
    if returncode < 0:
        try:
            name = signal.Signals(-returncode).name
        except ValueError:
            name = f"signal {-returncode}"
        return f"{returncode} (killed by {name})"
    return f"{returncode} (failed)"


class StructuredTextFormatter(logging.Formatter):
    """Render each record as an ``=== event ===`` block of ``key: value`` lines.

    Records logged through ``log_event`` carry a JSON payload; anything else
    is shown under the logger name with its message.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._entries = 0

    def format(self, record: logging.LogRecord) -> str:
        event, fields = self._fields(record)

        lines = [f"=== {event} ==="]
        lines.extend(f"{key}: {_one_line(value)}" for key, value in _ordered(event, fields))
        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        self._entries += 1
        body = "\n".join(lines)
        # Blank line between entries, none after the last.
        return body if self._entries == 1 else "\n" + body

    @staticmethod
    def _fields(record: logging.LogRecord) -> tuple[str, dict[str, Any]]:
        fields: dict[str, Any] = {
            "ts_utc": utc_now_iso(),
            "level": record.levelname,
            "logger": record.name,
        }
        message = record.getMessage()
        payload = _json_object(message)
        if payload is None:
            fields["message"] = message
            return record.name, fields

        event = str(payload.pop("event", record.name))
        fields.update(payload)
        if event in HELP_TARGET_EVENTS and fields.get("command") is not None:
            fields["target"] = describe_target(fields.pop("command"), fields.pop("parameter", None))
        if isinstance(fields.get("returncode"), int):
            fields["returncode"] = describe_returncode(fields["returncode"])
        for key, value in list(fields.items()):
            if key.endswith("_ms") and isinstance(value, int):
                fields[key] = f"{value} ms"
        return event, fields


def _json_object(message: str) -> dict[str, Any] | None:
    if not (message.startswith("{") and message.endswith("}")):
        return None
    try:
        parsed = json.loads(message)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def _ordered(event: str, fields: dict[str, Any]) -> list[tuple[str, Any]]:
    """Known keys in the event's order, then the rest sorted; ``None`` dropped."""
    preferred = EVENT_KEY_ORDER.get(event, DEFAULT_EVENT_KEY_ORDER)
    present = {key: value for key, value in fields.items() if value is not None}
    head = [key for key in preferred if key in present]
    tail = sorted(key for key in present if key not in preferred)
    return [(key, present[key]) for key in head + tail]


def _one_line(value: Any) -> str:
    return str(value).replace("\n", "\\n")
