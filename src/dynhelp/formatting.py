"""Turn help results into display lines."""

from __future__ import annotations

from .constants import (
    NEEDS_UPDATE_HELP,
    PARAMETER_DESCRIPTION_INDENT,
    PARAMETER_DESCRIPTION_PREFIX,
)
from .models import ParameterHelp


def text_to_lines(text: str, tab_size: int = 8) -> list[str]:
    """Split help text into display lines.

    Tabs are expanded, line endings normalized, and leading/trailing
    whitespace-only lines dropped.
    """
    lines = [line.expandtabs(tab_size) for line in text.splitlines()]

    start = 0
    for i, line in enumerate(lines):
        if line.strip():
            start = i
            break
    else:
        return []

    end = len(lines)
    for i in range(len(lines) - 1, start - 1, -1):
        if lines[i].strip():
            end = i + 1
            break

    return [line.rstrip() for line in lines[start:end]]


def description_lines(record: ParameterHelp) -> list[str]:
    """Flatten a record's description into display lines.

    Entries may themselves contain line breaks; empty fragments are dropped
    and carriage returns stripped.
    """
    result: list[str] = []
    for entry in record.description_lines:
        for fragment in entry.split("\n"):
            fragment = fragment.strip("\r")
            if fragment:
                result.append(fragment)
    return result


def parameter_syntax(record: ParameterHelp) -> str:
    return f"-{record.name} <{record.type_name}>"


def parameter_summary(record: ParameterHelp) -> str:
    return (
        f"Required: {record.required}, "
        f"Position: {record.position}, "
        f"Default Value: {record.default_value}, "
        f"Pipeline Input: {record.accepts_pipeline_input}, "
        f"WildCard: {record.supports_wildcards}"
    )


def format_parameter_help(record: ParameterHelp) -> list[str]:
    """Lay out a parameter help record for the overlay.

    A record without any description text renders as the single
    "needs update" line instead of the full layout.
    """
    description = description_lines(record)
    if not description:
        # No leading blank row here: the fallback block is one row tall.
        return [NEEDS_UPDATE_HELP]

    lines = ["", parameter_syntax(record), ""]
    for index, text in enumerate(description):
        prefix = PARAMETER_DESCRIPTION_PREFIX if index == 0 else PARAMETER_DESCRIPTION_INDENT
        lines.append(prefix + text)
    lines.append(parameter_summary(record))
    return lines


def parameter_scroll_pattern(parameter_name: str) -> str:
    """Pattern locating a parameter's section in full help text.

    Anchored at line start so the syntax block, which also mentions the
    parameter, does not match.
    """
    return f"^\\s*-{parameter_name} [<|\\[]"
