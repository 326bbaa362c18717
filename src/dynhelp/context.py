"""Resolve which command and parameter the edit cursor sits in."""

from __future__ import annotations

from typing import Iterable

from .models import HelpContext
from .tokens import Token, TokenKind

NO_CONTEXT = HelpContext()


def resolve_help_context(tokens: Iterable[Token] | None, cursor: int) -> HelpContext:
    """Find the governing command name and the parameter under *cursor*.

    Tokens are scanned in source order up to the cursor. The most recent
    command name wins, so in a pipeline the parameter resolves against its own
    command. A parameter token containing the cursor ends the scan. A cursor
    beyond the end of every token, or a line without a command, resolves to
    nothing.
    """
    if tokens is None:
        return NO_CONTEXT

    command_name: str | None = None
    cursor_reached = False

    for token in tokens:
        if token.end >= cursor:
            cursor_reached = True

        if token.start > cursor:
            break

        if token.kind == TokenKind.COMMAND_NAME:
            command_name = token.text

        if token.contains(cursor) and token.kind == TokenKind.PARAMETER:
            if command_name is None:
                return NO_CONTEXT
            return HelpContext(command_name, token.parameter_name)

    if not cursor_reached or command_name is None:
        return NO_CONTEXT

    return HelpContext(command_name, None)
