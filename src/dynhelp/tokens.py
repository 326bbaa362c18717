"""Token model and the reference command-line lexer.

The help subsystem only reads tokens. ``tokenize`` is the small lexer the
bundled shell uses; any editor can supply its own token stream instead.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum


class TokenKind(StrEnum):
    COMMAND_NAME = "command_name"
    PARAMETER = "parameter"
    ARGUMENT = "argument"
    OPERATOR = "operator"
    END_OF_INPUT = "end_of_input"


@dataclass(frozen=True, slots=True)
class Token:
    """One lexical unit of the edit buffer.

    ``start`` and ``end`` are buffer offsets; ``end`` is one past the last
    character. ``parameter_name`` is set only for parameter tokens.
    """

    kind: TokenKind
    text: str
    start: int
    end: int
    parameter_name: str | None = None

    def contains(self, offset: int) -> bool:
        """Return True when *offset* lies within the token, boundaries included."""
        return self.start <= offset <= self.end


_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<operator>&&|\|\||[|;])
    | (?P<word>(?:'[^']*'?|"[^"]*"?|&(?!&)|[^\s|;&'"])+)
    """,
    re.VERBOSE,
)

# -Name, --name, -Name:value, --name=value
_PARAMETER_PATTERN = re.compile(r"--?(?P<name>[A-Za-z_][\w-]*)(?:[:=].*)?", re.DOTALL)


def _classify_word(text: str, start: int, end: int, expect_command: bool) -> Token:
    if expect_command:
        return Token(TokenKind.COMMAND_NAME, text, start, end)

    match = _PARAMETER_PATTERN.fullmatch(text)
    if match is not None:
        return Token(
            TokenKind.PARAMETER,
            text,
            start,
            end,
            parameter_name=match.group("name"),
        )
    return Token(TokenKind.ARGUMENT, text, start, end)


def tokenize(text: str) -> list[Token]:
    """Split a command line into tokens.

    The first word of each pipeline or list segment is the command name. The
    stream always ends with an ``END_OF_INPUT`` token spanning ``[len, len]``
    so a cursor at the end of the line still belongs to the last command.
    """
    tokens: list[Token] = []
    expect_command = True

    for match in _TOKEN_PATTERN.finditer(text):
        kind = match.lastgroup
        if kind == "space":
            continue

        start, end = match.span()
        if kind == "operator":
            tokens.append(Token(TokenKind.OPERATOR, match.group(), start, end))
            expect_command = True
            continue

        tokens.append(_classify_word(match.group(), start, end, expect_command))
        expect_command = False

    tokens.append(Token(TokenKind.END_OF_INPUT, "", len(text), len(text)))
    return tokens
