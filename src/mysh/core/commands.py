"""Command parsing helpers."""

from __future__ import annotations

from mysh.core.types import Command, ParsedNumber

TOKEN_DELIMITER = " "


def is_blank(line: str) -> bool:
    """Return True for an empty line or a line made of spaces only."""

    return not line.strip(TOKEN_DELIMITER)


def tokenize(line: str) -> list[str]:
    """Split a line on single spaces, dropping zero-length fragments."""

    return [token for token in line.split(TOKEN_DELIMITER) if token]


def parse_line(line: str) -> Command | None:
    """Parse one input line into a command, or None when there is nothing to run."""

    if is_blank(line):
        return None
    tokens = tokenize(line)
    if not tokens:
        return None
    return Command(verb=tokens[0], args=tokens[1:], raw=line)


def parse_number(token: str, reason: str = "Argument must be a number") -> ParsedNumber:
    """Parse a non-negative decimal integer made of ASCII digits only."""

    if not token or not token.isascii() or not token.isdigit():
        return ParsedNumber(value=None, reason=reason)
    return ParsedNumber(value=int(token))
