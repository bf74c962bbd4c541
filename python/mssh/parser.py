"""Line tokenizing and classification helpers for mssh."""

from __future__ import annotations

import csv
import enum
from typing import List

from .errors import ParseError, UnterminatedStringLiteral

COMMAND_MARKER = "!"
SHORTCUT_MARKER = "@"
REQUEST_MARKER = "?"


class LineKind(enum.Enum):
    BLANK = "blank"
    COMMAND = "command"
    SHORTCUT = "shortcut"
    PACKET = "packet"


def classify_line(line: str) -> LineKind:
    """Classify an input line by its leading marker."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if stripped.startswith(COMMAND_MARKER):
        return LineKind.COMMAND
    if stripped.startswith(SHORTCUT_MARKER):
        return LineKind.SHORTCUT
    return LineKind.PACKET


def split_tokens(line: str) -> List[str]:
    """Split *line* on whitespace, keeping double-quoted spans in one token.

    Quotes are retained so the packet parser can tell literal values from
    bare words.  A quote may open mid-token (``key="a b"``).
    """
    tokens: List[str] = []
    current: List[str] = []
    in_quote = False
    for char in line:
        if char == '"':
            in_quote = not in_quote
            current.append(char)
        elif char.isspace() and not in_quote:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(char)
    if in_quote:
        raise UnterminatedStringLiteral("".join(current))
    if current:
        tokens.append("".join(current))
    return tokens


def split_arguments(text: str) -> List[str]:
    """Split shortcut invocation arguments like a space-delimited CSV record.

    Quoted fields may hold spaces, ``""`` is an escaped quote inside a quoted
    field and ``\\`` escapes the following character.  Runs of spaces do not
    produce empty arguments.
    """
    if not text.strip():
        return []
    reader = csv.reader([text], delimiter=" ", quotechar='"', escapechar="\\", strict=True)
    try:
        fields = next(reader, [])
    except csv.Error as exc:
        if text.count('"') % 2:
            raise UnterminatedStringLiteral(text.strip()) from exc
        raise ParseError(f"malformed shortcut arguments: {exc}") from exc
    return [field for field in fields if field]


__all__ = [
    "COMMAND_MARKER",
    "SHORTCUT_MARKER",
    "REQUEST_MARKER",
    "LineKind",
    "classify_line",
    "split_tokens",
    "split_arguments",
]
