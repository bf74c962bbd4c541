"""Shortcut (macro) storage and expansion."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from .errors import (
    InvalidArgumentIndex,
    ParseError,
    RecursionLimitExceeded,
    ShortcutStoreError,
    UndefinedShortcut,
)
from .parser import REQUEST_MARKER, split_arguments

LOGGER = logging.getLogger("mssh.shortcuts")

MAX_SHORTCUT_NESTING = 10
DEFAULT_SHORTCUT_FILE = "mssh-shortcuts.txt"
_SEPARATOR = ":"
# everything str.splitlines breaks on
_LINE_BREAKS = "\n\r\x0b\x0c\x1c\x1d\x1e\x85\u2028\u2029"


class ShortcutTable:
    """File-backed mapping of shortcut name to template text.

    The store is read once by :meth:`load` and rewritten in full on every
    :meth:`define`.  ``path=None`` keeps the table in memory only.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = Path(path).expanduser() if path else None
        self._shortcuts: Dict[str, str] = {}

    def load(self) -> None:
        self._shortcuts = {}
        if not self.path:
            return
        try:
            with self.path.open(encoding="utf-8", newline="") as handle:
                data = handle.read()
        except FileNotFoundError:
            return
        except (OSError, UnicodeDecodeError) as exc:
            raise ShortcutStoreError(f"cannot read shortcuts from {self.path}: {exc}") from exc
        for lineno, line in enumerate(data.split("\n"), start=1):
            line = line[:-1] if line.endswith("\r") else line
            if not line:
                continue
            name, sep, definition = line.partition(_SEPARATOR)
            if not sep or not name:
                raise ShortcutStoreError(
                    f"invalid shortcut definition at {self.path}:{lineno}: {line!r} (should be <name>:<definition>)"
                )
            self._shortcuts[name] = definition
        LOGGER.debug("loaded %d shortcut(s) from %s", len(self._shortcuts), self.path)

    def define(self, name: str, definition: str) -> None:
        if not name or _SEPARATOR in name or any(char.isspace() for char in name):
            raise ParseError(f"invalid shortcut name {name!r}")
        if any(char in _LINE_BREAKS for char in definition):
            raise ParseError("shortcut definitions must fit on one line")
        self._shortcuts[name] = definition
        self._persist()

    def _persist(self) -> None:
        if not self.path:
            return
        text = "".join(f"{name}{_SEPARATOR}{definition}\n" for name, definition in self.items())
        try:
            if not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8", newline="") as handle:
                handle.write(text)
        except OSError as exc:
            raise ShortcutStoreError(f"cannot write shortcuts to {self.path}: {exc}") from exc
        LOGGER.debug("saved %d shortcut(s) to %s", len(self._shortcuts), self.path)

    def get(self, name: str) -> Optional[str]:
        return self._shortcuts.get(name)

    def names(self) -> List[str]:
        return sorted(self._shortcuts)

    def items(self) -> List[Tuple[str, str]]:
        return [(name, self._shortcuts[name]) for name in self.names()]

    def expand(self, name: str, args: List[str]) -> str:
        template = self.get(name)
        if template is None:
            raise UndefinedShortcut(name)
        return expand_template(template, args)

    def __contains__(self, name: object) -> bool:
        return name in self._shortcuts

    def __len__(self) -> int:
        return len(self._shortcuts)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())


def expand_template(template: str, args: List[str]) -> str:
    """Substitute ``$1``..``$9`` in *template* with the 1-indexed *args*.

    ``\\$n`` and a ``$`` not followed by a digit are copied through as-is.
    """
    result: List[str] = []
    index = 0
    last = len(template) - 1
    while index <= last:
        char = template[index]
        if (
            char == "$"
            and index < last
            and template[index + 1] in "0123456789"
            and (index == 0 or template[index - 1] != "\\")
        ):
            arg_index = int(template[index + 1])
            if arg_index < 1 or arg_index > len(args):
                raise InvalidArgumentIndex(arg_index, len(args))
            result.append(args[arg_index - 1])
            index += 2
            continue
        result.append(char)
        index += 1
    return "".join(result)


@dataclass
class ShortcutInvocation:
    name: str
    args: List[str] = field(default_factory=list)
    preview: bool = False


def parse_invocation(text: str) -> ShortcutInvocation:
    """Parse ``[?]name arg1 arg2 ...`` (the text after the ``@`` marker)."""
    tokens = split_arguments(text)
    if not tokens:
        raise ParseError("missing shortcut name after '@'")
    name, *args = tokens
    preview = name.startswith(REQUEST_MARKER)
    if preview:
        name = name[len(REQUEST_MARKER):]
        if not name:
            raise ParseError("missing shortcut name after '@?'")
    return ShortcutInvocation(name, args, preview)


class PendingInput:
    """Bounded queue of expanded lines waiting to be replayed.

    ``depth`` counts pushes since the last :meth:`reset`; a push that takes it
    past ``max_depth`` clears the queue and raises.
    """

    def __init__(self, *, max_depth: int = MAX_SHORTCUT_NESTING, capacity: int = 1) -> None:
        self.max_depth = max_depth
        self.depth = 0
        self._lines: Deque[str] = deque(maxlen=max(1, capacity))

    def push(self, line: str) -> None:
        self.depth += 1
        if self.depth > self.max_depth:
            self._lines.clear()
            raise RecursionLimitExceeded(self.max_depth)
        self._lines.append(line)

    def pop(self) -> Optional[str]:
        if not self._lines:
            return None
        return self._lines.popleft()

    def reset(self) -> None:
        self.depth = 0

    def clear(self) -> None:
        self._lines.clear()

    def __len__(self) -> int:
        return len(self._lines)

    def __bool__(self) -> bool:
        return bool(self._lines)


__all__ = [
    "MAX_SHORTCUT_NESTING",
    "DEFAULT_SHORTCUT_FILE",
    "ShortcutTable",
    "ShortcutInvocation",
    "PendingInput",
    "expand_template",
    "parse_invocation",
]
