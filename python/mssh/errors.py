"""Error taxonomy for mssh.

Every operator-visible failure derives from :class:`MsshError` so the session
loop can report it and carry on.  :class:`QuitRequested` is deliberately not an
``MsshError``: it is the control sentinel that ends the loop.
"""

from __future__ import annotations


class MsshError(Exception):
    """Base class for errors reported to the operator."""


class ParseError(MsshError):
    """Malformed packet, command or argument syntax."""


class MissingCommandType(ParseError):
    def __init__(self) -> None:
        super().__init__("missing command type")


class MissingChildName(ParseError):
    def __init__(self) -> None:
        super().__init__("missing child element name after '<' in child element definition")


class UnterminatedChildElement(ParseError):
    def __init__(self, name: str) -> None:
        super().__init__(f"missing '>' at end of child element '{name}'")
        self.name = name


class UnterminatedStringLiteral(ParseError):
    def __init__(self, text: str = "") -> None:
        detail = f": {text}" if text else ""
        super().__init__(f"missing '\"' at end of string literal{detail}")
        self.text = text


class ShortcutError(MsshError):
    """Shortcut lookup, expansion or storage failure."""


class UndefinedShortcut(ShortcutError):
    def __init__(self, name: str) -> None:
        super().__init__(f"shortcut {name} is not defined")
        self.name = name


class InvalidArgumentIndex(ShortcutError):
    def __init__(self, index: int, supplied: int) -> None:
        super().__init__(f"invalid shortcut argument ${index} ({supplied} argument(s) supplied)")
        self.index = index
        self.supplied = supplied


class RecursionLimitExceeded(ShortcutError):
    def __init__(self, limit: int) -> None:
        super().__init__(f"shortcut nesting deeper than {limit}, you probably have a recursive shortcut")
        self.limit = limit


class ShortcutStoreError(ShortcutError):
    """The shortcut file holds a record that is not ``name:definition``."""


class NotConnected(MsshError):
    def __init__(self, action: str = "send/submit a packet") -> None:
        super().__init__(f"not connected, cannot {action} (use !connect <address>)")


class TransportError(MsshError):
    """Raised when the transport cannot complete an operation."""


class RequestTimeout(MsshError):
    def __init__(self, timeout: float) -> None:
        super().__init__(f"no reply within {timeout:g}s")
        self.timeout = timeout


class UnsupportedCommand(MsshError):
    def __init__(self, word: str, valid: list[str]) -> None:
        listing = ", ".join(f"!{name}" for name in valid)
        prefix = f"unsupported command '!{word}'" if word else "missing command after '!'"
        super().__init__(f"{prefix} (valid commands: {listing})")
        self.word = word


class QuitRequested(Exception):
    """Control sentinel raised by ``!quit``."""


__all__ = [
    "MsshError",
    "ParseError",
    "MissingCommandType",
    "MissingChildName",
    "UnterminatedChildElement",
    "UnterminatedStringLiteral",
    "ShortcutError",
    "UndefinedShortcut",
    "InvalidArgumentIndex",
    "RecursionLimitExceeded",
    "ShortcutStoreError",
    "NotConnected",
    "TransportError",
    "RequestTimeout",
    "UnsupportedCommand",
    "QuitRequested",
]
