"""Recursive-descent parser turning a command line into a packet element tree.

Grammar over the token stream::

    command       := TYPE-token attr-or-child*
    attr-or-child := NAME '=' VALUE | '<' child-spec | quoted-value | bare-value
    child-spec    := childname attr-or-child* '>'

A leading ``?`` on the line makes the root a ``Request``; otherwise it is a
``Message``.  The type token becomes the root's ``Type`` attribute.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .element import MESSAGE, REQUEST, Element, Packet
from .errors import (
    MissingChildName,
    MissingCommandType,
    ParseError,
    UnterminatedChildElement,
    UnterminatedStringLiteral,
)
from .parser import REQUEST_MARKER, split_tokens

if TYPE_CHECKING:  # pragma: no cover
    from .transport import Endpoint

CHILD_OPEN = "<"
CHILD_CLOSE = ">"
QUOTE = '"'


def _unquote(token: str) -> str:
    if len(token) < 2 or not token.endswith(QUOTE):
        raise UnterminatedStringLiteral(token)
    return token[1:-1]


class ElementParser:
    """Parser state: the token list and a cursor into it."""

    def __init__(self, tokens: List[str]) -> None:
        self.tokens = tokens
        self.position = 0

    @property
    def at_end(self) -> bool:
        return self.position >= len(self.tokens)

    def peek(self) -> Optional[str]:
        if self.at_end:
            return None
        return self.tokens[self.position]

    def advance(self) -> str:
        token = self.tokens[self.position]
        self.position += 1
        return token

    def parse_command(self, root_name: str) -> Element:
        if self.at_end:
            raise MissingCommandType()
        element = Element(root_name)
        element.set_attribute("Type", self.advance())
        self.parse_content(element)
        if not self.at_end:
            raise ParseError(f"unexpected '{CHILD_CLOSE}' at token {self.position + 1}, no child element is open")
        return element

    def parse_content(self, element: Element) -> None:
        """Consume attributes and children until the end or a closing '>'."""
        while not self.at_end and self.peek() != CHILD_CLOSE:
            token = self.advance()
            if token.startswith(CHILD_OPEN):
                element.append(self.parse_child(token))
            elif not token.startswith(QUOTE) and "=" in token:
                name, _, value = token.partition("=")
                if not name:
                    raise ParseError(f"missing attribute name in '{token}'")
                if value.startswith(QUOTE):
                    value = _unquote(value)
                element.set_attribute(name, value)
            elif token.startswith(QUOTE):
                element.append(_unquote(token))
            else:
                element.append(token)

    def parse_child(self, token: str) -> Element:
        name = token[len(CHILD_OPEN):]
        if not name:
            if self.at_end or self.peek() == CHILD_CLOSE:
                raise MissingChildName()
            name = self.advance()
        child = Element(name)
        self.parse_content(child)
        if self.peek() != CHILD_CLOSE:
            raise UnterminatedChildElement(name)
        self.advance()
        return child


def parse_element(line: str) -> Element:
    """Parse a packet line into its root element."""
    command = line.strip()
    root_name = MESSAGE
    if command.startswith(REQUEST_MARKER):
        root_name = REQUEST
        command = command[len(REQUEST_MARKER):].strip()
    parser = ElementParser(split_tokens(command))
    return parser.parse_command(root_name)


def parse_packet(line: str, endpoint: "Endpoint") -> Packet:
    """Parse a packet line and bind it to *endpoint*."""
    return Packet(parse_element(line), endpoint)


__all__ = ["ElementParser", "parse_element", "parse_packet"]
