"""Packet content model: elements and the packets that carry them."""

from __future__ import annotations

import logging
from concurrent.futures import TimeoutError as FutureTimeout
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Union
from xml.sax.saxutils import escape, quoteattr

from .errors import RequestTimeout

if TYPE_CHECKING:  # pragma: no cover
    from .transport import Endpoint

LOGGER = logging.getLogger("mssh.element")

MESSAGE = "Message"
REQUEST = "Request"
REPLY = "Reply"

Child = Union["Element", str]


@dataclass
class Element:
    """Named node with attributes and an ordered list of children."""

    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[Child] = field(default_factory=list)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def set_attribute(self, name: str, value: str) -> None:
        self.attributes[name] = value

    def append(self, child: Child) -> None:
        self.children.append(child)

    @property
    def elements(self) -> List["Element"]:
        return [child for child in self.children if isinstance(child, Element)]

    @property
    def text(self) -> str:
        return "".join(child for child in self.children if isinstance(child, str))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "children": [child.to_dict() if isinstance(child, Element) else child for child in self.children],
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Element":
        name = payload.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError("element payload is missing a name")
        attributes = payload.get("attributes") or {}
        if not isinstance(attributes, Mapping):
            raise ValueError(f"element {name} has malformed attributes")
        raw_children = payload.get("children") or []
        if not isinstance(raw_children, list):
            raise ValueError(f"element {name} has malformed children")
        children: List[Child] = []
        for child in raw_children:
            if isinstance(child, Mapping):
                children.append(cls.from_dict(child))
            else:
                children.append(str(child))
        return cls(name, {str(k): str(v) for k, v in attributes.items()}, children)

    def render(self) -> str:
        attrs = "".join(f" {key}={quoteattr(value)}" for key, value in self.attributes.items())
        if not self.children:
            return f"<{self.name}{attrs} />"
        body = "".join(child.render() if isinstance(child, Element) else escape(child) for child in self.children)
        return f"<{self.name}{attrs}>{body}</{self.name}>"

    def __str__(self) -> str:
        return self.render()


@dataclass
class Packet:
    """An element bound to the endpoint it will be transmitted on."""

    element: Element
    endpoint: "Endpoint"

    @property
    def is_request(self) -> bool:
        return self.element.name == REQUEST

    def send(self) -> None:
        self.endpoint.send(self.element)

    def submit(self, timeout: float) -> Element:
        """Submit the request and block until its reply or *timeout* seconds."""
        future = self.endpoint.submit(self.element)
        try:
            return future.result(timeout=max(0.0, timeout))
        except FutureTimeout:
            future.cancel()
            LOGGER.debug("request %s cancelled after %ss", self.element.get_attribute("Type"), timeout)
            raise RequestTimeout(timeout) from None

    def __str__(self) -> str:
        return self.element.render()


__all__ = ["Element", "Packet", "Child", "MESSAGE", "REQUEST", "REPLY"]
