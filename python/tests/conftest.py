"""
Pytest configuration and fixtures for mssh tests.
"""
import sys
from concurrent.futures import Future
from pathlib import Path
from typing import List, Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from mssh.commands import build_registry  # noqa: E402
from mssh.context import ShellContext  # noqa: E402
from mssh.element import Element  # noqa: E402
from mssh.errors import TransportError  # noqa: E402
from mssh.repl import ShellREPL  # noqa: E402
from mssh.shortcuts import ShortcutTable  # noqa: E402


class FakeEndpoint:
    """In-memory stand-in for :class:`mssh.transport.Endpoint`."""

    def __init__(self, name: str, peer: str, replies: Optional[List[Element]] = None) -> None:
        self.name = name
        self.peer = peer
        self.replies = list(replies or [])
        self.sent: List[Element] = []
        self.submitted: List[Element] = []
        self.futures: List[Future] = []
        self.packet_handler = None
        self.on_close = []
        self.closed = False

    def set_packet_handler(self, handler):
        self.packet_handler = handler
        return self

    def register_on_close(self, callback):
        self.on_close.append(callback)
        return self

    def send(self, element: Element) -> None:
        if self.closed:
            raise TransportError("connection closed")
        self.sent.append(element)

    def submit(self, element: Element) -> Future:
        if self.closed:
            raise TransportError("connection closed")
        self.submitted.append(element)
        future: Future = Future()
        if self.replies:
            future.set_result(self.replies.pop(0))
        self.futures.append(future)
        return future

    def close(self) -> None:
        self.closed = True
        for callback in self.on_close:
            callback(self)

    def __str__(self) -> str:
        return f"{self.name} -> {self.peer}"


class FakeConnector:
    def __init__(self) -> None:
        self.dialed: List[str] = []
        self.endpoints: List[FakeEndpoint] = []
        self.replies: List[Element] = []
        self.fail: Optional[Exception] = None

    def __call__(self, address: str, name: str) -> FakeEndpoint:
        self.dialed.append(address)
        if self.fail is not None:
            raise self.fail
        endpoint = FakeEndpoint(name, address, self.replies)
        self.endpoints.append(endpoint)
        return endpoint


class ScriptedReader:
    """Feeds prepared lines to the loop, then signals end of input."""

    def __init__(self, lines: List[str]) -> None:
        self._lines = list(lines)
        self.prompts: List[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self._lines:
            raise EOFError
        return self._lines.pop(0)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def shortcut_path(tmp_path) -> Path:
    return tmp_path / "mssh-shortcuts.txt"


@pytest.fixture
def ctx(connector, shortcut_path) -> ShellContext:
    return ShellContext(shortcuts=ShortcutTable(str(shortcut_path)), connector=connector)


@pytest.fixture
def connected_ctx(ctx, connector) -> ShellContext:
    ctx.connect("peer:4000")
    return ctx


@pytest.fixture
def registry():
    return build_registry()


@pytest.fixture
def make_repl(ctx, registry):
    def factory(lines: List[str]) -> ShellREPL:
        return ShellREPL(ctx, registry, reader=ScriptedReader(lines))

    return factory
