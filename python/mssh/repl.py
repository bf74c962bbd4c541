"""Interactive session loop for mssh."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .commands import CommandRegistry
from .context import ShellContext
from .errors import MsshError, QuitRequested
from .output import emit_error, emit_packet, emit_result
from .packet import parse_packet
from .parser import LineKind, classify_line
from .shortcuts import parse_invocation

try:
    from .completion import ShellCompleter
except Exception:  # pragma: no cover - prompt_toolkit missing
    ShellCompleter = None  # type: ignore

LOGGER = logging.getLogger("mssh.repl")

try:
    from prompt_toolkit import PromptSession
    from prompt_toolkit.history import FileHistory, InMemoryHistory
    from prompt_toolkit.patch_stdout import patch_stdout
except ImportError:  # pragma: no cover - fallback path
    PromptSession = None  # type: ignore
    FileHistory = None  # type: ignore
    InMemoryHistory = None  # type: ignore
    patch_stdout = None

Reader = Callable[[str], str]


class ShellREPL:
    """Reads lines, replays shortcut expansions and routes each line."""

    def __init__(
        self,
        ctx: ShellContext,
        registry: CommandRegistry,
        *,
        history_path: Optional[str] = None,
        reader: Optional[Reader] = None,
    ) -> None:
        self.ctx = ctx
        self.registry = registry
        self.history_path = history_path
        self._reader = reader

    def run(self) -> int:
        reader = self._reader or self._build_reader()
        while True:
            try:
                line = self.next_line(reader)
            except (EOFError, KeyboardInterrupt):
                print()
                self._shutdown()
                return 0
            try:
                self.execute(line)
            except QuitRequested:
                return 0
            except MsshError as exc:
                emit_error(exc)
            except Exception as exc:
                LOGGER.exception("command failed")
                emit_error(f"'{line.strip()}' failed: {exc}")

    def next_line(self, reader: Reader) -> str:
        """Return the pending expansion if any, else read from the operator."""
        pending = self.ctx.pending.pop()
        if pending is not None:
            emit_result(f"-> {pending}")
            return pending
        self.ctx.pending.reset()
        return reader(self.ctx.prompt)

    def execute(self, line: str) -> None:
        kind = classify_line(line)
        if kind is LineKind.BLANK:
            return
        text = line.strip()
        if kind is LineKind.COMMAND:
            self.registry.dispatch(self.ctx, text[1:])
        elif kind is LineKind.SHORTCUT:
            self.expand_shortcut(text[1:])
        else:
            self.submit_packet(text)

    def expand_shortcut(self, text: str) -> None:
        invocation = parse_invocation(text)
        expansion = self.ctx.shortcuts.expand(invocation.name, invocation.args)
        if invocation.preview:
            emit_result(f"?-> {expansion}")
            return
        self.ctx.pending.push(expansion)

    def submit_packet(self, line: str) -> None:
        endpoint = self.ctx.require_endpoint()
        packet = parse_packet(line, endpoint)
        if not packet.is_request:
            emit_packet("Sending", packet.element)
            packet.send()
            return
        emit_packet("Submitting", packet.element)
        reply = packet.submit(self.ctx.timeout)
        emit_packet("Got reply", reply)

    def drain(self, line: str) -> None:
        """Execute *line* and every expansion it queues, without prompting."""
        self.ctx.pending.reset()
        self.execute(line)
        while self.ctx.pending:
            self.execute(self.next_line(_no_input))

    def _shutdown(self) -> None:
        try:
            self.ctx.close()
        except MsshError as exc:
            LOGGER.debug("close on exit failed: %s", exc)

    def _build_reader(self) -> Reader:
        if PromptSession is None:
            return input
        history = None
        if self.history_path and FileHistory is not None:
            history = FileHistory(self.history_path)
        elif InMemoryHistory is not None:
            history = InMemoryHistory()
        completer = None
        if ShellCompleter is not None:
            completer = ShellCompleter(self.ctx, self.registry)
        session = PromptSession(history=history, completer=completer, complete_while_typing=False)

        def read(prompt: str) -> str:
            with patch_stdout():
                return session.prompt(prompt)

        return read


def _no_input(prompt: str) -> str:
    raise EOFError(prompt)


__all__ = ["ShellREPL"]
