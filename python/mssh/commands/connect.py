"""Connect and disconnect commands."""

from __future__ import annotations

from typing import List

from .base import ArgumentParser, Command
from ..context import ShellContext
from ..output import emit_result


class ConnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("connect", "Connect to a peer, replacing any open connection", usage="<host:port>")
        self._parser = ArgumentParser(self.name)
        self._parser.add_argument("address", help="Peer address as host:port")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self._parser.parse_args(argv)
        ctx.connect(args.address)
        emit_result(f"Connected to: {args.address}")
        return 0


class DisconnectCommand(Command):
    def __init__(self) -> None:
        super().__init__("disconnect", "Close the open connection")
        self._parser = ArgumentParser(self.name)

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        self._parser.parse_args(argv)
        ctx.disconnect()
        return 0
