"""Local identity command."""

from __future__ import annotations

from typing import List

from .base import ArgumentParser, Command
from ..context import ShellContext
from ..output import emit_result


class NameCommand(Command):
    def __init__(self) -> None:
        super().__init__("name", "Show or set the local name used for new connections", usage="[<name>]")
        self._parser = ArgumentParser(self.name)
        self._parser.add_argument("name", nargs="?", help="Local identity")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self._parser.parse_args(argv)
        if args.name:
            ctx.name = args.name
            emit_result(f"Name set to {ctx.name}")
        else:
            emit_result(f"Name is {ctx.name}")
        return 0
