"""Request timeout command."""

from __future__ import annotations

import math
from typing import List

from .base import ArgumentParser, Command
from ..context import ShellContext
from ..output import emit_result


def seconds(text: str) -> float:
    value = float(text)
    if not math.isfinite(value) or value < 0:
        raise ValueError(text)
    return value


class TimeoutCommand(Command):
    def __init__(self) -> None:
        super().__init__("timeout", "Show or set the request timeout", usage="[<seconds>]")
        self._parser = ArgumentParser(self.name)
        self._parser.add_argument("seconds", nargs="?", type=seconds, help="Timeout in seconds (>= 0)")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        args = self._parser.parse_args(argv)
        if args.seconds is not None:
            ctx.timeout = args.seconds
            emit_result(f"Request timeout set to {ctx.timeout:g}s")
        else:
            emit_result(f"Request timeout is {ctx.timeout:g}s")
        return 0
