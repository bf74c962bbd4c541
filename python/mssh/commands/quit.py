"""Quit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellContext
from ..errors import QuitRequested


class QuitCommand(Command):
    def __init__(self) -> None:
        super().__init__("quit", "Close the connection and exit")

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        ctx.close()
        raise QuitRequested()
