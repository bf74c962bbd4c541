"""Shortcut management command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellContext
from ..output import emit_result, render_pairs


class ShortcutCommand(Command):
    def __init__(self) -> None:
        super().__init__("shortcut", "List, show or define shortcuts", usage="[<name> [<definition>...]]")

    def parse(self, text: str) -> List[str]:
        # keep the definition verbatim, spacing included
        return text.strip().split(None, 1)

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        if not argv:
            if not len(ctx.shortcuts):
                emit_result("No shortcuts defined")
            else:
                render_pairs(ctx.shortcuts.items())
            return 0
        name = argv[0]
        if len(argv) == 1:
            definition = ctx.shortcuts.get(name)
            if definition is None:
                emit_result(f"No definition for shortcut named: {name}")
            else:
                emit_result(f"Defined: {name} -> {definition}")
            return 0
        ctx.shortcuts.define(name, argv[1])
        emit_result(f"Defined: {name} -> {argv[1]}")
        return 0
