"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from .base import Command
from ..context import ShellContext

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry

_LINE_FORMS = (
    ("<type> [name=value...] [<child ... >] [text...]", "Send a one-way Message"),
    ("?<type> [name=value...] [<child ... >] [text...]", "Submit a Request and wait for the reply"),
    ("@<shortcut> [args...]", "Expand a shortcut and run it"),
    ("@?<shortcut> [args...]", "Show a shortcut expansion without running it"),
)


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Show available commands")
        self._registry: Optional["CommandRegistry"] = None

    def bind(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        registry = self._registry
        if not registry:
            return 1
        for command in registry.list_commands():
            print(command.format_help())
        for synopsis, description in _LINE_FORMS:
            print(f"{synopsis:<36} {description}")
        return 0
