"""Command registry and dispatcher for mssh control commands (``!...``)."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from .base import ArgumentParser, Command
from .connect import ConnectCommand, DisconnectCommand
from .help import HelpCommand
from .login import LoginCommand
from .name import NameCommand
from .quit import QuitCommand
from .shortcut import ShortcutCommand
from .timeout import TimeoutCommand
from ..context import ShellContext
from ..errors import UnsupportedCommand

LOGGER = logging.getLogger("mssh.commands")


class CommandRegistry:
    """Stores the known commands and resolves a word by its first letter."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}
        self._ordered: List[Command] = []

    def register(self, command: Command) -> None:
        existing = self._commands.get(command.key)
        if existing is not None:
            raise ValueError(f"command {command.name!r} clashes with {existing.name!r} on '{command.key}'")
        self._ordered.append(command)
        self._commands[command.key] = command

    def get(self, word: str) -> Optional[Command]:
        if not word:
            return None
        return self._commands.get(word[0].lower())

    def list_commands(self) -> Iterable[Command]:
        return self._ordered

    def names(self) -> List[str]:
        return [command.name for command in self._ordered]

    def dispatch(self, ctx: ShellContext, text: str) -> int:
        """Run the command line *text* (without the leading ``!``)."""
        parts = text.strip().split(None, 1)
        word = parts[0] if parts else ""
        command = self.get(word)
        if command is None:
            raise UnsupportedCommand(word, self.names())
        argv = command.parse(parts[1] if len(parts) > 1 else "")
        LOGGER.debug("dispatching !%s %s", command.name, argv)
        return command.run(ctx, argv)


def build_registry() -> CommandRegistry:
    registry = CommandRegistry()
    commands = [
        QuitCommand(),
        TimeoutCommand(),
        ConnectCommand(),
        DisconnectCommand(),
        NameCommand(),
        ShortcutCommand(),
        LoginCommand(),
        HelpCommand(),
    ]
    for command in commands:
        registry.register(command)
        bind = getattr(command, "bind", None)
        if callable(bind):
            bind(registry)
    return registry


__all__ = ["ArgumentParser", "Command", "CommandRegistry", "build_registry"]
