"""prompt_toolkit completer for mssh."""

from __future__ import annotations

from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .commands import CommandRegistry
from .context import ShellContext
from .parser import COMMAND_MARKER, REQUEST_MARKER, SHORTCUT_MARKER


class ShellCompleter(Completer):
    """Completes ``!command`` names and ``@shortcut`` names."""

    def __init__(self, ctx: ShellContext, registry: CommandRegistry) -> None:
        self.ctx = ctx
        self.registry = registry

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        text = document.text_before_cursor.lstrip()
        if not text:
            return
        tokens = text.split()
        trailing = text[-1].isspace()
        if text.startswith(COMMAND_MARKER):
            if len(tokens) == 1 and not trailing:
                prefix = tokens[0][len(COMMAND_MARKER):]
                yield from self._complete(self.registry.names(), prefix)
                return
            command = self.registry.get(tokens[0][len(COMMAND_MARKER):])
            if command is not None and command.name == "shortcut":
                if len(tokens) == 1 and trailing:
                    yield from self._complete(self.ctx.shortcuts.names(), "")
                elif len(tokens) == 2 and not trailing:
                    yield from self._complete(self.ctx.shortcuts.names(), tokens[1])
            return
        if text.startswith(SHORTCUT_MARKER) and len(tokens) == 1 and not trailing:
            prefix = tokens[0][len(SHORTCUT_MARKER):]
            if prefix.startswith(REQUEST_MARKER):
                prefix = prefix[len(REQUEST_MARKER):]
            yield from self._complete(self.ctx.shortcuts.names(), prefix)

    @staticmethod
    def _complete(candidates: Iterable[str], prefix: str) -> Iterable[Completion]:
        for entry in _format_candidates(candidates, prefix):
            yield Completion(entry, start_position=-len(prefix))


def _format_candidates(candidates: Iterable[str], prefix: str = "") -> List[str]:
    if not prefix:
        return sorted(dict.fromkeys(candidates))
    needle = prefix.lower()
    ordered = [c for c in candidates if c.lower().startswith(needle)]
    return sorted(dict.fromkeys(ordered))


__all__ = ["ShellCompleter"]
