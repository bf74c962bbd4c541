"""Command base classes for mssh."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, NoReturn

from ..context import ShellContext
from ..errors import ParseError


class ArgumentParser(argparse.ArgumentParser):
    """argparse parser that reports usage errors as :class:`ParseError`."""

    def __init__(self, prog: str, **kwargs) -> None:
        super().__init__(prog=f"!{prog}", add_help=False, **kwargs)

    def error(self, message: str) -> NoReturn:
        raise ParseError(f"{self.prog}: {message}")


@dataclass
class Command:
    """Abstract command description.

    The registry resolves commands by the first letter of their name, so every
    command in a registry must start with a distinct letter.
    """

    name: str
    description: str
    usage: str = ""

    @property
    def key(self) -> str:
        return self.name[0]

    def parse(self, text: str) -> List[str]:
        return text.split()

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        raise NotImplementedError("Command must implement run()")

    def format_help(self) -> str:
        synopsis = f"!{self.name} {self.usage}".rstrip()
        return f"{synopsis:<36} {self.description}"
