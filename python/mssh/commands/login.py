"""Login command."""

from __future__ import annotations

from typing import List

from .base import ArgumentParser, Command
from ..context import UNKNOWN_PEER, ShellContext
from ..element import REQUEST, Element, Packet
from ..output import emit_packet, emit_result

LOGIN_TYPE = "_Login"


class LoginCommand(Command):
    def __init__(self) -> None:
        super().__init__("login", "Log in to the peer with the local name")
        self._parser = ArgumentParser(self.name)

    def run(self, ctx: ShellContext, argv: List[str]) -> int:
        self._parser.parse_args(argv)
        endpoint = ctx.require_endpoint("perform login")
        request = Element(REQUEST, {"Type": LOGIN_TYPE, "Name": ctx.name})
        reply = Packet(request, endpoint).submit(ctx.timeout)
        emit_packet("Login reply", reply)
        ctx.connected_to = reply.get_attribute("Name", UNKNOWN_PEER) or UNKNOWN_PEER
        emit_result(f"Logged in to {ctx.connected_to}")
        return 0
