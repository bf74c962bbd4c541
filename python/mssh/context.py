"""Shell session state."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from . import transport
from .element import Element
from .errors import NotConnected
from .output import emit_packet, emit_result
from .shortcuts import PendingInput, ShortcutTable
from .transport import Endpoint

LOGGER = logging.getLogger("mssh.context")

DEFAULT_NAME = "mssh"
DEFAULT_TIMEOUT = 2.0
UNKNOWN_PEER = "-?-"
NOT_OPEN = "--Not open--"

Connector = Callable[[str, str], Endpoint]


@dataclass
class ShellContext:
    """Holds the state of one shell session.

    Only the session loop and the handlers it calls touch this object; the
    transport callbacks registered in :meth:`connect` only print.
    """

    name: str = DEFAULT_NAME
    timeout: float = DEFAULT_TIMEOUT
    shortcuts: ShortcutTable = field(default_factory=ShortcutTable)
    connector: Connector = transport.connect
    connected_to: str = UNKNOWN_PEER
    pending: PendingInput = field(default_factory=PendingInput)
    _endpoint: Optional[Endpoint] = field(default=None, init=False, repr=False)

    @property
    def endpoint(self) -> Optional[Endpoint]:
        endpoint = self._endpoint
        if endpoint is None or endpoint.closed:
            return None
        return endpoint

    @property
    def connected(self) -> bool:
        return self.endpoint is not None

    def _drop_closed(self) -> None:
        """Forget an endpoint the peer (or the transport) has already closed."""
        endpoint = self._endpoint
        if endpoint is not None and endpoint.closed:
            LOGGER.debug("dropping closed endpoint %s", endpoint)
            self._endpoint = None
            self.connected_to = UNKNOWN_PEER

    def require_endpoint(self, action: str = "send/submit a packet") -> Endpoint:
        self._drop_closed()
        endpoint = self._endpoint
        if endpoint is None:
            raise NotConnected(action)
        return endpoint

    def connect(self, address: str) -> Endpoint:
        """Close any active connection, then dial *address*."""
        self._drop_closed()
        if self._endpoint is not None:
            self.disconnect()
        endpoint = self.connector(address, self.name)
        endpoint.set_packet_handler(_print_inbound)
        endpoint.register_on_close(_print_closed)
        self._endpoint = endpoint
        self.connected_to = UNKNOWN_PEER
        LOGGER.info("connected to %s as %s", address, self.name)
        return endpoint

    def disconnect(self) -> None:
        endpoint = self.require_endpoint("disconnect")
        emit_result(f"Disconnecting from: {endpoint}")
        self._endpoint = None
        self.connected_to = UNKNOWN_PEER
        endpoint.close()

    def close(self) -> None:
        """Disconnect if connected; used on quit and end of input."""
        self._drop_closed()
        if self._endpoint is not None:
            self.disconnect()

    @property
    def prompt(self) -> str:
        self._drop_closed()
        endpoint = self._endpoint
        local = endpoint.name if endpoint is not None else NOT_OPEN
        return f"[{local} -> {self.connected_to}]: "


def _print_inbound(element: Element) -> None:
    emit_packet("Received", element)


def _print_closed(endpoint: Endpoint) -> None:
    LOGGER.info("connection %s closed", endpoint)


__all__ = ["ShellContext", "Connector", "DEFAULT_NAME", "DEFAULT_TIMEOUT", "UNKNOWN_PEER", "NOT_OPEN"]
