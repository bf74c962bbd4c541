"""
Reference transport for mssh.

Responsibilities:
    * Manage one JSON-over-TCP connection to a message-stream peer.
    * Send one-way packets and correlate requests with their replies.
    * Hand unsolicited inbound packets to a display callback.

Each packet travels as one UTF-8 JSON object per line, the dict form of
:class:`mssh.element.Element`.  Requests carry a ``_RequestId`` attribute; the
peer answers with a ``Reply`` element carrying the same id.
"""

from __future__ import annotations

import json
import logging
import socket
import threading
from collections import OrderedDict
from concurrent.futures import Future, InvalidStateError
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .element import REPLY, Element
from .errors import TransportError

LOGGER = logging.getLogger("mssh.transport")

REQUEST_ID_ATTRIBUTE = "_RequestId"

PacketHandler = Callable[[Element], None]
CloseHandler = Callable[["Endpoint"], None]


@dataclass
class TransportConfig:
    connect_timeout: float = 3.0
    read_chunk: int = 4096


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host:port`` (``[v6]:port`` for IPv6 literals)."""
    host, sep, port_text = address.strip().rpartition(":")
    if not sep or not port_text:
        raise TransportError(f"invalid address {address!r}, expected <host>:<port>")
    try:
        port = int(port_text)
    except ValueError:
        raise TransportError(f"invalid port in address {address!r}") from None
    if not 0 < port < 65536:
        raise TransportError(f"port out of range in address {address!r}")
    host = host.strip("[]") or "127.0.0.1"
    return host, port


def encode_element(element: Element) -> bytes:
    return json.dumps(element.to_dict()).encode("utf-8") + b"\n"


def decode_element(line: bytes) -> Element:
    payload = json.loads(line.decode("utf-8"))
    if not isinstance(payload, dict):
        raise ValueError("packet is not a JSON object")
    return Element.from_dict(payload)


class Endpoint:
    """One live connection to a peer."""

    def __init__(
        self,
        sock: socket.socket,
        name: str,
        *,
        peer: str = "",
        config: Optional[TransportConfig] = None,
    ) -> None:
        self.name = name
        self.peer = peer
        self.config = config or TransportConfig()
        self._sock: Optional[socket.socket] = sock
        self._send_lock = threading.Lock()
        self._lock = threading.Lock()
        self._next_id = 1
        self._pending: "OrderedDict[str, Future]" = OrderedDict()
        self._packet_handler: Optional[PacketHandler] = None
        self._on_close: List[CloseHandler] = []
        self._closed = False
        self._reader_thread: Optional[threading.Thread] = None

    #
    # Lifecycle
    #
    @property
    def closed(self) -> bool:
        return self._closed

    def set_packet_handler(self, handler: Optional[PacketHandler]) -> "Endpoint":
        self._packet_handler = handler
        return self

    def register_on_close(self, callback: CloseHandler) -> "Endpoint":
        self._on_close.append(callback)
        return self

    def start(self) -> "Endpoint":
        if self._reader_thread is None:
            self._reader_thread = threading.Thread(target=self._reader_loop, name=f"mssh-reader-{self.peer}", daemon=True)
            self._reader_thread.start()
        return self

    def close(self) -> None:
        self._handle_disconnect()
        thread = self._reader_thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=0.5)

    #
    # Packet operations
    #
    def send(self, element: Element) -> None:
        self._write(encode_element(element))

    def submit(self, element: Element) -> Future:
        """Send a request; the returned future resolves to the reply element."""
        request_id = self._next_request_id()
        element.set_attribute(REQUEST_ID_ATTRIBUTE, request_id)
        future: Future = Future()
        with self._lock:
            self._pending[request_id] = future
        future.add_done_callback(lambda _: self._forget(request_id))
        try:
            self._write(encode_element(element))
        except TransportError as exc:
            self._resolve(future, error=exc)
            raise
        LOGGER.debug("submitted request %s to %s", request_id, self.peer)
        return future

    #
    # Internal helpers
    #
    def _next_request_id(self) -> str:
        with self._lock:
            request_id = self._next_id
            self._next_id += 1
        return str(request_id)

    def _forget(self, request_id: str) -> None:
        with self._lock:
            self._pending.pop(request_id, None)

    def _write(self, data: bytes) -> None:
        sock = self._sock
        if self._closed or sock is None:
            raise TransportError(f"connection to {self.peer or 'peer'} is closed")
        try:
            with self._send_lock:
                sock.sendall(data)
        except OSError as exc:
            self._handle_disconnect()
            raise TransportError(f"send failed: {exc}") from exc

    def _reader_loop(self) -> None:
        try:
            self._read_packets()
        except Exception:
            LOGGER.exception("reader for %s failed", self.peer)
        finally:
            self._handle_disconnect()

    def _read_packets(self) -> None:
        buffer = b""
        while not self._closed:
            sock = self._sock
            if not sock:
                break
            try:
                chunk = sock.recv(self.config.read_chunk)
            except OSError as exc:
                if not self._closed:
                    LOGGER.debug("read from %s failed: %s", self.peer, exc)
                break
            if not chunk:
                break
            buffer += chunk
            while b"\n" in buffer:
                line, buffer = buffer.split(b"\n", 1)
                if not line.strip():
                    continue
                try:
                    element = decode_element(line)
                except ValueError as exc:
                    LOGGER.warning("dropping malformed packet from %s: %s", self.peer, exc)
                    continue
                self._dispatch(element)

    def _dispatch(self, element: Element) -> None:
        if element.name == REPLY:
            request_id = element.get_attribute(REQUEST_ID_ATTRIBUTE)
            with self._lock:
                future = self._pending.pop(request_id, None) if request_id else None
            if future is not None:
                self._resolve(future, reply=element)
                return
            LOGGER.debug("reply %s matches no pending request", request_id)
        handler = self._packet_handler
        if not handler:
            return
        try:
            handler(element)
        except Exception:
            LOGGER.exception("inbound packet handler failed")

    def _resolve(self, future: Future, *, reply: Optional[Element] = None, error: Optional[BaseException] = None) -> None:
        if future.done():
            return
        # a cancelled wait may race the reader; whichever lands first wins
        try:
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(reply)
        except InvalidStateError:
            LOGGER.debug("request future already settled")

    def _handle_disconnect(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            sock, self._sock = self._sock, None
            pending = list(self._pending.values())
            self._pending.clear()
        if sock:
            try:
                sock.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass
            sock.close()
        for future in pending:
            self._resolve(future, error=TransportError("connection closed"))
        LOGGER.debug("connection to %s closed", self.peer)
        for callback in list(self._on_close):
            try:
                callback(self)
            except Exception:
                LOGGER.exception("close callback failed")

    def __str__(self) -> str:
        return f"{self.name} -> {self.peer}"


def connect(address: str, name: str, config: Optional[TransportConfig] = None) -> Endpoint:
    """Dial *address* and return a started endpoint identified as *name*."""
    config = config or TransportConfig()
    host, port = parse_address(address)
    try:
        sock = socket.create_connection((host, port), timeout=config.connect_timeout)
    except OSError as exc:
        raise TransportError(f"connect to {address} failed: {exc}") from exc
    sock.settimeout(None)
    LOGGER.debug("connected to %s:%d as %s", host, port, name)
    return Endpoint(sock, name, peer=address, config=config).start()


__all__ = [
    "REQUEST_ID_ATTRIBUTE",
    "TransportConfig",
    "TransportError",
    "Endpoint",
    "connect",
    "parse_address",
    "encode_element",
    "decode_element",
]
