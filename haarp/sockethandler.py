"""TCP and local-socket connections with a small read-ahead buffer."""

from __future__ import annotations

import logging
import select
import socket
import time
from typing import Optional

log = logging.getLogger(__name__)

_MAX_HOSTNAME = 250
_MAX_ADDRESSES = 16
_IP_CHARS = frozenset("0123456789.")
_UNIX_PATH_MAX = 107


class SocketError(OSError):
    """A socket operation failed, timed out or hit end of stream."""


class SocketHandler:
    """One socket plus the bytes that were read from it but not yet consumed."""

    MAX_RECV = 16384
    MAX_CONNECTIONS = 128
    RECV_TIMEOUT = 60.0
    SEND_TIMEOUT = 60.0
    CONNECT_TIMEOUT = 20.0
    TUNNEL_TIMEOUT = 20.0

    def __init__(self, source_address: str = "") -> None:
        self._source_address = source_address
        self._sock: Optional[socket.socket] = None
        self._buffer = bytearray()
        self._address: tuple[str, int] = ("0.0.0.0", 0)
        self._addresses: list[str] = []
        self._address_index = 0
        self._last_host = ""

    def __enter__(self) -> "SocketHandler":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connected(self) -> bool:
        """True while a socket is open."""
        return self._sock is not None

    @property
    def port(self) -> int:
        """TCP service number of the current address."""
        return self._address[1]

    @property
    def ip(self) -> str:
        """Dotted IPv4 address of the peer, target or bound interface."""
        return self._address[0]

    @property
    def address_count(self) -> int:
        """Number of addresses the last resolved host name gave."""
        return len(self._addresses)

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise SocketError("socket is not open")
        return self._sock

    def _attach(self, sock: socket.socket, address: tuple[str, int]) -> None:
        self._sock = sock
        self._address = (address[0], address[1])
        self._buffer.clear()

    def _wait(self, *, read: bool, timeout: float) -> bool:
        sock = self._require_socket()
        readers = [sock] if read else []
        writers = [] if read else [sock]
        try:
            ready_r, ready_w, _ = select.select(readers, writers, [], timeout)
        except (OSError, ValueError) as exc:
            raise SocketError(f"select() failed: {exc}") from exc
        return bool(ready_r or ready_w)

    def _read_chunk(self, timeout: float) -> bytes:
        if not self._wait(read=True, timeout=timeout):
            raise SocketError("receive timed out")
        try:
            return self._require_socket().recv(self.MAX_RECV)
        except OSError as exc:
            raise SocketError(f"recv() failed: {exc}") from exc

    def create_server(self, port: int, bind_address: str = "") -> None:
        """Listen on ``port`` at ``bind_address`` (all interfaces if empty)."""
        host = bind_address or "0.0.0.0"
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(self.MAX_CONNECTIONS)
        except OSError as exc:
            sock.close()
            raise SocketError(f"cannot listen on {host}:{port}: {exc}") from exc
        self._attach(sock, sock.getsockname())

    def accept_client(self) -> "SocketHandler":
        """Accept one connection and return a handler for it."""
        listener = self._require_socket()
        try:
            sock, address = listener.accept()
        except OSError as exc:
            raise SocketError(f"accept() failed: {exc}") from exc
        client = SocketHandler(self._source_address)
        client._attach(sock, address)
        return client

    def connect_to_server(self) -> None:
        """Connect to the address chosen by :meth:`set_domain_and_port`."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            if self._source_address:
                sock.bind((self._source_address, 0))
            sock.settimeout(self.CONNECT_TIMEOUT)
            sock.connect(self._address)
            sock.setblocking(True)
        except OSError as exc:
            sock.close()
            raise SocketError(
                f"cannot connect to {self._address[0]}:{self._address[1]}: {exc}"
            ) from exc
        self._sock = sock
        self._buffer.clear()

    def connect_to_socket(self, path: str, retry: int = 0) -> None:
        """Connect to a local stream socket, retrying once a second ``retry`` times."""
        path = path[:_UNIX_PATH_MAX]
        tries = 0
        while True:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            try:
                sock.connect(path)
            except OSError as exc:
                sock.close()
                if not isinstance(exc, FileNotFoundError):
                    log.error("connect to %s failed: %s", path, exc)
                tries += 1
                if tries > retry:
                    raise SocketError(f"cannot connect to {path}: {exc}") from exc
                time.sleep(1)
                continue
            self._sock = sock
            self._buffer.clear()
            return

    def send(self, data: bytes) -> None:
        """Send all of ``data``."""
        payload = memoryview(bytes(data))
        sock = self._require_socket()
        while payload:
            if not self._wait(read=False, timeout=self.SEND_TIMEOUT):
                raise SocketError("send timed out")
            try:
                sent = sock.send(payload)
            except OSError as exc:
                raise SocketError(f"send() failed: {exc}") from exc
            if sent == 0:
                raise SocketError("connection closed while sending")
            payload = payload[sent:]

    def recv(self, consume: bool = True, timeout: Optional[float] = None) -> bytes:
        """Receive up to ``MAX_RECV`` bytes; ``b""`` means the peer closed.

        With ``consume`` false the data stays buffered for the next read.
        A ``timeout`` of None or -1 uses ``RECV_TIMEOUT``.
        """
        if self._buffer:
            data = bytes(self._buffer)
            if consume:
                self._buffer.clear()
            return data
        if timeout is None or timeout == -1:
            timeout = self.RECV_TIMEOUT
        data = self._read_chunk(timeout)
        if not consume:
            self._buffer += data
        return data

    def recv_length(self, length: int) -> bytes:
        """Receive exactly ``length`` bytes, keeping any surplus buffered."""
        if len(self._buffer) >= length:
            data = bytes(self._buffer[:length])
            del self._buffer[:length]
            return data
        received = bytearray(self._buffer)
        self._buffer.clear()
        while len(received) < length:
            chunk = self._read_chunk(self.RECV_TIMEOUT)
            if not chunk:
                raise SocketError("connection closed before all data arrived")
            received += chunk
        self._buffer += received[length:]
        return bytes(received[:length])

    def get_line(self, separator: bytes = b"\r\n", timeout: Optional[float] = None) -> bytes:
        """Read up to ``separator``, consuming it and returning what precedes it."""
        if not separator:
            raise ValueError("separator must not be empty")
        if timeout is None or timeout == -1:
            timeout = self.RECV_TIMEOUT
        while (position := self._buffer.find(separator)) == -1:
            chunk = self._read_chunk(timeout)
            if not chunk:
                raise SocketError("connection closed before end of line")
            self._buffer += chunk
        line = bytes(self._buffer[:position])
        del self._buffer[: position + len(separator)]
        return line

    def set_domain_and_port(self, domain: str, port: int) -> None:
        """Choose the address to connect to, resolving ``domain`` if needed.

        Asking again for the same host name rotates through its addresses.
        """
        if not domain:
            raise SocketError("empty host name")
        if port < 1 or port > 65536:
            raise SocketError(f"invalid port {port}")
        length = len(domain)
        domain = domain[:_MAX_HOSTNAME]

        if 7 <= length <= 15 and set(domain) <= _IP_CHARS:
            self._last_host = ""
            try:
                packed = socket.inet_aton(domain)
            except OSError as exc:
                raise SocketError(f"invalid address {domain!r}") from exc
            self._address = (socket.inet_ntoa(packed), port)
            return

        if self._addresses and self._last_host == domain:
            if len(self._addresses) > 1:
                self._address_index = (self._address_index + 1) % len(self._addresses)
            self._address = (self._addresses[self._address_index], port)
            return

        try:
            _, _, addresses = socket.gethostbyname_ex(domain)
        except OSError as exc:
            self._last_host = ""
            raise SocketError(f"cannot resolve {domain!r}: {exc}") from exc
        addresses = addresses[:_MAX_ADDRESSES]
        if not addresses:
            self._last_host = ""
            raise SocketError(f"no addresses for {domain!r}")
        self._addresses = addresses
        self._address_index = 0
        self._last_host = domain
        self._address = (addresses[0], port)

    def check_for_data(self, timeout: float = 0) -> bool:
        """True if data is buffered or arrives within ``timeout`` seconds."""
        if self._buffer:
            return True
        if self._sock is None:
            return False
        return self._wait(read=True, timeout=timeout)

    def wait_for_tunnel_data(self, other: "SocketHandler") -> Optional["SocketHandler"]:
        """Wait for either side of a tunnel; return the readable one, or None on timeout."""
        mine, theirs = self._require_socket(), other._require_socket()
        try:
            ready, _, _ = select.select([mine, theirs], [], [], self.TUNNEL_TIMEOUT)
        except (OSError, ValueError):
            return None
        if not ready:
            return None
        return self if mine in ready else other

    def set_tos(self, tos: int) -> None:
        """Set the IP type-of-service byte on outgoing packets."""
        try:
            self._require_socket().setsockopt(socket.IPPROTO_IP, socket.IP_TOS, tos)
        except OSError as exc:
            log.warning("setsockopt(IP_TOS) failed: %s", exc)

    def close(self) -> None:
        """Drop buffered data and close the socket, if any."""
        self._buffer.clear()
        if self._sock is not None:
            try:
                self._sock.close()
            except OSError as exc:
                log.error("close() failed: %s", exc)
            self._sock = None