"""src/nsqtransport/transport/connection.py

Single TCP connection to a single nsqd endpoint.

This module turns raw, partial and failure-prone socket I/O into exact
length reads and writes bounded by timeouts, with lazy connect, explicit
reconnect and typed errors for the protocol layer above it.
"""

import contextlib
import enum
import errno
import logging
import os
import select
import socket
import struct
import sys
from typing import Any, Callable, Optional, Union

# pylint: disable=redefined-builtin
from nsqtransport.exceptions import ConnectionError, TransportTimeoutError
from nsqtransport.utils.timing import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_WAIT_TIMEOUT,
    DEFAULT_READ_WRITE_TIMEOUT,
    Timeout,
    split_seconds,
)

__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "Connection", "ConnectionState"]

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4150

logger = logging.getLogger(__name__)

# recv/send must never outlast the select window.
_TRANSFER_FLAGS = getattr(socket, "MSG_DONTWAIT", 0)

OnConnect = Callable[["Connection"], Any]
Buffer = Union[bytes, bytearray, memoryview]


class ConnectionState(enum.Enum):
    """Lifecycle position of a Connection."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def _timeval(value: float) -> bytes:
    """Pack a duration into the layout SO_RCVTIMEO/SO_SNDTIMEO expect."""
    sec, usec = split_seconds(value)
    if sys.platform == "win32":
        # Windows takes a DWORD in milliseconds.
        return struct.pack("<L", sec * 1000 + usec // 1000)
    return struct.pack("ll", sec, usec)


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


def _os_error(
    message: str, exc: Optional[OSError], domain: str, code: int = 0
) -> ConnectionError:
    """Build a ConnectionError carrying the OS error code and message."""
    code = code or (exc.errno if exc is not None and exc.errno else 0)
    if code:
        strerror: Optional[str] = os.strerror(code)
    elif exc is not None:
        strerror = str(exc) or None
    else:
        strerror = None
    return ConnectionError(
        message, errno=code or None, strerror=strerror, domain=domain
    )


class Connection:
    """
    Owns exactly one TCP socket to one nsqd endpoint.

    The socket is created on first use and kept until ``reconnect`` or
    ``close``. Not thread-safe: one owner drives it sequentially.

    Attributes:
        timeout: Connect, read/write and read-wait bounds.
        non_blocking: Whether the socket is switched to non-blocking mode
            after connect.
        on_connect: Optional hook called with this Connection after every
            successful connect.
        sock: The underlying socket object, or None.
        state: Current ConnectionState.
    """

    __slots__ = (
        "_host",
        "_port",
        "timeout",
        "non_blocking",
        "on_connect",
        "sock",
        "state",
    )

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: Optional[int] = DEFAULT_PORT,
        connect_timeout: Optional[float] = None,
        read_write_timeout: Optional[float] = None,
        read_wait_timeout: Optional[float] = None,
        non_blocking: bool = False,
        on_connect: Optional[OnConnect] = None,
        timeout: Optional[Timeout] = None,
    ) -> None:
        """
        Initialize connection parameters. No I/O happens here.

        Timeouts come either from ``timeout`` or from the individual
        ``*_timeout`` arguments, never both. A zero connect bound means no
        bound; a zero read/write bound means a single non-waiting poll.
        """
        self._host = host
        self._port = port or DEFAULT_PORT

        individual = (connect_timeout, read_write_timeout, read_wait_timeout)

        if timeout is None:
            self.timeout = Timeout(
                connect=_or_default(connect_timeout, DEFAULT_CONNECT_TIMEOUT),
                read_write=_or_default(read_write_timeout, DEFAULT_READ_WRITE_TIMEOUT),
                read_wait=_or_default(read_wait_timeout, DEFAULT_READ_WAIT_TIMEOUT),
            )

        elif any(value is not None for value in individual):
            raise ValueError(
                "Pass either timeout= or the individual *_timeout arguments, not both"
            )

        else:
            self.timeout = timeout

        self.non_blocking = bool(non_blocking)
        self.on_connect = on_connect
        self.sock: Optional[socket.socket] = None
        self.state = ConnectionState.DISCONNECTED

    @property
    def host(self) -> str:
        """Target hostname or address."""
        return self._host

    @property
    def port(self) -> int:
        """Target TCP port."""
        return self._port

    @property
    def domain(self) -> str:
        """``host:port`` identity of the endpoint."""
        return f"{self._host}:{self._port}"

    def __str__(self) -> str:
        return self.domain

    def __repr__(self) -> str:
        return f"<Connection {self.domain} {self.state.value}>"

    def connect(self) -> socket.socket:
        """
        Return the live socket, opening it first if there is none.
        """
        if self.sock is not None:
            return self.sock

        self.state = ConnectionState.CONNECTING
        logger.debug(f"Connecting to {self.domain}")
        # A zero bound means no bound, as for the kernel send/recv timeouts.
        connect_to = self.timeout.connect or None

        try:
            sock = socket.create_connection(
                (self._host, self._port), timeout=connect_to
            )

        except socket.timeout as e:
            self.state = ConnectionState.DISCONNECTED
            raise _os_error(
                f"Timeout connecting to {self.domain}",
                e,
                self.domain,
                code=errno.ETIMEDOUT,
            ) from e

        except OSError as e:
            self.state = ConnectionState.DISCONNECTED
            raise _os_error(
                f"Failed to connect socket to {self.domain}", e, self.domain
            ) from e

        try:
            sock.settimeout(None)
            if self.timeout.read_write > 0:
                tv = _timeval(self.timeout.read_write)
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVTIMEO, tv)
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_SNDTIMEO, tv)
            if self.non_blocking or not _TRANSFER_FLAGS:
                sock.setblocking(False)

        except OSError as e:
            self._teardown(sock)
            self.state = ConnectionState.DISCONNECTED
            raise _os_error(
                f"Failed to set socket timeout options for {self.domain}",
                e,
                self.domain,
            ) from e

        self.sock = sock
        self.state = ConnectionState.CONNECTED
        logger.debug(f"Connected to {self.domain}")

        if self.on_connect is not None:
            try:
                self.on_connect(self)
            except BaseException:
                logger.debug(f"on_connect hook failed for {self.domain}")
                self.close()
                raise

        return sock

    get_socket = connect

    def reconnect(self) -> socket.socket:
        """
        Tear down the current socket, if any, and connect again.
        """
        logger.debug(f"Reconnecting to {self.domain}")
        self.close()
        return self.connect()

    def close(self) -> None:
        """
        Close the connection if it is open.
        """
        sock, self.sock = self.sock, None
        self.state = ConnectionState.DISCONNECTED
        if sock is not None:
            self._teardown(sock)
            logger.debug(f"Closed connection to {self.domain}")

    def _teardown(self, sock: socket.socket) -> None:
        """Best-effort shutdown and close; errors are only logged."""
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError as e:
            logger.debug(f"Ignoring shutdown error for {self.domain}: {e}")

        with contextlib.suppress(OSError):
            sock.close()

    def __enter__(self) -> "Connection":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        self.close()

    def _select(self, sock: socket.socket, want_write: bool, timeout: float) -> bool:
        """Wait until the socket is readable (or writable). False on timeout."""
        try:
            if want_write:
                _, ready, _ = select.select([], [sock], [], timeout)
            else:
                ready, _, _ = select.select([sock], [], [], timeout)

        except (OSError, ValueError) as e:
            action = "write to" if want_write else "read from"
            raise _os_error(
                f"Could not poll {self.domain} to {action} it",
                e if isinstance(e, OSError) else None,
                self.domain,
            ) from e

        return bool(ready)

    def is_readable(self) -> bool:
        """
        Wait up to the read-wait timeout for data to become available.
        """
        sock = self.connect()
        return self._select(sock, want_write=False, timeout=self.timeout.read_wait)

    def read(self, length: int) -> bytes:
        """
        Read exactly ``length`` bytes.

        Raises:
            TransportTimeoutError: No data within the read/write timeout.
            ConnectionError: The read failed or the peer closed the socket.
        """
        if length < 0:
            raise ValueError(f"length must be non-negative, got {length}")
        if length == 0:
            return b""

        sock = self.connect()
        data = bytearray()
        remaining = length

        while remaining > 0:
            readable = self._select(
                sock, want_write=False, timeout=self.timeout.read_write
            )
            if not readable:
                raise TransportTimeoutError(
                    "read", length, remaining, self.domain, self.timeout.read_write
                )

            try:
                chunk = sock.recv(remaining, _TRANSFER_FLAGS)

            except BlockingIOError:
                continue

            except OSError as e:
                raise _os_error(
                    f"Failed to read data from {self.domain}", e, self.domain
                ) from e

            if not chunk:
                raise _os_error(
                    f"Read 0 bytes from {self.domain}",
                    None,
                    self.domain,
                    code=errno.ECONNRESET,
                )

            data.extend(chunk)
            remaining -= len(chunk)

        return bytes(data)

    def write(self, data: Buffer) -> None:
        """
        Write all of ``data`` to the socket.

        Raises:
            TransportTimeoutError: The socket did not become writable in time.
            ConnectionError: The write failed.
        """
        view = memoryview(data).cast("B")
        length = len(view)
        if length == 0:
            return

        sock = self.connect()
        offset = 0

        while offset < length:
            writable = self._select(
                sock, want_write=True, timeout=self.timeout.read_write
            )
            if not writable:
                raise TransportTimeoutError(
                    "write",
                    length,
                    length - offset,
                    self.domain,
                    self.timeout.read_write,
                )

            try:
                written = sock.send(view[offset:], _TRANSFER_FLAGS)

            except BlockingIOError:
                continue

            except OSError as e:
                raise _os_error(
                    f"Failed to write to {self.domain}", e, self.domain
                ) from e

            offset += written
