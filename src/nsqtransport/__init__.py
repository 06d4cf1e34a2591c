"""src/nsqtransport/__init__.py

nsqtransport - Raw TCP transport for NSQ clients.

nsqtransport owns one socket to one nsqd endpoint and gives the protocol
layer above it a "read exactly N bytes or fail" / "write all bytes or fail"
contract. It is built entirely on Python's standard library.

Key Features:
    - Zero external dependencies
    - Lazy connect on first use, explicit reconnect
    - Exact length reads and writes bounded by timeouts
    - Typed errors carrying OS error codes and the endpoint
    - Optional on-connect hook (e.g. to send the protocol magic)

Example:
    Basic usage::

        from nsqtransport import Connection

        def send_magic(conn):
            conn.write(b"  V2")

        with Connection("127.0.0.1", 4150, on_connect=send_magic) as conn:
            conn.write(b"NOP\\n")
            if conn.is_readable():
                size = conn.read(4)
"""

import logging

# pylint: disable=redefined-builtin
from nsqtransport.exceptions import (
    ConnectionError,
    NsqTransportError,
    TransportTimeoutError,
)
from nsqtransport.transport.connection import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    Connection,
    ConnectionState,
)
from nsqtransport.utils.timing import Timeout, split_seconds
from nsqtransport.version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Connection",
    "ConnectionState",
    "ConnectionError",
    "NsqTransportError",
    "TransportTimeoutError",
    "Timeout",
    "split_seconds",
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "__version__",
]
