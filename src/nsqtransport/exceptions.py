"""src/nsqtransport/exceptions.py

nsqtransport Exceptions hierarchy.
"""

# pylint: disable=redefined-builtin

from typing import Optional

from nsqtransport.utils.timing import split_seconds


class NsqTransportError(Exception):
    """Base exception for all nsqtransport errors."""


class ConnectionError(NsqTransportError):
    """
    Socket creation, connect, option or transfer failure.

    Attributes:
        errno: OS level error code, when one is known.
        strerror: Human readable OS error message, when one is known.
        domain: ``host:port`` of the endpoint involved.
    """

    def __init__(
        self,
        message: str,
        errno: Optional[int] = None,
        strerror: Optional[str] = None,
        domain: Optional[str] = None,
    ) -> None:
        self.message = message
        self.errno = errno
        self.strerror = strerror
        self.domain = domain

        if strerror:
            super().__init__(f"{strerror} -> {message}")
        else:
            super().__init__(message)


class TransportTimeoutError(NsqTransportError):
    """
    A read or write could not complete within the read/write timeout.

    Attributes:
        operation: ``"read"`` or ``"write"``.
        length: Number of bytes originally requested.
        remaining: Bytes still outstanding when the wait expired.
        domain: ``host:port`` of the endpoint involved.
        timeout: The bound that was exceeded, in seconds.
    """

    def __init__(
        self,
        operation: str,
        length: int,
        remaining: int,
        domain: str,
        timeout: float,
    ) -> None:
        self.operation = operation
        self.length = length
        self.remaining = remaining
        self.domain = domain
        self.timeout = timeout

        sec, usec = split_seconds(timeout)
        verb, prep = ("reading", "from") if operation == "read" else ("writing", "to")
        super().__init__(
            f"Timed out {verb} {remaining} bytes {prep} {domain} "
            f"after {sec} seconds and {usec} microseconds"
        )
