"""utils/timing.py

Timeouts configuration.
"""

import math
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_CONNECT_TIMEOUT = 3.0
DEFAULT_READ_WRITE_TIMEOUT = 3.0
DEFAULT_READ_WAIT_TIMEOUT = 15.0

USEC_PER_SEC = 1_000_000


def split_seconds(value: float) -> Tuple[int, int]:
    """
    Split a duration in seconds into whole seconds and microseconds.

    ``split_seconds(2.5) == (2, 500000)``. The microsecond part is rounded,
    carrying into the seconds part when it reaches a full second.
    """
    if value < 0:
        raise ValueError(f"Timeout must be non-negative, got {value!r}")

    sec = math.floor(value)
    usec = round((value - sec) * USEC_PER_SEC)
    if usec >= USEC_PER_SEC:
        sec += 1
        usec -= USEC_PER_SEC
    return int(sec), int(usec)


@dataclass(frozen=True)
class Timeout:
    """
    Timeout configuration.

    Attributes:
        connect: Maximum time to wait for connection establishment (socket connect).
        read_write: Maximum time to wait on each readable/writable poll
            while a read or write is in progress.
        read_wait: Maximum time to wait for data to become available
            when polling with ``Connection.is_readable``.
    """

    connect: float = DEFAULT_CONNECT_TIMEOUT
    read_write: float = DEFAULT_READ_WRITE_TIMEOUT
    read_wait: float = DEFAULT_READ_WAIT_TIMEOUT

    def __post_init__(self) -> None:
        for name in ("connect", "read_write", "read_wait"):
            value = getattr(self, name)
            if value is None or value < 0:
                raise ValueError(f"Timeout.{name} must be non-negative, got {value!r}")

    @classmethod
    def from_float(cls, timeout: Optional[float]) -> "Timeout":
        """Create a Timeout instance using a single float for every bound."""
        if timeout is None:
            return cls()
        return cls(connect=timeout, read_write=timeout, read_wait=timeout)

    @property
    def read_write_parts(self) -> Tuple[int, int]:
        """``read_write`` as ``(seconds, microseconds)``."""
        return split_seconds(self.read_write)

    @property
    def read_wait_parts(self) -> Tuple[int, int]:
        """``read_wait`` as ``(seconds, microseconds)``."""
        return split_seconds(self.read_wait)
