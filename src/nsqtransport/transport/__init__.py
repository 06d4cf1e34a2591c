"""src/nsqtransport/transport/__init__.py

Transport layer module for nsqtransport.

This module provides the single TCP connection to an nsqd endpoint with
exact length reads and writes, lazy connect and explicit reconnect.
"""

from .connection import DEFAULT_HOST, DEFAULT_PORT, Connection, ConnectionState

__all__ = ["Connection", "ConnectionState", "DEFAULT_HOST", "DEFAULT_PORT"]
