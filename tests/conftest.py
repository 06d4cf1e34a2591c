import _thread
import socket
import threading
from contextlib import contextmanager
from unittest import mock

import pytest


@pytest.fixture
def timeout_context():
    """Fixture providing a timeout context manager."""

    @contextmanager
    def _timeout_context(seconds):
        def timeout_handler():
            _thread.interrupt_main()

        timer = threading.Timer(seconds, timeout_handler)
        timer.start()
        try:
            yield
        except KeyboardInterrupt:
            pytest.fail(f"Test timed out after {seconds} seconds")
        finally:
            timer.cancel()

    return _timeout_context


@pytest.fixture
def socket_factory():
    """Fixture producing distinct mock sockets, one per call."""

    def _make() -> mock.Mock:
        sock = mock.Mock(spec=socket.socket)
        sock.recv = mock.Mock(return_value=b"")
        sock.send = mock.Mock(side_effect=lambda data, flags=0: len(data))
        return sock

    return _make
