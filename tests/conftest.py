"""
Pytest configuration for wireprobe.

Provides fixtures for:
- Settings tuned for fast, loopback-only tests
- A running server on an ephemeral port (thread or inline dispatch)
- Socket helpers shared by unit and integration tests
"""

from __future__ import annotations

import socket
import threading
from typing import Callable, Generator, Optional

import pytest

from wireprobe.config import Settings, get_settings
from wireprobe.dispatch import Dispatcher, ThreadDispatcher
from wireprobe.infrastructure.net_factory import bind_listener
from wireprobe.listener import Listener


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> Generator[None, None, None]:
    """
    Drop the cached Settings around every test so env overrides never leak.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings with loopback binding, an ephemeral port and short poll intervals.
    """
    return Settings(
        server_host="127.0.0.1",
        server_port=0,
        accept_poll_interval=0.05,
        client_host="127.0.0.1",
        client_timeout=5.0,
        client_connect_attempts=1,
        log_level="DEBUG",
    )


@pytest.fixture
def start_server(
    test_settings: Settings,
) -> Generator[Callable[..., Listener], None, None]:
    """
    Factory fixture starting a Listener in a background thread.

    Every server started through it is shut down and closed on teardown.
    """
    started: list[tuple[Listener, threading.Thread]] = []

    def _start(
        dispatcher: Optional[Dispatcher] = None, settings: Optional[Settings] = None
    ) -> Listener:
        settings = settings or test_settings
        sock = bind_listener(
            host=settings.server_host,
            port=settings.server_port,
            poll_interval=settings.accept_poll_interval,
        )
        listener = Listener(
            sock, dispatcher=dispatcher or ThreadDispatcher(), settings=settings
        )
        thread = threading.Thread(target=listener.serve_forever, daemon=True)
        thread.start()
        started.append((listener, thread))
        return listener

    yield _start

    for listener, thread in started:
        listener.shutdown()
        thread.join(timeout=5.0)
        listener.close(timeout=5.0)


def _recv_until_eof(sock: socket.socket, limit: int = 1024) -> bytes:
    """Read from `sock` until the peer closes (or `limit` bytes arrive)."""
    data = bytearray()
    while len(data) < limit:
        chunk = sock.recv(limit - len(data))
        if not chunk:
            break
        data.extend(chunk)
    return bytes(data)


@pytest.fixture
def recv_until_eof() -> Callable[..., bytes]:
    """
    Helper reading from a socket until the peer closes it.
    """
    return _recv_until_eof


@pytest.fixture
def socket_pair() -> Generator[tuple[socket.socket, socket.socket], None, None]:
    """
    A connected (server_side, client_side) pair of stream sockets.
    """
    server_side, client_side = socket.socketpair()
    client_side.settimeout(5.0)
    try:
        yield server_side, client_side
    finally:
        server_side.close()
        client_side.close()
