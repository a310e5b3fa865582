from __future__ import annotations

import socket

import pytest

from wireprobe.infrastructure import net_factory
from wireprobe.infrastructure.net_factory import bind_listener, open_connection


def test_bind_listener_uses_ephemeral_port_and_poll_timeout():
    sock = bind_listener(host="127.0.0.1", port=0, poll_interval=0.25)
    try:
        host, port = sock.getsockname()
        assert host == "127.0.0.1"
        assert port > 0
        assert sock.gettimeout() == 0.25
    finally:
        sock.close()


def test_bind_listener_raises_when_port_is_taken():
    first = bind_listener(host="127.0.0.1", port=0)
    try:
        _, port = first.getsockname()
        with pytest.raises(OSError):
            bind_listener(host="127.0.0.1", port=port)
    finally:
        first.close()


@pytest.mark.skipif(not socket.has_dualstack_ipv6(), reason="no dual-stack IPv6 support")
def test_bind_listener_accepts_ipv4_and_ipv6_on_wildcard_host():
    sock = bind_listener(host="::", port=0, poll_interval=0.25)
    try:
        assert sock.family == socket.AF_INET6
        port = sock.getsockname()[1]
        for client_host in ("127.0.0.1", "::1"):
            with socket.create_connection((client_host, port), timeout=1.0):
                conn, _ = sock.accept()
                conn.close()
    finally:
        sock.close()


def test_open_connection_retries_refused_connections(monkeypatch):
    attempts = []
    sentinel = object()

    def _flaky_create_connection(address, timeout=None):
        attempts.append(address)
        if len(attempts) < 3:
            raise ConnectionRefusedError("refused")
        return sentinel

    monkeypatch.setattr(net_factory.socket, "create_connection", _flaky_create_connection)
    monkeypatch.setattr(net_factory, "wait_exponential", lambda **kwargs: lambda retry_state: 0)

    result = open_connection("127.0.0.1", 9090, timeout=1.0, attempts=3)

    assert result is sentinel
    assert attempts == [("127.0.0.1", 9090)] * 3


def test_open_connection_gives_up_after_last_attempt(monkeypatch):
    calls = []

    def _refuse(address, timeout=None):
        calls.append(address)
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr(net_factory.socket, "create_connection", _refuse)
    monkeypatch.setattr(net_factory, "wait_exponential", lambda **kwargs: lambda retry_state: 0)

    with pytest.raises(ConnectionRefusedError):
        open_connection("127.0.0.1", 9090, attempts=2)
    assert len(calls) == 2


def test_open_connection_does_not_retry_other_errors(monkeypatch):
    calls = []

    def _unreachable(address, timeout=None):
        calls.append(address)
        raise socket.gaierror("name resolution failed")

    monkeypatch.setattr(net_factory.socket, "create_connection", _unreachable)

    with pytest.raises(socket.gaierror):
        open_connection("nowhere.invalid", 9090, attempts=3)
    assert len(calls) == 1
