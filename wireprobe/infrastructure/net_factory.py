"""
Socket factory utilities for wireprobe.

Centralizes creation of the listening socket and of client connections so the
listener, the client and the tests agree on socket options and timeouts.

Client connections retry refused connections with exponential backoff using
tenacity (the server may still be starting up). Every other socket error is
raised immediately.
"""

from __future__ import annotations

import asyncio
import socket
from typing import Optional

from tenacity import (
    AsyncRetrying,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from wireprobe.config import get_settings
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


def _family_for(host: str) -> socket.AddressFamily:
    return socket.AF_INET6 if ":" in host else socket.AF_INET


def bind_listener(
    host: Optional[str] = None,
    port: Optional[int] = None,
    backlog: Optional[int] = None,
    poll_interval: Optional[float] = None,
) -> socket.socket:
    """
    Create, bind and start listening on a TCP socket.

    SO_REUSEADDR is set on POSIX platforms by socket.create_server.

    Parameters
    ----------
    host : str, optional
        Interface to bind. Defaults to settings.server_host (all IPv4
        interfaces). "::" or "" binds a dual-stack socket accepting both IPv6
        and IPv4 clients when the platform supports it.
    port : int, optional
        Port to bind. Defaults to settings.server_port; 0 picks a free port.
    backlog : int, optional
        Listen backlog. Defaults to settings.server_backlog.
    poll_interval : float, optional
        Accept timeout in seconds, which bounds how long the accept loop takes
        to notice a shutdown request. Defaults to settings.accept_poll_interval.

    Raises
    ------
    OSError
        If the address cannot be bound (e.g. the port is already in use).
        The socket is closed before the error propagates.
    """
    settings = get_settings()
    host = settings.server_host if host is None else host
    port = settings.server_port if port is None else port
    backlog = backlog or settings.server_backlog
    poll_interval = poll_interval or settings.accept_poll_interval

    # "::" or "" listens on IPv6 and IPv4 at once where the platform allows it.
    if host in ("", "::") and socket.has_dualstack_ipv6():
        sock = socket.create_server(
            ("::", port), family=socket.AF_INET6, backlog=backlog, dualstack_ipv6=True
        )
    else:
        sock = socket.create_server((host, port), family=_family_for(host), backlog=backlog)
    sock.settimeout(poll_interval)

    log.debug(
        f"[BIND] listening on {host}:{sock.getsockname()[1]}",
        extra={"host": host, "port": sock.getsockname()[1], "backlog": backlog},
    )
    return sock


def _retrying_kwargs(attempts: int) -> dict:
    return {
        "stop": stop_after_attempt(attempts),
        "wait": wait_exponential(multiplier=0.1, min=0.1, max=2),
        "retry": retry_if_exception_type(ConnectionRefusedError),
        "reraise": True,
    }


def open_connection(
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
    attempts: Optional[int] = None,
) -> socket.socket:
    """
    Open a TCP connection to the server with automatic retry.

    Retries refused connections up to `attempts` times (default
    settings.client_connect_attempts) with exponential backoff.

    Returns
    -------
    socket.socket
        A connected socket with `timeout` applied to subsequent operations.

    Raises
    ------
    OSError
        If the connection fails after all retry attempts.
    """
    settings = get_settings()
    host = host or settings.client_host
    port = port or settings.client_port
    timeout = settings.client_timeout if timeout is None else timeout
    attempts = attempts or settings.client_connect_attempts

    for attempt in Retrying(**_retrying_kwargs(attempts)):
        with attempt:
            if attempt.retry_state.attempt_number > 1:
                log.info(
                    f"[CONNECT RETRY] {host}:{port}",
                    extra={"attempt": attempt.retry_state.attempt_number},
                )
            return socket.create_connection((host, port), timeout=timeout)
    raise AssertionError("unreachable")  # pragma: no cover - tenacity reraises


async def open_async_connection(
    host: Optional[str] = None,
    port: Optional[int] = None,
    attempts: Optional[int] = None,
) -> tuple[asyncio.StreamReader, asyncio.StreamWriter]:
    """
    Asyncio counterpart of open_connection returning a stream pair.
    """
    settings = get_settings()
    host = host or settings.client_host
    port = port or settings.client_port
    attempts = attempts or settings.client_connect_attempts

    async for attempt in AsyncRetrying(**_retrying_kwargs(attempts)):
        with attempt:
            return await asyncio.open_connection(host, port)
    raise AssertionError("unreachable")  # pragma: no cover - tenacity reraises


__all__ = ["bind_listener", "open_async_connection", "open_connection"]
