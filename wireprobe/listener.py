"""
Listener: owns the bound socket and runs the accept loop.

Usage:
    from wireprobe.infrastructure import bind_listener
    from wireprobe.listener import Listener

    with Listener(bind_listener(port=9090)) as listener:
        listener.serve_forever()

The listening socket is passed in rather than created here, so the owner
decides its lifetime and tests can hand in a fake. Accept failures are logged
and the loop continues; only shutdown() ends it.
"""

from __future__ import annotations

import functools
import socket
import threading
from typing import Any, Callable, Optional

from wireprobe.config import Settings, get_settings
from wireprobe.dispatch import Dispatcher, ThreadDispatcher
from wireprobe.handler import handle_connection
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


class Listener:
    """
    Accept loop over an already-bound listening socket.

    Parameters
    ----------
    sock : socket.socket
        Bound, listening socket. Ownership transfers to the Listener, which
        closes it in close(). A socket timeout acts as the stop-flag poll
        interval; timeouts are not treated as failures.
    dispatcher : Dispatcher, optional
        Scheduling policy for accepted connections. Defaults to one thread
        per connection.
    handler : callable, optional
        Per-connection handler. Defaults to handle_connection bound to
        `settings`.
    settings : Settings, optional
        Configuration passed to the default handler.
    """

    def __init__(
        self,
        sock: socket.socket,
        dispatcher: Optional[Dispatcher] = None,
        handler: Optional[Callable[[socket.socket], Any]] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        self._sock = sock
        self.dispatcher = dispatcher or ThreadDispatcher()
        self.handler = handler or functools.partial(
            handle_connection, settings=settings or get_settings()
        )
        self._stop = threading.Event()
        self._closed = False
        self.accepted = 0
        self.accept_failures = 0

    @property
    def address(self) -> tuple[str, int]:
        """The (host, port) the socket is bound to."""
        host, port = self._sock.getsockname()[:2]
        return host, port

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    def serve_once(self) -> bool:
        """
        Accept and dispatch at most one connection.

        Returns
        -------
        bool
            True if a connection was accepted and dispatched, False on a poll
            timeout or an accept failure.
        """
        try:
            conn, address = self._sock.accept()
        except socket.timeout:
            return False
        except OSError as exc:
            if self._stop.is_set():
                return False
            self.accept_failures += 1
            log.error(f"[ACCEPT FAILED] {exc}", extra={"error": str(exc)})
            return False

        self.accepted += 1
        log.debug(f"[ACCEPT] {address}", extra={"dispatcher": self.dispatcher.name})
        try:
            self.dispatcher.dispatch(self.handler, conn, address)
        except Exception:  # noqa: BLE001 - a failed dispatch must not end the loop
            log.exception(f"[DISPATCH FAILED] {address}", extra={"dispatcher": self.dispatcher.name})
            conn.close()
            return False
        return True

    def serve_forever(self) -> None:
        """Run the accept loop until shutdown() is called."""
        host, port = self.address
        log.info(
            f"[LISTENING] {host}:{port} (dispatch={self.dispatcher.name})",
            extra={"host": host, "port": port, "dispatcher": self.dispatcher.name},
        )
        while not self._stop.is_set():
            self.serve_once()
        log.info("[STOPPED] accept loop finished", extra={"accepted": self.accepted})

    def shutdown(self) -> None:
        """Ask the accept loop to stop. Safe to call from any thread or a signal handler."""
        self._stop.set()

    def close(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop accepting, release the listening socket and wait for in-flight handlers.

        Idempotent.
        """
        self._stop.set()
        if self._closed:
            return
        self._closed = True
        self._sock.close()
        self.dispatcher.close(timeout)

    def __enter__(self) -> "Listener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        del exc_type, exc, tb
        self.close()


__all__ = ["Listener"]
