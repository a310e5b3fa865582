"""
Thread-per-connection dispatcher.

Each accepted connection is serviced in its own daemon thread, so a slow or
silent client only stalls its own handler while the listener keeps accepting.
Handlers share no state; the only bookkeeping here is the set of live worker
threads, used to wait for in-flight connections on shutdown.
"""

from __future__ import annotations

import itertools
import socket
import threading
import time
from typing import Any, Optional, Set

from wireprobe.dispatch.abstract import AbstractDispatcher, ConnectionHandler
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


class ThreadDispatcher(AbstractDispatcher):
    """
    Start one daemon thread per connection.

    Threads remove themselves from the live set when their handler returns,
    whether it succeeded or raised.
    """

    name: str = "thread"
    description: str = "Handle each connection in its own daemon thread (concurrent)."

    def __init__(self) -> None:
        self._threads: Set[threading.Thread] = set()
        self._lock = threading.Lock()
        self._counter = itertools.count(1)

    @property
    def active_count(self) -> int:
        """Number of handler threads still running."""
        with self._lock:
            return len(self._threads)

    def _run(self, handler: ConnectionHandler, conn: socket.socket, address: Any) -> None:
        try:
            handler(conn)
        except Exception:  # noqa: BLE001 - log in the worker, nobody joins for results
            log.exception(f"[HANDLER FAILED] {address}", extra={"dispatcher": self.name})
        finally:
            with self._lock:
                self._threads.discard(threading.current_thread())

    def dispatch(self, handler: ConnectionHandler, conn: socket.socket, address: Any) -> None:
        thread = threading.Thread(
            target=self._run,
            args=(handler, conn, address),
            name=f"wireprobe-conn-{next(self._counter)}",
            daemon=True,
        )
        with self._lock:
            self._threads.add(thread)
        try:
            thread.start()
        except RuntimeError:
            with self._lock:
                self._threads.discard(thread)
            conn.close()
            raise

    def close(self, timeout: Optional[float] = None) -> None:
        """
        Join live handler threads.

        Parameters
        ----------
        timeout : float, optional
            Overall budget in seconds for all joins. None waits indefinitely.
        """
        with self._lock:
            pending = list(self._threads)
        deadline = None if timeout is None else time.monotonic() + timeout
        for thread in pending:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            thread.join(remaining)
        still_running = self.active_count
        if still_running:
            log.warning(
                f"[DISPATCHER CLOSE] {still_running} handler(s) still running",
                extra={"dispatcher": self.name, "active": still_running},
            )


__all__ = ["ThreadDispatcher"]
