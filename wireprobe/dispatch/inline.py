"""
Inline dispatcher: run the handler directly inside the accept loop.

This is the simplest policy and reproduces the classic single-threaded
server: the next connection is accepted only after the current one has been
fully serviced. Useful for deterministic debugging of one client at a time.
"""

from __future__ import annotations

import socket
from typing import Any

from wireprobe.dispatch.abstract import AbstractDispatcher, ConnectionHandler
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


class InlineDispatcher(AbstractDispatcher):
    """
    Call the handler synchronously.

    Exceptions escaping the handler are logged and swallowed so a single bad
    connection cannot stop the accept loop.
    """

    name: str = "inline"
    description: str = "Handle each connection in the accept loop (sequential)."

    def dispatch(self, handler: ConnectionHandler, conn: socket.socket, address: Any) -> None:
        try:
            handler(conn)
        except Exception:  # noqa: BLE001 - one connection must not stop the listener
            log.exception(f"[HANDLER FAILED] {address}", extra={"dispatcher": self.name})


__all__ = ["InlineDispatcher"]
