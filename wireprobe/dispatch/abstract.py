"""
Abstract dispatcher interfaces for wireprobe.

A dispatcher decides how an accepted connection is handed to the connection
handler: inline in the accept loop, or as an independently scheduled unit of
work. Concrete dispatchers implement the Dispatcher protocol so the listener
can swap them by name.
"""

from __future__ import annotations

import abc
import socket
from typing import Any, Callable, Optional, Protocol, runtime_checkable

ConnectionHandler = Callable[[socket.socket], Any]


@runtime_checkable
class Dispatcher(Protocol):
    """
    Common interface all dispatchers must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    description : str
        A human-friendly summary of the scheduling policy.
    """

    name: str
    description: str

    def dispatch(self, handler: ConnectionHandler, conn: socket.socket, address: Any) -> None:
        """
        Hand an accepted connection to `handler`.

        Parameters
        ----------
        handler : ConnectionHandler
            Callable servicing the connection; it owns and closes `conn`.
        conn : socket.socket
            The accepted connection.
        address : Any
            Peer address as returned by accept(), used for logging.
        """
        ...

    def close(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight work, at most `timeout` seconds."""
        ...


class AbstractDispatcher(abc.ABC):
    """
    Optional ABC helper for class-based implementations.

    Subclasses should set `name` and `description` and implement `dispatch`.
    """

    name: str
    description: str

    @abc.abstractmethod
    def dispatch(
        self, handler: ConnectionHandler, conn: socket.socket, address: Any
    ) -> None:  # pragma: no cover - interface only
        """Run or schedule the handler for one connection."""
        raise NotImplementedError

    def close(self, timeout: Optional[float] = None) -> None:
        """Nothing to wait for by default."""
        del timeout


__all__ = [
    "AbstractDispatcher",
    "ConnectionHandler",
    "Dispatcher",
]
