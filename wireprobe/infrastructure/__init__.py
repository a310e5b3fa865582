"""
Infrastructure package for wireprobe.

Centralizes socket creation (listening socket, client connections with
retry). Keep this layer focused on I/O setup, decoupled from the record
handling and dispatch logic.
"""

from wireprobe.infrastructure.net_factory import (
    bind_listener,
    open_async_connection,
    open_connection,
)

__all__ = [
    "bind_listener",
    "open_async_connection",
    "open_connection",
]
