"""
wireprobe - Diagnostic TCP server for validating binary record encoding.

A client connects, writes one 12-byte Record (three little-endian signed
32-bit integers: Foo, Bar, Baz), and the server replies with every field
incremented by one before closing the connection. The package provides:

- The Record model and its fixed-offset binary codec
- The per-connection handler and the accept-loop Listener
- Pluggable dispatch policies (inline, thread-per-connection)
- Blocking and asyncio diagnostic clients
- A typer CLI (`wireprobe serve`, `wireprobe send`)
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from wireprobe.client import exchange, exchange_async
from wireprobe.config import Settings, get_settings
from wireprobe.dispatch import (
    AbstractDispatcher,
    Dispatcher,
    InlineDispatcher,
    ThreadDispatcher,
    available_dispatchers,
    resolve_dispatcher,
)
from wireprobe.domain import RECORD_SIZE, DecodeError, Record, decode_record, encode_record
from wireprobe.handler import handle_connection
from wireprobe.infrastructure import bind_listener
from wireprobe.listener import Listener
from wireprobe.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Wire format
    "RECORD_SIZE",
    "DecodeError",
    "Record",
    "decode_record",
    "encode_record",
    # Server
    "Listener",
    "bind_listener",
    "handle_connection",
    # Dispatch
    "AbstractDispatcher",
    "Dispatcher",
    "InlineDispatcher",
    "ThreadDispatcher",
    "available_dispatchers",
    "resolve_dispatcher",
    # Client
    "exchange",
    "exchange_async",
    # Logging
    "configure_logging",
    "get_logger",
]
