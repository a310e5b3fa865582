"""
Per-connection handling: decode one Record, increment it, send it back, close.

Each call works only on its own socket and its own Record, so handlers can run
concurrently without any locking. Failures are logged where they happen and
never propagate to the accept loop.
"""

from __future__ import annotations

import contextlib
import socket
from typing import Optional

from wireprobe.config import Settings, get_settings
from wireprobe.domain.codec import DecodeError, read_record, write_record
from wireprobe.domain.models import Record
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


def _endpoint(getter) -> str:
    """Format a socket address for logging; unavailable endpoints show as '?'."""
    try:
        address = getter()
    except OSError:
        return "?"
    if isinstance(address, tuple):
        return f"{address[0]}:{address[1]}"
    return str(address) or "?"


def handle_connection(
    conn: socket.socket, settings: Optional[Settings] = None
) -> Optional[Record]:
    """
    Service a single accepted connection and close it.

    Steps: read exactly one Record, increment every field, write the result,
    close. The socket is closed on every exit path.

    On a short read or socket error while reading, the failure is logged and
    the zero Record is used instead, so the peer still receives a reply. With
    `strict_decode` enabled the connection is closed without a reply.

    Returns
    -------
    Record | None
        The Record that was sent (or attempted), or None when strict decoding
        dropped the connection.
    """
    settings = settings or get_settings()

    with contextlib.closing(conn):
        peer = _endpoint(conn.getpeername)
        local = _endpoint(conn.getsockname)
        context = {"peer": peer, "local": local}
        log.info(f"[CONN OPEN] from {peer}, on {local}", extra=context)

        if settings.connection_timeout is not None:
            conn.settimeout(settings.connection_timeout)

        log.info("[READ START]", extra=context)
        try:
            record = read_record(conn)
            log.info("[READ DONE]", extra=context)
        except (DecodeError, OSError) as exc:
            log.warning(f"[READ FAILED] {exc}", extra={**context, "error": str(exc)})
            if settings.strict_decode:
                log.info("[CONN CLOSE] strict decoding, no reply sent", extra=context)
                return None
            record = Record.zero()

        log.info(f"[READ] {record}", extra={**context, **record.model_dump()})

        reply = record.incremented()

        log.info("[WRITE START]", extra=context)
        try:
            write_record(conn, reply)
            log.info("[WRITE DONE]", extra=context)
        except OSError as exc:
            log.warning(f"[WRITE FAILED] {exc}", extra={**context, "error": str(exc)})

        log.info(f"[SENT] {reply}", extra={**context, **reply.model_dump()})
        return reply


__all__ = ["handle_connection"]
