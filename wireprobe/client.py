"""
Diagnostic client: send one Record, read the server's reply.

Two flavours are provided: a blocking one built on plain sockets and an
asyncio one built on streams. Both perform exactly one exchange per
connection, matching the server's one-record-per-connection contract.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import Optional

from wireprobe.config import get_settings
from wireprobe.domain.codec import (
    RECORD_SIZE,
    DecodeError,
    decode_record,
    encode_record,
    read_record,
    write_record,
)
from wireprobe.domain.models import Record
from wireprobe.infrastructure.net_factory import open_async_connection, open_connection
from wireprobe.utils.logging import get_logger

log = get_logger(__name__)


def exchange(
    record: Record,
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Record:
    """
    Send `record` to the server and return the Record it replies with.

    Raises
    ------
    OSError
        If the connection cannot be established or breaks.
    DecodeError
        If the server closes before sending a full Record.
    """
    with contextlib.closing(open_connection(host, port, timeout=timeout)) as sock:
        peer = sock.getpeername()
        log.info(f"[SEND] {record} to {peer[0]}:{peer[1]}", extra=record.model_dump())
        write_record(sock, record)
        reply = read_record(sock)
        log.info(f"[RECEIVED] {reply}", extra=reply.model_dump())
        return reply


async def exchange_async(
    record: Record,
    host: Optional[str] = None,
    port: Optional[int] = None,
    timeout: Optional[float] = None,
) -> Record:
    """
    Asyncio variant of exchange().

    `timeout` bounds the whole exchange (connect, write and read) and defaults
    to settings.client_timeout, like the blocking client.
    """
    settings = get_settings()
    timeout = settings.client_timeout if timeout is None else timeout

    async def _exchange() -> Record:
        reader, writer = await open_async_connection(host, port)
        try:
            log.info(f"[SEND] {record}", extra=record.model_dump())
            writer.write(encode_record(record))
            await writer.drain()
            try:
                data = await reader.readexactly(RECORD_SIZE)
            except asyncio.IncompleteReadError as exc:
                raise DecodeError(
                    f"unexpected end of stream after {len(exc.partial)} of {RECORD_SIZE} bytes",
                    received=exc.partial,
                ) from exc
            reply = decode_record(data)
            log.info(f"[RECEIVED] {reply}", extra=reply.model_dump())
            return reply
        finally:
            writer.close()
            with contextlib.suppress(OSError):
                await writer.wait_closed()

    return await asyncio.wait_for(_exchange(), timeout)


__all__ = ["exchange", "exchange_async"]
